"""
Environment-driven configuration, logger naming and the Prometheus
counter factory.
"""

import logging

from prometheus_client import REGISTRY, CollectorRegistry

from uvctypes.config import EngineConfig, ScanFlags, get_config, set_config
from uvctypes.logger import configure_logging, get_logger
from uvctypes.metrics import create_engine_metrics, get_engine_prometheus_metrics
from uvctypes.parser import parse_schema
from uvctypes.value import ValueBuffer


def test_defaults(monkeypatch):
    for name in ("UVCTYPES_LOG_LEVEL", "UVCTYPES_SCAN_WARNINGS", "UVCTYPES_SCAN_INFO", "UVCTYPES_FRACTIONAL"):
        monkeypatch.delenv(name, raising=False)
    config = EngineConfig.from_env()
    assert config == EngineConfig()
    assert config.scan_flags is ScanFlags.NONE
    assert config.log_level == "WARNING"
    assert config.allow_fractional is False


def test_from_env(monkeypatch):
    monkeypatch.setenv("UVCTYPES_LOG_LEVEL", "debug")
    monkeypatch.setenv("UVCTYPES_SCAN_WARNINGS", "yes")
    monkeypatch.setenv("UVCTYPES_SCAN_INFO", "1")
    monkeypatch.setenv("UVCTYPES_FRACTIONAL", "true")
    config = EngineConfig.from_env()
    assert config.log_level == "DEBUG"
    assert config.scan_flags == ScanFlags.SHOW_WARNINGS | ScanFlags.SHOW_INFO
    assert config.allow_fractional is True


def test_get_config_is_cached_until_reset(monkeypatch):
    monkeypatch.delenv("UVCTYPES_SCAN_WARNINGS", raising=False)
    first = get_config()
    monkeypatch.setenv("UVCTYPES_SCAN_WARNINGS", "1")
    assert get_config() is first
    set_config(None)
    assert ScanFlags.SHOW_WARNINGS in get_config().scan_flags


def test_with_helpers_return_copies():
    base = EngineConfig()
    flagged = base.with_scan_flags(ScanFlags.SHOW_INFO)
    assert flagged.scan_flags is ScanFlags.SHOW_INFO
    assert base.scan_flags is ScanFlags.NONE
    assert base.with_fractional().allow_fractional is True


def test_scan_flags_default_from_config(caplog):
    value = ValueBuffer(parse_schema("{S2 pan; S2 tilt}"))
    set_config(EngineConfig(scan_flags=ScanFlags.SHOW_WARNINGS))
    with caplog.at_level(logging.WARNING, logger="uvctypes"):
        assert value.scan("{zoom=1}") is False
    assert "unknown field 'zoom'" in caplog.text


def test_get_logger_names():
    assert get_logger("uvctypes.scanner").name == "uvctypes.scanner"
    assert get_logger("uvctypes").name == "uvctypes"
    assert get_logger("tools").name == "uvctypes.tools"


def test_configure_logging_does_not_stack_handlers():
    root = configure_logging("info")
    configure_logging("debug")
    marked = [h for h in root.handlers if getattr(h, "_uvctypes_handler", False)]
    assert len(marked) == 1
    assert root.level == logging.DEBUG


def test_configure_logging_env_fallback(monkeypatch):
    monkeypatch.setenv("UVCTYPES_LOG_LEVEL", "ERROR")
    assert configure_logging().level == logging.ERROR
    assert configure_logging("nonsense").level == logging.WARNING


def test_metrics_on_a_private_registry():
    registry = CollectorRegistry()
    metrics = create_engine_metrics(registry)
    metrics["schemas_rejected"].labels(reason="bad_type").inc()
    metrics["byte_swaps"].labels(direction="host_to_wire").inc(2)
    assert registry.get_sample_value(
        "uvctypes_schemas_rejected_total", {"reason": "bad_type"}
    ) == 1.0
    assert registry.get_sample_value(
        "uvctypes_byte_swaps_total", {"direction": "host_to_wire"}
    ) == 2.0


def test_engine_metrics_are_the_live_counters():
    live = get_engine_prometheus_metrics()
    assert len(live) == 5
    assert get_engine_prometheus_metrics() == live
    before = REGISTRY.get_sample_value("uvctypes_scans_completed_total") or 0.0
    assert ValueBuffer(parse_schema("{U1}")).scan("7")
    assert REGISTRY.get_sample_value("uvctypes_scans_completed_total") == before + 1

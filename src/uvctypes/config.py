"""config.py - Runtime configuration for the uvctypes engine.

Settings are read from the environment once, on first use of get_config():

    UVCTYPES_LOG_LEVEL      log level for configure_logging() (default WARNING)
    UVCTYPES_SCAN_WARNINGS  "1" to log why a value text was rejected
    UVCTYPES_SCAN_INFO      "1" to log per-field scanner progress
    UVCTYPES_FRACTIONAL     "1" to accept fractional values between minimum/maximum
"""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from enum import Flag


class ScanFlags(Flag):
    NONE = 0
    SHOW_WARNINGS = 1 << 0
    SHOW_INFO = 1 << 1


def _env_flag(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class EngineConfig:
    """Configuration for scanning and diagnostics.

    Immutable; use the with_* helpers to derive modified copies.
    """

    scan_flags: ScanFlags = ScanFlags.NONE
    log_level: str = "WARNING"
    # Map literals such as 0.25 onto the minimum..maximum range of a field
    allow_fractional: bool = False

    @classmethod
    def from_env(cls) -> EngineConfig:
        flags = ScanFlags.NONE
        if _env_flag("UVCTYPES_SCAN_WARNINGS"):
            flags |= ScanFlags.SHOW_WARNINGS
        if _env_flag("UVCTYPES_SCAN_INFO"):
            flags |= ScanFlags.SHOW_INFO
        return cls(
            scan_flags=flags,
            log_level=os.getenv("UVCTYPES_LOG_LEVEL", "WARNING").upper(),
            allow_fractional=_env_flag("UVCTYPES_FRACTIONAL"),
        )

    def with_scan_flags(self, flags: ScanFlags) -> EngineConfig:
        return replace(self, scan_flags=flags)

    def with_fractional(self, enabled: bool = True) -> EngineConfig:
        return replace(self, allow_fractional=enabled)


_config: EngineConfig | None = None


def get_config() -> EngineConfig:
    global _config
    if _config is None:
        _config = EngineConfig.from_env()
    return _config


def set_config(config: EngineConfig | None) -> None:
    """Install a process-wide config; None re-reads the environment on next use."""
    global _config
    _config = config

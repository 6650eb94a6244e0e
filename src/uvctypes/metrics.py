"""metrics.py - Prometheus counters for schema parsing, scanning and byte swapping"""

from __future__ import annotations

from typing import Any

from prometheus_client import REGISTRY, CollectorRegistry, Counter


def create_engine_metrics(registry: CollectorRegistry | None = None) -> dict[str, Any]:
    """Create the engine counters on a registry (None means the global one)."""
    if registry is None:
        registry = REGISTRY
    schemas_parsed = Counter(
        "uvctypes_schemas_parsed_total",
        "Total number of type descriptions compiled into a schema",
        registry=registry,
    )
    schemas_rejected = Counter(
        "uvctypes_schemas_rejected_total",
        "Total number of type descriptions rejected by the parser",
        ["reason"],
        registry=registry,
    )
    scans_completed = Counter(
        "uvctypes_scans_completed_total",
        "Total number of value texts scanned successfully into a buffer",
        registry=registry,
    )
    scans_failed = Counter(
        "uvctypes_scans_failed_total",
        "Total number of value texts that could not be scanned",
        registry=registry,
    )
    byte_swaps = Counter(
        "uvctypes_byte_swaps_total",
        "Total number of buffers converted between host and wire order",
        ["direction"],
        registry=registry,
    )
    return {
        "schemas_parsed": schemas_parsed,
        "schemas_rejected": schemas_rejected,
        "scans_completed": scans_completed,
        "scans_failed": scans_failed,
        "byte_swaps": byte_swaps,
    }


# Default global metrics
_default_metrics = create_engine_metrics()
schemas_parsed = _default_metrics["schemas_parsed"]
schemas_rejected = _default_metrics["schemas_rejected"]
scans_completed = _default_metrics["scans_completed"]
scans_failed = _default_metrics["scans_failed"]
byte_swaps = _default_metrics["byte_swaps"]


def get_engine_prometheus_metrics() -> list[Any]:
    """The live engine counters, registered on the global registry.

    Use create_engine_metrics(registry) to build a separate, unused set.
    """
    return list(_default_metrics.values())

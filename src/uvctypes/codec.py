"""codec.py - Byte-order conversion between host and little-endian wire layout.

Every field wider than one byte is swapped in place; single-byte fields are
never touched. The conversion is expressed as a numpy cast between two
structured dtypes of the same Schema that differ only in byte order.
"""

from __future__ import annotations

import numpy as np

from .constants import WIRE_BYTEORDER
from .exceptions import BufferSizeError
from .logger import get_logger
from .metrics import byte_swaps
from .schema import Schema
from .utils import normalize_byteorder

logger = get_logger(__name__)


def needs_swap(schema: Schema, host_byteorder: str | None = None) -> bool:
    """True when converting buffers of this schema would move any bytes."""
    if schema.needs_no_byte_swap:
        return False
    return normalize_byteorder(host_byteorder) != WIRE_BYTEORDER


def _check_size(schema: Schema, buffer: bytearray | memoryview) -> None:
    nbytes = memoryview(buffer).nbytes
    if nbytes != schema.byte_size:
        raise BufferSizeError(schema.byte_size, nbytes)


def _convert(
    schema: Schema, buffer: bytearray | memoryview, source: str, target: str
) -> None:
    view = memoryview(buffer)
    if view.readonly:
        raise TypeError("Byte-order conversion needs a writable buffer")
    _check_size(schema, view)
    record = np.frombuffer(view, dtype=schema.dtype(source), count=1)
    converted = record.astype(schema.dtype(target))
    view.cast("B")[:] = converted.tobytes()


def host_to_wire(
    schema: Schema, buffer: bytearray | memoryview, host_byteorder: str | None = None
) -> bool:
    """Swap multi-byte fields of buffer from host order to wire order.

    Returns True when bytes were rearranged, False for the no-op cases
    (single-byte-only schema or a little-endian host).
    """
    if not needs_swap(schema, host_byteorder):
        _check_size(schema, buffer)
        return False
    _convert(schema, buffer, normalize_byteorder(host_byteorder), WIRE_BYTEORDER)
    byte_swaps.labels(direction="host_to_wire").inc()
    logger.debug(f"Swapped {schema.signature} buffer to wire order")
    return True


def wire_to_host(
    schema: Schema, buffer: bytearray | memoryview, host_byteorder: str | None = None
) -> bool:
    """Swap multi-byte fields of buffer from wire order to host order."""
    if not needs_swap(schema, host_byteorder):
        _check_size(schema, buffer)
        return False
    _convert(schema, buffer, WIRE_BYTEORDER, normalize_byteorder(host_byteorder))
    byte_swaps.labels(direction="wire_to_host").inc()
    logger.debug(f"Swapped {schema.signature} buffer to host order")
    return True

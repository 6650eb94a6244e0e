"""formatter.py - Render buffers structured by a Schema as text.

Single-field schemas render the bare value (``-300``, ``true``); records
with several fields render ``{name=value,...}`` in declaration order with no
whitespace, which the scanner accepts back unchanged.
"""

from __future__ import annotations

import numpy as np

from .constants import AtomicType
from .exceptions import BufferSizeError
from .schema import Schema


def read_component(
    atomic_type: AtomicType, raw: bytes | memoryview, byteorder: str | None = None
) -> int | bool:
    """Decode one field's bytes (host order) into a Python value."""
    match atomic_type:
        case AtomicType.INVALID:
            raise ValueError("Cannot read a field of INVALID type")
        case AtomicType.BOOLEAN:
            return bool(raw[0])
        case _:
            return int(np.frombuffer(raw, dtype=atomic_type.dtype(byteorder), count=1)[0])


def format_component(
    atomic_type: AtomicType, raw: bytes | memoryview, byteorder: str | None = None
) -> str:
    if atomic_type is AtomicType.INVALID:
        return ""
    value = read_component(atomic_type, raw, byteorder)
    if atomic_type is AtomicType.BOOLEAN:
        return "true" if value else "false"
    return str(value)


def format_buffer(
    schema: Schema, buffer: bytes | bytearray | memoryview, host_byteorder: str | None = None
) -> str:
    """Textual form of a host-order buffer, e.g. ``"{pan=3600,tilt=-360000}"``."""
    view = memoryview(buffer).cast("B")
    if view.nbytes != schema.byte_size:
        raise BufferSizeError(schema.byte_size, view.nbytes)

    if schema.field_count == 1:
        field = schema.fields[0]
        return format_component(field.type, view[: field.byte_size], host_byteorder)

    parts = []
    for field, offset in zip(schema.fields, schema.offsets):
        raw = view[offset : offset + field.byte_size]
        parts.append(f"{field.name}={format_component(field.type, raw, host_byteorder)}")
    return "{" + ",".join(parts) + "}"


def type_summary(schema: Schema) -> str:
    """Human description of a schema's shape, for help output."""
    if schema.field_count == 1:
        return f"single value, {schema.fields[0].type.verbose_name}"
    inner = "; ".join(f"{f.type.verbose_name} {f.name}" for f in schema.fields)
    return f"({inner})"

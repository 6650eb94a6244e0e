"""value.py - ValueBuffer: a Schema paired with an owned, packed byte buffer"""

from __future__ import annotations

import numpy as np

from . import codec, formatter, scanner
from .config import ScanFlags
from .constants import INVALID_INDEX
from .exceptions import BufferSizeError, FieldLookupError
from .logger import get_logger
from .schema import Schema
from .utils import assumption, normalize_byteorder

logger = get_logger(__name__)


class ValueBuffer:
    """
    ValueBuffer: byte storage laid out according to a Schema.

    - Storage is a zero-filled bytearray of exactly schema.byte_size bytes and
      never changes length.
    - Tracks whether the bytes are currently in host or wire (little-endian)
      order; conversions are refused when already in the requested order.
    - Field access works by index or case-insensitive name.
    - The Schema is shared; the bytes are owned by this instance alone.

    Example:
        pan_tilt = ValueBuffer(parse_schema("{S4 pan; S4 tilt}"))
        pan_tilt.scan("{pan=3600, tilt=-360000}")
        pan_tilt.to_wire_order()
        transport.send(pan_tilt.raw)
    """

    __slots__ = ("_schema", "_data", "_host_byteorder", "_is_wire_order")

    def __init__(self, schema: Schema, host_byteorder: str | None = None) -> None:
        assert assumption(schema, Schema)
        self._schema = schema
        self._data = bytearray(schema.byte_size)
        self._host_byteorder = normalize_byteorder(host_byteorder)
        self._is_wire_order = False

    @classmethod
    def create(cls, schema: Schema | None, host_byteorder: str | None = None) -> ValueBuffer | None:
        """Allocate a buffer for schema; None when no schema was produced."""
        if schema is None:
            return None
        return cls(schema, host_byteorder)

    @classmethod
    def from_bytes(
        cls,
        schema: Schema,
        data: bytes | bytearray | memoryview,
        wire_order: bool = True,
        host_byteorder: str | None = None,
    ) -> ValueBuffer:
        """Wrap a copy of bytes received from a peer.

        With wire_order=True (the default) the result is marked as being in
        wire order; call to_host_order() before reading fields.
        """
        view = memoryview(data).cast("B")
        if view.nbytes != schema.byte_size:
            raise BufferSizeError(schema.byte_size, view.nbytes)
        value = cls(schema, host_byteorder)
        value._data[:] = view
        value._is_wire_order = wire_order
        return value

    @property
    def schema(self) -> Schema:
        return self._schema

    @property
    def byte_size(self) -> int:
        return self._schema.byte_size

    @property
    def host_byteorder(self) -> str:
        return self._host_byteorder

    @property
    def data(self) -> memoryview:
        """Writable view over the whole buffer."""
        return memoryview(self._data)

    @property
    def raw(self) -> bytes:
        """Snapshot of the buffer bytes in their current order."""
        return bytes(self._data)

    def offset_of_field(self, field: int | str) -> int:
        return self._schema.offset_of_field(field)

    def field_view(self, field: int | str) -> memoryview | None:
        """Writable view over one field's bytes, or None for an unknown field."""
        field_range = self._schema.field_slice(field)
        if field_range is None:
            return None
        return memoryview(self._data)[field_range]

    def get_field(self, field: int | str) -> int | bool:
        """Decoded value of a field; the buffer must be in host order."""
        index = self._schema.resolve_index(field)
        if index == INVALID_INDEX:
            raise FieldLookupError(field)
        if self._is_wire_order:
            logger.warning(f"Reading field {field!r} of a buffer still in wire order")
        return formatter.read_component(
            self._schema.field_type(index),
            self._data[self._schema.field_slice(index)],
            self._host_byteorder,
        )

    def set_field(self, field: int | str, value: int | bool) -> None:
        """Store value (truncated to the field width) in host order.

        A buffer in wire order is converted back to host order first.
        """
        index = self._schema.resolve_index(field)
        if index == INVALID_INDEX:
            raise FieldLookupError(field)
        self._ensure_host_order()
        self._data[self._schema.field_slice(index)] = scanner.pack_component(
            self._schema.field_type(index), int(value), self._host_byteorder
        )

    @property
    def is_wire_order(self) -> bool:
        return self._is_wire_order

    def _ensure_host_order(self) -> None:
        # Writers always produce host-order bytes
        if self._is_wire_order:
            logger.debug(f"Converting {self!r} to host order before writing")
            self.to_host_order()

    def to_wire_order(self) -> bool:
        """Convert host -> wire; False (and no change) if already in wire order."""
        if self._is_wire_order:
            logger.debug("Buffer already in wire order, refusing to swap again")
            return False
        codec.host_to_wire(self._schema, self._data, self._host_byteorder)
        self._is_wire_order = True
        return True

    def to_host_order(self) -> bool:
        """Convert wire -> host; False (and no change) if already in host order."""
        if not self._is_wire_order:
            logger.debug("Buffer already in host order, refusing to swap again")
            return False
        codec.wire_to_host(self._schema, self._data, self._host_byteorder)
        self._is_wire_order = False
        return True

    def copy_from(self, other: ValueBuffer) -> bool:
        """Copy bytes and byte-order state from a structurally equal buffer."""
        if not isinstance(other, ValueBuffer) or not self._schema.is_equal(other._schema):
            logger.debug(f"Refusing copy from {other!r} into {self!r}: types differ")
            return False
        self._data[:] = other._data
        self._is_wire_order = other._is_wire_order
        return True

    def scan(
        self,
        text: str,
        minimum: ValueBuffer | None = None,
        maximum: ValueBuffer | None = None,
        step: ValueBuffer | None = None,
        default: ValueBuffer | None = None,
        flags: ScanFlags | None = None,
        allow_fractional: bool | None = None,
    ) -> bool:
        """Fill this buffer from value text; see scanner.scan.

        A buffer in wire order is converted back to host order first and
        stays in host order afterwards.
        """
        self._ensure_host_order()
        return scanner.scan(
            self._schema,
            text,
            self._data,
            minimum=minimum,
            maximum=maximum,
            step=step,
            default=default,
            flags=flags,
            host_byteorder=self._host_byteorder,
            allow_fractional=allow_fractional,
        )

    def to_string(self) -> str:
        """Textual form of the buffer, e.g. ``"{pan=3600,tilt=-360000}"``."""
        return formatter.format_buffer(self._schema, self._data, self._host_byteorder)

    def type_summary(self) -> str:
        return formatter.type_summary(self._schema)

    def as_array(self) -> np.ndarray:
        """Zero-copy numpy record view of the buffer in its current byte order."""
        order = "little" if self._is_wire_order else self._host_byteorder
        return np.frombuffer(self._data, dtype=self._schema.dtype(order), count=1)

    def is_equal(self, other: ValueBuffer) -> bool:
        """Same structure and identical bytes."""
        if not isinstance(other, ValueBuffer):
            return False
        return self._schema.is_equal(other._schema) and self._data == other._data

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ValueBuffer):
            return NotImplemented
        return self.is_equal(other)

    __hash__ = None  # mutable

    def __len__(self) -> int:
        return len(self._data)

    def __bytes__(self) -> bytes:
        return self.raw

    def __str__(self) -> str:
        return self.to_string()

    def __repr__(self) -> str:
        order = "wire" if self._is_wire_order else "host"
        return f"ValueBuffer({self._schema.signature!r}, {self.raw.hex()!r}, {order})"

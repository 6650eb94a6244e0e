"""schema.py - Immutable compiled layout of a packed control record.

A Schema is an ordered, non-empty list of named atomic fields packed with no
padding, in declaration order. It is the structural meta-data shared by any
number of ValueBuffers; nothing in it changes after construction.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Iterator, Sequence

import numpy as np

from .constants import INVALID_INDEX, AtomicType
from .exceptions import DuplicateFieldError, SchemaDefinitionError
from .logger import get_logger
from .utils import assumption, dtype_prefix

logger = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class Field:
    name: str
    type: AtomicType

    @property
    def byte_size(self) -> int:
        return self.type.byte_size


class Schema:
    """
    Schema: ordered, immutable sequence of named atomic fields.

    - Field names are unique under case-insensitive comparison.
    - Offsets and total size are computed once at construction.
    - Equality is structural: same ordered atomic types (names ignored).
    - Renders itself as a numpy structured dtype for any byte order.
    """

    __slots__ = (
        "_fields",
        "_offsets",
        "_byte_size",
        "_needs_no_byte_swap",
        "_index_by_name",
        "_dtypes",
    )

    def __init__(self, fields: Iterable[Field]) -> None:
        fields = tuple(fields)
        if not fields:
            raise SchemaDefinitionError("A schema needs at least one field")

        index_by_name: dict[str, int] = {}
        offsets: list[int] = []
        offset = 0
        for idx, field in enumerate(fields):
            assert assumption(field, Field)
            if not field.name:
                raise SchemaDefinitionError(f"Field {idx} has an empty name")
            if not isinstance(field.type, AtomicType) or not field.type.is_valid:
                raise SchemaDefinitionError(
                    f"Field '{field.name}' has invalid type {field.type!r}"
                )
            key = field.name.lower()
            if key in index_by_name:
                raise DuplicateFieldError(field.name)
            index_by_name[key] = idx
            offsets.append(offset)
            offset += field.byte_size

        self._fields = fields
        self._offsets = tuple(offsets)
        self._byte_size = offset
        self._needs_no_byte_swap = all(f.byte_size == 1 for f in fields)
        self._index_by_name = index_by_name
        self._dtypes: dict[str, np.dtype] = {}

    @classmethod
    def from_names_and_types(
        cls, names: Sequence[str], types: Sequence[AtomicType]
    ) -> Schema | None:
        """Build a Schema from parallel name/type lists.

        Returns None when the lists differ in length, are empty, or contain an
        empty name, an invalid type or a repeated name.
        """
        if len(names) != len(types):
            logger.warning(
                f"Schema field name/type count mismatch: {len(names)} names, {len(types)} types"
            )
            return None
        try:
            return cls(Field(name, t) for name, t in zip(names, types))
        except SchemaDefinitionError as e:
            logger.warning(f"Cannot build schema: {e}")
            return None

    @classmethod
    def from_string(cls, text: str) -> Schema | None:
        """Parse a type description such as ``"{S2 pan; S2 tilt}"``."""
        from .parser import parse_schema

        return parse_schema(text)

    @property
    def fields(self) -> tuple[Field, ...]:
        return self._fields

    @property
    def field_count(self) -> int:
        return len(self._fields)

    @property
    def byte_size(self) -> int:
        """Number of bytes a buffer structured by this schema occupies."""
        return self._byte_size

    @property
    def offsets(self) -> tuple[int, ...]:
        return self._offsets

    @property
    def needs_no_byte_swap(self) -> bool:
        """True when every field is a single byte wide."""
        return self._needs_no_byte_swap

    @property
    def types(self) -> tuple[AtomicType, ...]:
        return tuple(f.type for f in self._fields)

    @property
    def signature(self) -> str:
        """Canonical type description that parses back to an equal schema."""
        parts = ";".join(f"{f.type.code} {f.name}" for f in self._fields)
        return "{" + parts + "}"

    def field_name(self, index: int) -> str:
        """Name of the field at index, or "" when out of range."""
        if 0 <= index < len(self._fields):
            return self._fields[index].name
        return ""

    def field_type(self, index: int) -> AtomicType:
        """Type of the field at index, or INVALID when out of range."""
        if 0 <= index < len(self._fields):
            return self._fields[index].type
        return AtomicType.INVALID

    def index_of_field(self, name: str) -> int:
        """Case-insensitive field lookup; INVALID_INDEX when not found."""
        return self._index_by_name.get(name.lower(), INVALID_INDEX)

    def resolve_index(self, field: int | str) -> int:
        """Accept a field index or name and return a valid index or INVALID_INDEX."""
        if isinstance(field, str):
            return self.index_of_field(field)
        if isinstance(field, (int, np.integer)) and 0 <= field < len(self._fields):
            return int(field)
        return INVALID_INDEX

    def offset_of_field(self, field: int | str) -> int:
        """Byte offset of a field given by index or name, or INVALID_INDEX."""
        index = self.resolve_index(field)
        if index == INVALID_INDEX:
            return INVALID_INDEX
        return self._offsets[index]

    def field_slice(self, field: int | str) -> slice | None:
        """Byte range of a field within a buffer, or None when not found."""
        index = self.resolve_index(field)
        if index == INVALID_INDEX:
            return None
        start = self._offsets[index]
        return slice(start, start + self._fields[index].byte_size)

    def dtype(self, byteorder: str | None = None) -> np.dtype:
        """Packed numpy structured dtype for this schema.

        byteorder accepts "little"/"<", "big"/">" or None/"=" for the host.
        """
        prefix = dtype_prefix(byteorder)
        cached = self._dtypes.get(prefix)
        if cached is None:
            cached = np.dtype({
                "names": [f.name for f in self._fields],
                "formats": [f.type.dtype(byteorder) for f in self._fields],
                "offsets": list(self._offsets),
                "itemsize": self._byte_size,
            })
            self._dtypes[prefix] = cached
        return cached

    def is_equal(self, other: Schema) -> bool:
        """Structural equality: field count, ordered types and byte size."""
        if not isinstance(other, Schema):
            return False
        if self.field_count != other.field_count or self.byte_size != other.byte_size:
            return False
        return all(a.type is b.type for a, b in zip(self._fields, other._fields))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Schema):
            return NotImplemented
        return self.is_equal(other)

    def __hash__(self) -> int:
        return hash(self.types)

    def __len__(self) -> int:
        return len(self._fields)

    def __iter__(self) -> Iterator[Field]:
        return iter(self._fields)

    def __repr__(self) -> str:
        return f"Schema({self.signature!r})"

    def __str__(self) -> str:
        return self.signature

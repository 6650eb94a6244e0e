"""constants.py - Atomic type catalog, canonical dtypes and sentinels for uvctypes."""

from __future__ import annotations

from enum import Enum

import numpy as np

from .logger import get_logger
from .utils import dtype_prefix

logger = get_logger(__name__)

# Returned by offset/index lookups for an unknown field name or index
INVALID_INDEX = -1

# Fixed byte order of the wire peer (USB is little-endian)
WIRE_BYTEORDER = "little"

# Name given to the anonymous field of a one-field schema such as "{S2}"
DEFAULT_FIELD_NAME = "value"

# Whole-value and per-field keywords understood by the scanner
KEYWORD_DEFAULT = "default"
KEYWORD_MINIMUM = "minimum"
KEYWORD_MAXIMUM = "maximum"

# Boolean words, checked in this order
TRUE_WORDS = ("y", "yes", "true", "t", "1")
FALSE_WORDS = ("n", "no", "false", "f", "0")


class AtomicType(Enum):
    INVALID = 0
    BOOLEAN = 1
    SINT8 = 2
    UINT8 = 3
    BITMAP8 = 4
    SINT16 = 5
    UINT16 = 6
    BITMAP16 = 7
    SINT32 = 8
    UINT32 = 9
    BITMAP32 = 10
    SINT64 = 11
    UINT64 = 12
    BITMAP64 = 13

    @classmethod
    def from_code(cls, code: str) -> AtomicType:
        """Look up a short type code (``"S2"``, ``"m4"``, ...) case-insensitively.

        Unknown codes map to INVALID rather than raising.
        """
        return _TYPES_BY_CODE.get(code.upper(), cls.INVALID)

    @property
    def byte_size(self) -> int:
        return _BYTE_SIZES[self]

    @property
    def code(self) -> str:
        return _CODES[self]

    @property
    def verbose_name(self) -> str:
        return _VERBOSE_NAMES[self]

    @property
    def is_valid(self) -> bool:
        return self is not AtomicType.INVALID

    @property
    def is_signed(self) -> bool:
        return self in (
            AtomicType.SINT8,
            AtomicType.SINT16,
            AtomicType.SINT32,
            AtomicType.SINT64,
        )

    @property
    def is_bitmap(self) -> bool:
        return self in (
            AtomicType.BITMAP8,
            AtomicType.BITMAP16,
            AtomicType.BITMAP32,
            AtomicType.BITMAP64,
        )

    def dtype(self, byteorder: str | None = None) -> np.dtype:
        """numpy scalar dtype holding this type in the given byte order."""
        if not self.is_valid:
            raise ValueError("INVALID atomic type has no dtype")
        kind = "i" if self.is_signed else "u"
        return np.dtype(f"{dtype_prefix(byteorder)}{kind}{self.byte_size}")


_BYTE_SIZES: dict[AtomicType, int] = {
    AtomicType.INVALID: 0,
    AtomicType.BOOLEAN: 1,
    AtomicType.SINT8: 1,
    AtomicType.UINT8: 1,
    AtomicType.BITMAP8: 1,
    AtomicType.SINT16: 2,
    AtomicType.UINT16: 2,
    AtomicType.BITMAP16: 2,
    AtomicType.SINT32: 4,
    AtomicType.UINT32: 4,
    AtomicType.BITMAP32: 4,
    AtomicType.SINT64: 8,
    AtomicType.UINT64: 8,
    AtomicType.BITMAP64: 8,
}

_CODES: dict[AtomicType, str] = {
    AtomicType.INVALID: "<invalid>",
    AtomicType.BOOLEAN: "B",
    AtomicType.SINT8: "S1",
    AtomicType.UINT8: "U1",
    AtomicType.BITMAP8: "M1",
    AtomicType.SINT16: "S2",
    AtomicType.UINT16: "U2",
    AtomicType.BITMAP16: "M2",
    AtomicType.SINT32: "S4",
    AtomicType.UINT32: "U4",
    AtomicType.BITMAP32: "M4",
    AtomicType.SINT64: "S8",
    AtomicType.UINT64: "U8",
    AtomicType.BITMAP64: "M8",
}

_VERBOSE_NAMES: dict[AtomicType, str] = {
    AtomicType.INVALID: "<invalid>",
    AtomicType.BOOLEAN: "boolean",
    AtomicType.SINT8: "signed 8-bit integer",
    AtomicType.UINT8: "unsigned 8-bit integer",
    AtomicType.BITMAP8: "unsigned 8-bit bitmap",
    AtomicType.SINT16: "signed 16-bit integer",
    AtomicType.UINT16: "unsigned 16-bit integer",
    AtomicType.BITMAP16: "unsigned 16-bit bitmap",
    AtomicType.SINT32: "signed 32-bit integer",
    AtomicType.UINT32: "unsigned 32-bit integer",
    AtomicType.BITMAP32: "unsigned 32-bit bitmap",
    AtomicType.SINT64: "signed 64-bit integer",
    AtomicType.UINT64: "unsigned 64-bit integer",
    AtomicType.BITMAP64: "unsigned 64-bit bitmap",
}

_TYPES_BY_CODE: dict[str, AtomicType] = {
    code: t for t, code in _CODES.items() if t is not AtomicType.INVALID
}


def component_byte_size(component_type: object) -> int:
    """Byte width of an atomic type, or 0 for INVALID and non-members."""
    if isinstance(component_type, AtomicType):
        return component_type.byte_size
    return 0

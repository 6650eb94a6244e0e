"""
Atomic type catalog: widths, short codes, verbose names and numpy dtypes.
"""

import numpy as np
import pytest

from uvctypes.constants import AtomicType, component_byte_size

CATALOG = [
    (AtomicType.BOOLEAN, "B", 1, "boolean"),
    (AtomicType.SINT8, "S1", 1, "signed 8-bit integer"),
    (AtomicType.UINT8, "U1", 1, "unsigned 8-bit integer"),
    (AtomicType.BITMAP8, "M1", 1, "unsigned 8-bit bitmap"),
    (AtomicType.SINT16, "S2", 2, "signed 16-bit integer"),
    (AtomicType.UINT16, "U2", 2, "unsigned 16-bit integer"),
    (AtomicType.BITMAP16, "M2", 2, "unsigned 16-bit bitmap"),
    (AtomicType.SINT32, "S4", 4, "signed 32-bit integer"),
    (AtomicType.UINT32, "U4", 4, "unsigned 32-bit integer"),
    (AtomicType.BITMAP32, "M4", 4, "unsigned 32-bit bitmap"),
    (AtomicType.SINT64, "S8", 8, "signed 64-bit integer"),
    (AtomicType.UINT64, "U8", 8, "unsigned 64-bit integer"),
    (AtomicType.BITMAP64, "M8", 8, "unsigned 64-bit bitmap"),
]


@pytest.mark.parametrize("atomic_type,code,width,verbose", CATALOG)
def test_catalog_entry(atomic_type, code, width, verbose):
    assert atomic_type.code == code
    assert atomic_type.byte_size == width
    assert component_byte_size(atomic_type) == width
    assert atomic_type.verbose_name == verbose
    assert AtomicType.from_code(code) is atomic_type
    assert AtomicType.from_code(code.lower()) is atomic_type


def test_invalid_sentinel():
    assert AtomicType.INVALID.byte_size == 0
    assert component_byte_size(AtomicType.INVALID) == 0
    assert AtomicType.INVALID.code == "<invalid>"
    assert AtomicType.INVALID.verbose_name == "<invalid>"
    assert not AtomicType.INVALID.is_valid


def test_non_member_has_no_width():
    assert component_byte_size("S2") == 0
    assert component_byte_size(None) == 0


@pytest.mark.parametrize("code", ["X2", "S3", "", "B1", "<invalid>"])
def test_unknown_codes(code):
    assert AtomicType.from_code(code) is AtomicType.INVALID


def test_signedness_and_bitmaps():
    assert AtomicType.SINT32.is_signed
    assert not AtomicType.UINT32.is_signed
    assert not AtomicType.BITMAP32.is_signed
    assert AtomicType.BITMAP64.is_bitmap
    assert not AtomicType.UINT64.is_bitmap
    assert not AtomicType.BOOLEAN.is_signed


def test_dtypes():
    assert AtomicType.SINT16.dtype("little") == np.dtype("<i2")
    assert AtomicType.SINT16.dtype("big") == np.dtype(">i2")
    assert AtomicType.BITMAP32.dtype("little") == np.dtype("<u4")
    assert AtomicType.BOOLEAN.dtype() == np.dtype("u1")
    with pytest.raises(ValueError):
        AtomicType.INVALID.dtype()

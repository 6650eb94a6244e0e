"""scanner.py - Parse human-supplied value text into Schema-structured buffers.

Accepted forms::

    42                      bare value, single-field schemas only
    default                 whole value copied from the default companion
    {100, 200}              positional, in declaration order
    {tilt=200, pan=100}     named, any order, any subset
    {pan=default, tilt=0x10}

Field literals are boolean words (y/yes/true/t/1, n/no/false/f/0), the
keywords default/minimum/maximum, or integers in C base-0 form: ``0x`` hex,
leading-``0`` octal, or decimal. Integers are truncated to the field width,
never range-checked.

A failed scan leaves the fields written before the failing one in place;
the buffer contents are undefined after a False return.
"""

from __future__ import annotations

import math
import re
from typing import NamedTuple

import numpy as np

from . import codec
from .config import ScanFlags, get_config
from .constants import (
    FALSE_WORDS,
    KEYWORD_DEFAULT,
    KEYWORD_MAXIMUM,
    KEYWORD_MINIMUM,
    TRUE_WORDS,
    AtomicType,
)
from .exceptions import BufferSizeError, ValueScanError
from .formatter import read_component
from .logger import get_logger
from .metrics import scans_completed, scans_failed
from .schema import Schema
from .utils import dtype_prefix

logger = get_logger(__name__)

# C strtoll(..., 0) integer forms
_INTEGER = re.compile(r"([+-]?)(?:0[xX]([0-9a-fA-F]+)|(0[0-7]*)|([1-9][0-9]*))")
_FRACTION = re.compile(r"[+-]?(?:[0-9]+\.[0-9]*|\.[0-9]+)")
_COMPONENT_SPLIT = re.compile(r"[\s,]+")
_EQUALS = re.compile(r"\s*=\s*")


class Companions(NamedTuple):
    """Optional limit buffers consulted by keywords and fractional values."""

    minimum: memoryview | None = None
    maximum: memoryview | None = None
    step: memoryview | None = None
    default: memoryview | None = None

    def for_field(self, field_range: slice) -> Companions:
        return Companions(*(None if c is None else c[field_range] for c in self))

    def for_keyword(self, keyword: str) -> memoryview | None:
        match keyword:
            case "default":
                return self.default
            case "minimum":
                return self.minimum
            case "maximum":
                return self.maximum
        return None


def _companion_view(schema: Schema, buffer, label: str) -> memoryview | None:
    if buffer is None:
        return None
    if hasattr(buffer, "data") and hasattr(buffer, "schema"):
        # ValueBuffer; limits reported by a device may still be in wire order
        if buffer.is_wire_order:
            host_copy = bytearray(buffer.data)
            codec.wire_to_host(schema, host_copy, buffer.host_byteorder)
            logger.debug(f"Using host-order copy of wire-order {label} companion")
            buffer = host_copy
        else:
            buffer = buffer.data
    view = memoryview(buffer).cast("B")
    if view.nbytes != schema.byte_size:
        raise BufferSizeError(schema.byte_size, view.nbytes)
    logger.debug(f"Using {label} companion buffer ({view.nbytes} bytes)")
    return view


def parse_integer(token: str) -> int | None:
    """Integer value of a C-style literal (``-12``, ``0x1F``, ``017``), or None."""
    m = _INTEGER.fullmatch(token)
    if m is None:
        return None
    sign, hex_digits, octal_digits, decimal_digits = m.groups()
    if hex_digits is not None:
        value = int(hex_digits, 16)
    elif octal_digits is not None:
        value = int(octal_digits, 8)
    else:
        value = int(decimal_digits, 10)
    return -value if sign == "-" else value


def pack_component(atomic_type: AtomicType, value: int, byteorder: str | None = None) -> bytes:
    """Encode value as the field's bytes, truncated to its width."""
    match atomic_type:
        case AtomicType.INVALID:
            raise ValueError("Cannot pack a field of INVALID type")
        case AtomicType.BOOLEAN:
            return b"\x01" if value else b"\x00"
        case _:
            width = atomic_type.byte_size
            masked = int(value) & ((1 << (8 * width)) - 1)
            unsigned = np.dtype(f"{dtype_prefix(byteorder)}u{width}")
            return np.array(masked, dtype=unsigned).tobytes()


def _boolean_word(token: str) -> int | None:
    lowered = token.lower()
    for word in TRUE_WORDS:
        if lowered == word:
            return 1
    for word in FALSE_WORDS:
        if lowered == word:
            return 0
    return None


def _lround(x: float) -> int:
    """Round halves away from zero, like C lround."""
    return int(math.copysign(math.floor(abs(x) + 0.5), x))


def _scan_fraction(
    atomic_type: AtomicType,
    token: str,
    companions: Companions,
    byteorder: str | None,
) -> int:
    if companions.minimum is None or companions.maximum is None:
        raise ValueScanError(token, "fractional value needs minimum and maximum")
    fraction = float(token)
    if not 0.0 <= fraction <= 1.0:
        raise ValueScanError(token, "fractional value outside 0.0 .. 1.0")
    low = int(read_component(atomic_type, companions.minimum, byteorder))
    high = int(read_component(atomic_type, companions.maximum, byteorder))
    value = low + _lround(fraction * (high - low))
    if companions.step is not None:
        step = int(read_component(atomic_type, companions.step, byteorder))
        if step > 0:
            value = low + _lround((value - low) / step) * step
            value = min(value, high)
    return value


def scan_component(
    atomic_type: AtomicType,
    token: str,
    companions: Companions = Companions(),
    byteorder: str | None = None,
    allow_fractional: bool = False,
) -> bytes:
    """Bytes for one field's literal; raises ValueScanError when unusable.

    companions must already be narrowed to this field's byte range.
    """
    token = token.strip()
    if not token:
        raise ValueScanError(token, "empty value")

    lowered = token.lower()
    if lowered in (KEYWORD_DEFAULT, KEYWORD_MINIMUM, KEYWORD_MAXIMUM):
        source = companions.for_keyword(lowered)
        if source is None:
            raise ValueScanError(token, f"no {lowered} value available")
        return bytes(source)

    if atomic_type is AtomicType.BOOLEAN:
        flag = _boolean_word(token)
        if flag is not None:
            return pack_component(atomic_type, flag, byteorder)

    value = parse_integer(token)
    if value is None:
        if allow_fractional and _FRACTION.fullmatch(token):
            value = _scan_fraction(atomic_type, token, companions, byteorder)
        else:
            raise ValueScanError(token, f"not a valid {atomic_type.verbose_name}")
    return pack_component(atomic_type, value, byteorder)


def scan_field(
    atomic_type: AtomicType,
    token: str,
    companions: Companions = Companions(),
    byteorder: str | None = None,
    allow_fractional: bool = False,
) -> bytes | None:
    """Like scan_component, but returns None instead of raising."""
    try:
        return scan_component(atomic_type, token, companions, byteorder, allow_fractional)
    except ValueScanError as e:
        logger.debug(str(e))
        return None


def _split_record(text: str) -> list[str]:
    if not text.startswith("{"):
        raise ValueScanError(text, "expected '{' to open a record")
    close = text.find("}")
    if close < 0:
        raise ValueScanError(text, "missing closing '}'")
    body = _EQUALS.sub("=", text[1:close])
    return [c for c in _COMPONENT_SPLIT.split(body) if c]


def _scan_record(
    schema: Schema,
    text: str,
    view: memoryview,
    companions: Companions,
    flags: ScanFlags,
    byteorder: str | None,
    allow_fractional: bool,
) -> None:
    components = _split_record(text)
    named = any("=" in c for c in components)

    if not named and len(components) > schema.field_count:
        raise ValueScanError(
            text, f"{len(components)} values given for {schema.field_count} fields"
        )

    for position, component in enumerate(components):
        if named:
            name, sep, literal = component.partition("=")
            if not sep:
                raise ValueScanError(component, "expected name=value")
            index = schema.resolve_index(name)
            if index < 0:
                raise ValueScanError(component, f"unknown field '{name}'")
        else:
            index, literal = position, component

        field = schema.fields[index]
        field_range = schema.field_slice(index)
        view[field_range] = scan_component(
            field.type,
            literal,
            companions.for_field(field_range),
            byteorder,
            allow_fractional,
        )
        if ScanFlags.SHOW_INFO in flags:
            logger.info(f"Set field '{field.name}' from '{literal}'")


def scan(
    schema: Schema,
    text: str,
    buffer: bytearray | memoryview,
    minimum=None,
    maximum=None,
    step=None,
    default=None,
    flags: ScanFlags | None = None,
    host_byteorder: str | None = None,
    allow_fractional: bool | None = None,
) -> bool:
    """Fill buffer from value text; True when every given component applied.

    minimum/maximum/step/default are optional companion buffers (bytes-like
    or ValueBuffers of the same schema). Bytes-like companions must be in host
    byte order; a ValueBuffer still in wire order is read through a host-order
    copy.
    """
    config = get_config()
    if flags is None:
        flags = config.scan_flags
    if allow_fractional is None:
        allow_fractional = config.allow_fractional

    view = memoryview(buffer).cast("B")
    if view.readonly:
        raise TypeError("Scanning needs a writable buffer")
    if view.nbytes != schema.byte_size:
        raise BufferSizeError(schema.byte_size, view.nbytes)
    companions = Companions(
        _companion_view(schema, minimum, "minimum"),
        _companion_view(schema, maximum, "maximum"),
        _companion_view(schema, step, "step"),
        _companion_view(schema, default, "default"),
    )

    stripped = text.strip()
    try:
        lowered = stripped.lower()
        if lowered in (KEYWORD_DEFAULT, KEYWORD_MINIMUM, KEYWORD_MAXIMUM):
            source = companions.for_keyword(lowered)
            if source is None:
                raise ValueScanError(text, f"no {lowered} value provided by this control")
            view[:] = source
        elif schema.field_count == 1 and not stripped.startswith("{"):
            field = schema.fields[0]
            view[:] = scan_component(
                field.type, stripped, companions, host_byteorder, allow_fractional
            )
        else:
            _scan_record(
                schema, stripped, view, companions, flags, host_byteorder, allow_fractional
            )
    except ValueScanError as e:
        if ScanFlags.SHOW_WARNINGS in flags:
            logger.warning(str(e))
        else:
            logger.debug(str(e))
        scans_failed.inc()
        return False

    if ScanFlags.SHOW_INFO in flags:
        logger.info(f"Scanned '{stripped}' into {schema.signature}")
    scans_completed.inc()
    return True

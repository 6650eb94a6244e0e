"""parser.py - Compile textual type descriptions into Schemas.

Grammar::

    { TYPE [name]; TYPE name; ... }
    TYPE

TYPE is one of B, S1, U1, M1, S2, U2, M2, S4, U4, M4, S8, U8, M8
(case-insensitive). Names are letters, digits and hyphens and are stored
lower-cased. A field written as ``TYPE}`` takes the name ``value``, so a
one-field schema can be spelled ``{S2}`` or just ``S2``.

Fields are separated by ``;`` and/or whitespace; a trailing ``;`` before the
closing brace is fine and anything after the closing brace is ignored.
"""

from __future__ import annotations

import re

from .constants import DEFAULT_FIELD_NAME, AtomicType
from .exceptions import SchemaDefinitionError
from .logger import get_logger
from .metrics import schemas_parsed, schemas_rejected
from .schema import Field, Schema

logger = get_logger(__name__)

_TYPE_CODE = re.compile(r"B|[SUM][1248]", re.IGNORECASE)
_FIELD_NAME = re.compile(r"[A-Za-z0-9-]+")
_WHITESPACE = re.compile(r"\s*")
_SEPARATORS = re.compile(r"[\s;]*")


def _reject(text: str, reason: str, message: str) -> None:
    logger.warning(f"{message} in: {text}")
    schemas_rejected.labels(reason=reason).inc()
    return None


def parse_schema(text: str) -> Schema | None:
    """Parse a type description; return None if it is malformed.

    Fails on a missing opening or closing brace, an unrecognized type code,
    a field cut short by the end of the text, an empty field name or a
    name repeated (case-insensitively) within the description.
    """
    pos = _WHITESPACE.match(text).end()

    if not text.startswith("{", pos):
        # Bare single type code, e.g. "S2"
        code = text.strip()
        atomic_type = AtomicType.from_code(code) if _TYPE_CODE.fullmatch(code) else AtomicType.INVALID
        if atomic_type.is_valid:
            schemas_parsed.inc()
            return Schema([Field(DEFAULT_FIELD_NAME, atomic_type)])
        return _reject(text, "no_brace", "No opening brace found")
    pos += 1

    fields: list[Field] = []
    seen: set[str] = set()
    while True:
        pos = _SEPARATORS.match(text, pos).end() if fields else _WHITESPACE.match(text, pos).end()
        if pos >= len(text):
            return _reject(text, "early_end", f"Early end to type string at {pos}")
        if text[pos] == "}":
            if not fields:
                return _reject(text, "empty", f"No fields declared at {pos}")
            break

        m = _TYPE_CODE.match(text, pos)
        if m is None:
            return _reject(text, "bad_type", f"Invalid type string at {pos}")
        atomic_type = AtomicType.from_code(m.group())
        pos = _WHITESPACE.match(text, m.end()).end()
        if pos >= len(text):
            return _reject(text, "early_end", f"Early end to type string at {pos}")

        if text[pos] == "}":
            name = DEFAULT_FIELD_NAME
        else:
            m = _FIELD_NAME.match(text, pos)
            if m is None:
                return _reject(text, "bad_name", f"Missing field name at {pos}")
            name = m.group().lower()
            pos = m.end()
            if pos >= len(text):
                return _reject(text, "early_end", f"Early end to type string at {pos}")
            if not (text[pos].isspace() or text[pos] in ";}"):
                return _reject(text, "bad_name", f"Invalid character in field name at {pos}")

        if name in seen:
            return _reject(text, "duplicate", f"Repeated use of field name '{name}' at {pos}")
        seen.add(name)
        fields.append(Field(name, atomic_type))

    try:
        schema = Schema(fields)
    except SchemaDefinitionError as e:
        return _reject(text, "invalid", str(e))
    logger.debug(f"Parsed schema {schema.signature} ({schema.byte_size} bytes)")
    schemas_parsed.inc()
    return schema

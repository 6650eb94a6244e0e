"""exceptions.py - Exception hierarchy for the uvctypes engine.

Defines exceptions for:
- Schema definition errors (empty field lists, invalid types, duplicate names)
- Buffer size mismatches handed to the byte-order codec
- Field lookups that a caller required to succeed
- Value text that cannot be scanned into a buffer

The public parse/scan/copy entry points report failure through their return
values (None / False / INVALID_INDEX); these exceptions surface only for
direct construction and programming errors.
"""

from __future__ import annotations


class UVCTypesError(Exception):
    """Base exception for all uvctypes errors."""

    pass


class SchemaError(UVCTypesError):
    """Base exception for schema-related errors."""

    pass


class SchemaDefinitionError(SchemaError):
    """Raised when a Schema is constructed from an invalid field list.

    Examples:
        - Empty field list
        - Empty field name
        - Field type is the INVALID sentinel
    """

    pass


class DuplicateFieldError(SchemaDefinitionError):
    """Raised when two fields share a case-insensitively equal name."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Repeated use of field name '{name}'")


class BufferSizeError(UVCTypesError):
    """Raised when a buffer does not match the byte size of its schema."""

    def __init__(self, expected: int, actual: int):
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Buffer holds {actual} bytes, schema requires exactly {expected}"
        )


class FieldLookupError(UVCTypesError, KeyError):
    """Raised when a field is addressed by an unknown name or bad index."""

    def __init__(self, field: int | str):
        self.field = field
        super().__init__(f"No such field: {field!r}")

    def __str__(self) -> str:
        return self.args[0]


class ValueScanError(UVCTypesError):
    """Raised inside the scanner when value text cannot be applied.

    Never escapes ``scan``; the public entry point converts it to ``False``.
    """

    def __init__(self, text: str, reason: str):
        self.text = text
        self.reason = reason
        super().__init__(f"Cannot scan '{text}': {reason}")

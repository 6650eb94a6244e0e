"""
uvctypes CLI tools for inspecting type descriptions and value text offline.

Usage:
    python -m uvctypes.cli describe "<schema>"
    python -m uvctypes.cli format "<schema>" <hex-bytes>
    python -m uvctypes.cli encode "<schema>" "<value>"
    python -m uvctypes.cli controls

Commands:
    describe  - Print the type summary, byte size and field offsets
    format    - Interpret wire-order bytes (hex) and print them as value text
    encode    - Scan value text and print the wire-order bytes as hex
    controls  - List the well-known control layouts

A control name (e.g. "pan-tilt-abs") may be given wherever a schema is
expected.
"""

from __future__ import annotations

import argparse
import sys

from .config import ScanFlags, get_config
from .controls import CONTROL_LAYOUTS, lookup_control
from .formatter import type_summary
from .logger import configure_logging
from .parser import parse_schema
from .schema import Schema
from .value import ValueBuffer


def _resolve_schema(text: str) -> Schema | None:
    layout = lookup_control(text)
    if layout is not None:
        return layout.schema()
    return parse_schema(text)


def describe(schema_text: str) -> int:
    """Print the layout of a type description."""
    schema = _resolve_schema(schema_text)
    if schema is None:
        print(f"error: invalid type description: {schema_text}", file=sys.stderr)
        return 1
    print(f"signature: {schema.signature}")
    print(f"summary:   {type_summary(schema)}")
    print(f"byte size: {schema.byte_size}")
    for field, offset in zip(schema.fields, schema.offsets):
        print(f"  +{offset:<3d} {field.type.code:<2s} {field.name}")
    return 0


def format_hex(schema_text: str, hex_bytes: str) -> int:
    """Print wire-order bytes as value text."""
    schema = _resolve_schema(schema_text)
    if schema is None:
        print(f"error: invalid type description: {schema_text}", file=sys.stderr)
        return 1
    try:
        data = bytes.fromhex(hex_bytes)
    except ValueError as e:
        print(f"error: bad hex bytes: {e}", file=sys.stderr)
        return 1
    if len(data) != schema.byte_size:
        print(
            f"error: {len(data)} bytes given, {schema.signature} needs {schema.byte_size}",
            file=sys.stderr,
        )
        return 1
    value = ValueBuffer.from_bytes(schema, data, wire_order=True)
    value.to_host_order()
    print(value.to_string())
    return 0


def encode(schema_text: str, value_text: str) -> int:
    """Print the wire-order bytes for value text."""
    schema = _resolve_schema(schema_text)
    if schema is None:
        print(f"error: invalid type description: {schema_text}", file=sys.stderr)
        return 1
    value = ValueBuffer(schema)
    flags = get_config().scan_flags | ScanFlags.SHOW_WARNINGS
    if not value.scan(value_text, flags=flags):
        print(f"error: cannot scan '{value_text}' as {schema.signature}", file=sys.stderr)
        return 1
    value.to_wire_order()
    print(value.raw.hex())
    return 0


def list_controls() -> int:
    for layout in CONTROL_LAYOUTS:
        print(f"{layout.name:<26s} {layout.signature}")
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="uvctypes CLI tools")
    parser.add_argument("--log-level", default=None, help="Logging level (default: $UVCTYPES_LOG_LEVEL or WARNING)")
    subparsers = parser.add_subparsers(dest="command")

    describe_parser = subparsers.add_parser("describe", help="Describe a type")
    describe_parser.add_argument("schema", help="Type description or control name")

    format_parser = subparsers.add_parser("format", help="Render wire bytes as text")
    format_parser.add_argument("schema", help="Type description or control name")
    format_parser.add_argument("hex", help="Wire-order bytes as hex")

    encode_parser = subparsers.add_parser("encode", help="Encode value text to wire bytes")
    encode_parser.add_argument("schema", help="Type description or control name")
    encode_parser.add_argument("value", help="Value text, e.g. '{pan=10,tilt=-5}'")

    subparsers.add_parser("controls", help="List well-known control layouts")

    args = parser.parse_args(argv)
    configure_logging(args.log_level or get_config().log_level)

    if args.command == "describe":
        return describe(args.schema)
    elif args.command == "format":
        return format_hex(args.schema, args.hex)
    elif args.command == "encode":
        return encode(args.schema, args.value)
    elif args.command == "controls":
        return list_controls()
    else:
        parser.print_help()
        return 0


if __name__ == "__main__":
    sys.exit(main())

"""
Schema parser: type description grammar, anonymous fields and rejection of
malformed descriptions.
"""

import logging

import pytest
from prometheus_client import REGISTRY

from uvctypes.constants import AtomicType
from uvctypes.parser import parse_schema


def test_anonymous_single_field():
    schema = parse_schema("{S2}")
    assert schema.field_count == 1
    assert schema.field_name(0) == "value"
    assert schema.field_type(0) is AtomicType.SINT16
    assert schema.byte_size == 2


@pytest.mark.parametrize("text", ["S2", "  s2  ", "{ S2 }", "{S2 value}"])
def test_single_field_spellings(text):
    schema = parse_schema(text)
    assert schema is not None
    assert schema.types == (AtomicType.SINT16,)
    assert schema.field_name(0) == "value"


def test_named_fields_with_trailing_semicolon():
    schema = parse_schema("{ S2 pan; S2 tilt; }")
    assert [f.name for f in schema.fields] == ["pan", "tilt"]
    assert schema.offsets == (0, 2)
    assert schema.byte_size == 4


def test_names_are_lowercased_and_codes_case_insensitive():
    schema = parse_schema("{s4 PAN; m2 Flags}")
    assert [f.name for f in schema.fields] == ["pan", "flags"]
    assert schema.types == (AtomicType.SINT32, AtomicType.BITMAP16)


def test_hyphenated_names():
    schema = parse_schema("{S1 pan;U1 pan-speed; S1 tilt;U1 tilt-speed}")
    assert [f.name for f in schema.fields] == ["pan", "pan-speed", "tilt", "tilt-speed"]
    assert schema.byte_size == 4


def test_whitespace_separates_fields():
    schema = parse_schema("{\n  S2 a\n  U4 b\n}")
    assert schema.types == (AtomicType.SINT16, AtomicType.UINT32)
    assert schema.offsets == (0, 2)


def test_trailing_text_after_brace_is_ignored():
    schema = parse_schema("{U1 a} and some trailing words")
    assert schema is not None
    assert schema.field_count == 1


def test_every_type_code():
    schema = parse_schema("{B a;S1 b;U1 c;M1 d;S2 e;U2 f;M2 g;S4 h;U4 i;M4 j;S8 k;U8 l;M8 m}")
    assert schema.byte_size == 4 * 1 + 3 * 2 + 3 * 4 + 3 * 8
    assert schema.field_type(12) is AtomicType.BITMAP64


@pytest.mark.parametrize(
    "text",
    [
        "",
        "   ",
        "S2 pan",
        "pan",
        "{}",
        "{ }",
        "{X2 a}",
        "{S3 a}",
        "{S2 pan",
        "{S2 pan;",
        "{S2",
        "{S2;}",
        "{S2 a,U2 b}",
        "{S2 pan; S2 PAN}",
    ],
)
def test_rejected_descriptions(text):
    assert parse_schema(text) is None


def test_anonymous_field_collides_with_named_value():
    assert parse_schema("{S2 value; U1}") is None


def test_rejection_is_logged(caplog):
    with caplog.at_level(logging.WARNING, logger="uvctypes"):
        assert parse_schema("{S2 pan; U2 Pan}") is None
    assert "Repeated use of field name 'pan'" in caplog.text


def test_parsed_schemas_are_counted():
    before = REGISTRY.get_sample_value("uvctypes_schemas_parsed_total") or 0.0
    parse_schema("{U2 a; U2 b}")
    after = REGISTRY.get_sample_value("uvctypes_schemas_parsed_total")
    assert after == before + 1

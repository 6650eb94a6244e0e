"""
Well-known control layouts and the ControlValues holder that resolves
keywords against device-reported limits.
"""

import pytest

from uvctypes.controls import CONTROL_LAYOUTS, ControlValues, UnitType, lookup_control
from uvctypes.value import ValueBuffer


@pytest.mark.parametrize("layout", CONTROL_LAYOUTS, ids=lambda layout: layout.name)
def test_every_layout_parses(layout):
    schema = layout.schema()
    assert schema.field_count >= 1
    assert layout.schema() is schema


def test_layout_names_are_unique():
    names = [layout.name for layout in CONTROL_LAYOUTS]
    assert len(names) == len(set(names))


def test_lookup_control():
    layout = lookup_control("  Pan-Tilt-ABS ")
    assert layout is not None
    assert layout.selector == 0x0D
    assert layout.unit is UnitType.CAMERA_TERMINAL
    assert layout.schema().byte_size == 8
    assert lookup_control("brightness").unit is UnitType.PROCESSING_UNIT
    assert lookup_control("warp-drive") is None


def test_for_layout():
    assert ControlValues.for_layout("warp-drive") is None
    control = ControlValues.for_layout(lookup_control("zoom-rel"))
    assert control.name == "zoom-rel"
    assert control.schema.signature == "{S1 zoom;U1 digital-zoom;U1 speed}"


def test_scan_uses_limits():
    control = ControlValues.for_layout("pan-tilt-abs")
    assert control.set_limit("minimum", "{pan=-36000, tilt=-36000}")
    assert control.set_limit("maximum", "{pan=36000, tilt=36000}")
    assert control.set_limit("default", "{0, 0}")
    assert control.has_range

    assert control.scan("maximum")
    assert control.current.to_string() == "{pan=36000,tilt=36000}"
    assert control.scan("{pan=default}")
    assert control.current.to_string() == "{pan=0,tilt=36000}"
    assert control.scan("{tilt=minimum}")
    assert control.current.to_string() == "{pan=0,tilt=-36000}"
    assert control.scan("step") is False


def test_set_limit():
    control = ControlValues.for_layout("brightness")
    assert control.set_limit("step", "bogus") is False
    assert control.step is None

    other = ValueBuffer(control.schema)
    other.set_field(0, 4)
    assert control.set_limit("step", other)
    assert control.step.to_string() == "4"
    assert control.step is not other

    mismatched = ValueBuffer(lookup_control("contrast").schema())
    assert control.set_limit("default", mismatched) is False

    with pytest.raises(ValueError):
        control.set_limit("resolution", "1")


def test_summary_without_limits():
    control = ControlValues.for_layout("brightness")
    assert control.summary() == (
        "brightness {\n"
        "  type-description: {\n"
        "single value, signed 16-bit integer  },\n"
        "  current-value: 0\n"
        "}"
    )


def test_summary_with_limits():
    control = ControlValues.for_layout("pan-tilt-abs")
    control.set_limit("minimum", "{-10, -20}")
    control.set_limit("maximum", "{10, 20}")
    control.set_limit("step", "{1, 2}")
    control.set_limit("default", "{0, 0}")
    control.scan("{5, -4}")
    assert control.summary() == (
        "pan-tilt-abs {\n"
        "  type-description: {\n"
        "(signed 32-bit integer pan; signed 32-bit integer tilt)  },\n"
        "  minimum: {pan=-10,tilt=-20}\n"
        "  maximum: {pan=10,tilt=20}\n"
        "  step-size: {pan=1,tilt=2}\n"
        "  default-value: {pan=0,tilt=0}\n"
        "  current-value: {pan=5,tilt=-4}\n"
        "}"
    )


def test_summary_needs_both_range_ends():
    control = ControlValues.for_layout("gain")
    control.set_limit("minimum", "0")
    assert "minimum" not in control.summary()

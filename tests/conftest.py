import logging

import pytest

from uvctypes.config import set_config
from uvctypes.parser import parse_schema
from uvctypes.value import ValueBuffer


@pytest.fixture(autouse=True)
def reset_engine_state():
    """Drop any process-wide config and CLI log handlers a test installed."""
    set_config(None)
    yield
    set_config(None)
    root = logging.getLogger("uvctypes")
    for handler in list(root.handlers):
        if getattr(handler, "_uvctypes_handler", False):
            root.removeHandler(handler)
    root.setLevel(logging.NOTSET)


@pytest.fixture
def pan_tilt():
    """Schema with two signed 16-bit fields."""
    return parse_schema("{S2 pan; S2 tilt}")


@pytest.fixture
def pan_tilt_value(pan_tilt):
    return ValueBuffer(pan_tilt)


@pytest.fixture
def limits(pan_tilt):
    """Minimum/maximum/step/default companions for the pan_tilt schema."""
    minimum = ValueBuffer(pan_tilt)
    maximum = ValueBuffer(pan_tilt)
    step = ValueBuffer(pan_tilt)
    default = ValueBuffer(pan_tilt)
    assert minimum.scan("{pan=-100, tilt=-50}")
    assert maximum.scan("{pan=100, tilt=50}")
    assert step.scan("{pan=10, tilt=5}")
    assert default.scan("{pan=0, tilt=25}")
    return {"minimum": minimum, "maximum": maximum, "step": step, "default": default}

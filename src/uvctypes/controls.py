"""controls.py - Well-known camera control layouts and their value sets.

Each standard control carries a type signature in the schema grammar, e.g.
``"{S4 pan; S4 tilt}"`` for absolute pan/tilt. ControlValues groups the
current value with the optional minimum/maximum/step/default buffers that a
device reports for a control, so value text can use the keywords and a
summary block can be rendered for help output.
"""

from __future__ import annotations

from enum import Enum
from functools import lru_cache
from typing import NamedTuple

from .config import ScanFlags
from .formatter import type_summary
from .logger import get_logger
from .parser import parse_schema
from .schema import Schema
from .value import ValueBuffer

logger = get_logger(__name__)


class UnitType(Enum):
    PROCESSING_UNIT = 0
    CAMERA_TERMINAL = 1


class ControlLayout(NamedTuple):
    name: str
    signature: str
    selector: int
    unit: UnitType

    def schema(self) -> Schema:
        schema = _schema_for(self.signature)
        assert schema is not None, f"Bad built-in signature for {self.name}"
        return schema


@lru_cache(maxsize=None)
def _schema_for(signature: str) -> Schema | None:
    return parse_schema(signature)


_PU = UnitType.PROCESSING_UNIT
_CT = UnitType.CAMERA_TERMINAL

# Selector values as defined by USB Video Class 1.1
CONTROL_LAYOUTS: tuple[ControlLayout, ...] = (
    ControlLayout("brightness", "{S2}", 0x02, _PU),
    ControlLayout("contrast", "{U2}", 0x03, _PU),
    ControlLayout("hue", "{S2}", 0x06, _PU),
    ControlLayout("saturation", "{U2}", 0x07, _PU),
    ControlLayout("sharpness", "{U2}", 0x08, _PU),
    ControlLayout("gamma", "{U2}", 0x09, _PU),
    ControlLayout("backlight-compensation", "{U2}", 0x01, _PU),
    ControlLayout("gain", "{U2}", 0x04, _PU),
    ControlLayout("power-line-frequency", "{U1}", 0x05, _PU),
    ControlLayout("white-balance-temp", "{U2}", 0x0A, _PU),
    ControlLayout("auto-white-balance-temp", "{B}", 0x0B, _PU),
    ControlLayout("auto-exposure-mode", "{U1}", 0x02, _CT),
    ControlLayout("auto-exposure-priority", "{B}", 0x03, _CT),
    ControlLayout("exposure-time-abs", "{U4}", 0x04, _CT),
    ControlLayout("focus-abs", "{U2}", 0x06, _CT),
    ControlLayout("focus-rel", "{S1}", 0x07, _CT),
    ControlLayout("auto-focus", "{B}", 0x08, _CT),
    ControlLayout("iris-abs", "{U2}", 0x09, _CT),
    ControlLayout("zoom-abs", "{U2}", 0x0B, _CT),
    ControlLayout("zoom-rel", "{S1 zoom;U1 digital-zoom;U1 speed}", 0x0C, _CT),
    ControlLayout("pan-tilt-abs", "{S4 pan; S4 tilt}", 0x0D, _CT),
    ControlLayout("pan-tilt-rel", "{S1 pan;U1 pan-speed; S1 tilt;U1 tilt-speed}", 0x0E, _CT),
    ControlLayout("privacy", "{B}", 0x11, _CT),
)

_LAYOUTS_BY_NAME = {layout.name: layout for layout in CONTROL_LAYOUTS}


def lookup_control(name: str) -> ControlLayout | None:
    """Case-insensitive lookup of a well-known control layout."""
    return _LAYOUTS_BY_NAME.get(name.strip().lower())


class ControlValues:
    """Current value plus the optional limits reported for one control."""

    def __init__(self, name: str, schema: Schema) -> None:
        self.name = name
        self.schema = schema
        self.current = ValueBuffer(schema)
        self.minimum: ValueBuffer | None = None
        self.maximum: ValueBuffer | None = None
        self.step: ValueBuffer | None = None
        self.default: ValueBuffer | None = None

    @classmethod
    def for_layout(cls, layout: ControlLayout | str) -> ControlValues | None:
        if isinstance(layout, str):
            found = lookup_control(layout)
            if found is None:
                logger.warning(f"Unknown control '{layout}'")
                return None
            layout = found
        return cls(layout.name, layout.schema())

    def set_limit(self, which: str, text_or_value: str | ValueBuffer) -> bool:
        """Install one of minimum/maximum/step/default from text or a buffer."""
        if which not in ("minimum", "maximum", "step", "default"):
            raise ValueError(f"Unknown limit '{which}'")
        limit = ValueBuffer(self.schema)
        if isinstance(text_or_value, ValueBuffer):
            ok = limit.copy_from(text_or_value)
        else:
            ok = limit.scan(text_or_value)
        if not ok:
            return False
        setattr(self, which, limit)
        return True

    @property
    def has_range(self) -> bool:
        return self.minimum is not None and self.maximum is not None

    def scan(self, text: str, flags: ScanFlags | None = None) -> bool:
        """Scan text into the current value, resolving keywords against the limits."""
        return self.current.scan(
            text,
            minimum=self.minimum,
            maximum=self.maximum,
            step=self.step,
            default=self.default,
            flags=flags,
        )

    def summary(self) -> str:
        lines = [f"{self.name} {{", "  type-description: {", type_summary(self.schema) + "  },"]
        text = "\n".join(lines)
        if self.has_range:
            text += f"\n  minimum: {self.minimum.to_string()}"
            text += f"\n  maximum: {self.maximum.to_string()}"
        if self.step is not None:
            text += f"\n  step-size: {self.step.to_string()}"
        if self.default is not None:
            text += f"\n  default-value: {self.default.to_string()}"
        text += f"\n  current-value: {self.current.to_string()}"
        return text + "\n}"

from __future__ import annotations

import sys
from typing import Any


def assumption(obj: Any, *expected: type) -> bool:
    """Check against multiple possible types"""
    for exp in expected:
        if isinstance(obj, exp):
            return True
    _raise_assert(obj, expected)
    return False


def _raise_assert(obj: Any, expected: tuple[type, ...]) -> bool:
    if len(expected) == 1:
        msg = f"Expected {expected[0].__name__}, instead got {type(obj).__name__} (value: {obj!r})"
    else:
        names = ", ".join(e.__name__ for e in expected)
        msg = f"Expected one of ({names}), instead got {type(obj).__name__} (value: {obj!r})"
    raise AssertionError(msg)


def normalize_byteorder(byteorder: str | None) -> str:
    """Map a host byte order spelling onto ``"little"`` or ``"big"``.

    Accepts the ``sys.byteorder`` spellings as well as the numpy prefixes
    ``<``, ``>`` and ``=``. ``None`` and ``=`` mean the running host.
    """
    match byteorder:
        case None | "=" | "native":
            return sys.byteorder
        case "little" | "<":
            return "little"
        case "big" | ">":
            return "big"
        case _:
            raise ValueError(f"Unknown byte order: {byteorder!r}")


def dtype_prefix(byteorder: str | None) -> str:
    """numpy byte order prefix for a host byte order spelling."""
    return "<" if normalize_byteorder(byteorder) == "little" else ">"

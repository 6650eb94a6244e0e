"""logger.py - Logging helpers shared by all uvctypes modules"""

from __future__ import annotations

import logging
import os

ROOT_LOGGER_NAME = "uvctypes"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

logging.getLogger(ROOT_LOGGER_NAME).addHandler(logging.NullHandler())


def get_logger(name: str) -> logging.Logger:
    """Return a logger in the uvctypes hierarchy.

    Module names that already live under the package (``uvctypes.parser``)
    are used as-is; anything else is nested below the package logger so
    that a single ``configure_logging`` call controls all output.
    """
    if name == ROOT_LOGGER_NAME or name.startswith(ROOT_LOGGER_NAME + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")


def configure_logging(level: int | str | None = None) -> logging.Logger:
    """Attach a stream handler to the package logger.

    Falls back to the UVCTYPES_LOG_LEVEL environment variable, then WARNING.
    Calling this more than once replaces the level but never stacks handlers.
    """
    if level is None:
        level = os.getenv("UVCTYPES_LOG_LEVEL", "WARNING")
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.WARNING

    root = logging.getLogger(ROOT_LOGGER_NAME)
    root.setLevel(level)
    if not any(getattr(h, "_uvctypes_handler", False) for h in root.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._uvctypes_handler = True  # type: ignore[attr-defined]
        root.addHandler(handler)
    return root

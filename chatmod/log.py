"""Logger factory shared by the chatmod modules."""

from __future__ import annotations

import logging
import os

_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def get_logger(name: str) -> logging.Logger:
    """Return a logger under the ``chatmod`` namespace."""
    if not name.startswith("chatmod"):
        name = f"chatmod.{name}"
    return logging.getLogger(name)


def configure_logging(level: str | int | None = None) -> None:
    """Attach a stream handler to the ``chatmod`` root logger.

    *level* falls back to ``CHATMOD_LOG_LEVEL`` and then ``WARNING``.
    Calling this more than once does not stack handlers.
    """
    if level is None:
        level = os.environ.get("CHATMOD_LOG_LEVEL", "WARNING")
    if isinstance(level, str):
        level = level.upper()

    root = logging.getLogger("chatmod")
    root.setLevel(level)
    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(_FORMAT))
        root.addHandler(handler)

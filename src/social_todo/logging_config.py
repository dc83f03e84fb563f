from __future__ import annotations

import logging
import sys

PACKAGE_LOGGER = "social_todo"
LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


# PUBLIC_INTERFACE
def configure_logging(level: str = "INFO") -> logging.Logger:
    """
    Attach a stream handler to the package logger and set its level.

    Calling this more than once replaces the level but never stacks handlers.
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    resolved = logging.getLevelName(level.upper())
    logger.setLevel(resolved if isinstance(resolved, int) else logging.INFO)
    if not any(getattr(h, "_social_todo", False) for h in logger.handlers):
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._social_todo = True  # type: ignore[attr-defined]
        logger.addHandler(handler)
    return logger

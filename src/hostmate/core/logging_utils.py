from __future__ import annotations

import logging

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """
    Attach a single stream handler to the ``hostmate`` logger.

    Safe to call repeatedly (each app factory call does); the handler is only
    added once so log lines are not duplicated.
    """
    logger = logging.getLogger("hostmate")
    logger.setLevel(level.upper())
    if any(getattr(handler, "_hostmate", False) for handler in logger.handlers):
        return

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler._hostmate = True  # type: ignore[attr-defined]
    logger.addHandler(handler)

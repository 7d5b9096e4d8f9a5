from __future__ import annotations

import logging

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"

_HANDLER_NAME = "notetaker"


def configure_logging(level_name: str = "INFO") -> None:
    """Attach one stream handler to the ``notetaker`` logger.

    Safe to call more than once (the app factory runs per test).
    """
    level = getattr(logging, level_name.upper(), logging.INFO)
    logger = logging.getLogger("notetaker")
    logger.setLevel(level)

    if any(h.get_name() == _HANDLER_NAME for h in logger.handlers):
        return

    handler = logging.StreamHandler()
    handler.set_name(_HANDLER_NAME)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)

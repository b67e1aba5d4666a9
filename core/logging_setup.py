# core/logging_setup.py

import logging

LOG_FORMAT = "%(asctime)s [%(name)s] %(levelname)s: %(message)s"

_HANDLER_NAME = "focus-pomodoro"


def configure_logging(level="INFO"):
    """
    Install one stream handler on the root logger.
    Calling it again only changes the level.
    """
    root = logging.getLogger()
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO
    root.setLevel(level)

    if not any(h.get_name() == _HANDLER_NAME for h in root.handlers):
        handler = logging.StreamHandler()
        handler.set_name(_HANDLER_NAME)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(handler)
    return root

"""
Logging setup for the SellSight API.
Console output always, plus combined.log and error.log files when enabled.
"""
import logging
import os

from sellsight.config import Settings, settings as default_settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

_HANDLER_MARKER = "_sellsight_handler"


def _mark(handler: logging.Handler) -> logging.Handler:
    setattr(handler, _HANDLER_MARKER, True)
    return handler


def configure_logging(config: Settings = default_settings) -> logging.Logger:
    """
    Configure the root logger for the application.

    Safe to call more than once: handlers installed by a previous call are
    replaced rather than duplicated.
    """
    root = logging.getLogger()
    root.setLevel(config.LOG_LEVEL.upper())

    for handler in list(root.handlers):
        if getattr(handler, _HANDLER_MARKER, False):
            root.removeHandler(handler)
            handler.close()

    formatter = logging.Formatter(LOG_FORMAT)

    console = _mark(logging.StreamHandler())
    console.setFormatter(formatter)
    root.addHandler(console)

    if config.LOG_TO_FILE:
        os.makedirs(config.LOG_DIR, exist_ok=True)

        combined = _mark(logging.FileHandler(os.path.join(config.LOG_DIR, "combined.log")))
        combined.setFormatter(formatter)
        root.addHandler(combined)

        errors = _mark(logging.FileHandler(os.path.join(config.LOG_DIR, "error.log")))
        errors.setLevel(logging.ERROR)
        errors.setFormatter(formatter)
        root.addHandler(errors)

    return root

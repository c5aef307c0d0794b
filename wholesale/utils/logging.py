# wholesale/utils/logging.py
import logging
import sys

from wholesale.utils.settings import LOG_LEVEL

_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
_configured = False


def _configure() -> None:
    global _configured
    if _configured:
        return

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(_FORMAT))

    root = logging.getLogger("wholesale")
    root.addHandler(handler)
    root.setLevel(LOG_LEVEL.upper())
    _configured = True


def get_logger(name: str) -> logging.Logger:
    _configure()
    return logging.getLogger(name)

# core/log_manager.py
import logging
import sys

from flashdeck.config import LOG_LEVEL

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

def _build_logger(name: str = "flashdeck") -> logging.Logger:
    """
    Creates the application logger once.
    Re-importing the module (NiceGUI reload) must not stack handlers.
    """
    log = logging.getLogger(name)
    if not log.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        log.addHandler(handler)
    log.setLevel(getattr(logging, LOG_LEVEL, logging.INFO))
    return log

logger = _build_logger()

# utils/logger.py - shared logger setup and header redaction for request logs
import logging
import os
from typing import Dict, Mapping

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(message)s"


def get_logger(name: str = "api-client"):
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler()
        formatter = logging.Formatter(LOG_FORMAT)
        handler.setFormatter(formatter)
        logger.addHandler(handler)
        logger.setLevel(_env_level())
    return logger


def _env_level() -> int:
    # unknown names fall back to INFO
    level = logging.getLevelName(os.environ.get("LOG_LEVEL", "INFO").upper())
    return level if isinstance(level, int) else logging.INFO


def redact_headers(headers: Mapping[str, str]) -> Dict[str, str]:
    """
    Copy of `headers` safe to log: the credential part of Authorization is
    replaced, the scheme ("Bearer", "Basic", ...) is kept.
    """
    safe = dict(headers)
    for key in list(safe):
        if key.lower() == "authorization":
            value = str(safe[key])
            if " " in value:
                safe[key] = value.split(" ", 1)[0] + " [REDACTED]"
            else:
                safe[key] = "[REDACTED]"
    return safe

"""
Logging setup for the storefront.

All modules log through get_logger(__name__). The root handler is
installed once at import; LOG_LEVEL picks the level and Vercel
deployments get a format without timestamps, since the platform stamps
each line itself.
"""

import logging
import os
import sys
from functools import cache

DEV_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
VERCEL_FORMAT = "[%(levelname)s] %(name)s: %(message)s"

# Chatty client libraries: catalog and Supabase calls would log every request at INFO
QUIET_LOGGERS = ("httpx", "httpcore", "hpack")

_UNSAFE_CHARS = str.maketrans({"\n": "\\n", "\r": "\\r", "\t": "\\t", "\x00": None})


def configure_logging(level_name: str | None = None) -> None:
    """Attach a stdout handler to the root logger unless one is already there."""
    root = logging.getLogger()
    if root.handlers:
        return

    level_name = (level_name or os.environ.get("LOG_LEVEL") or "INFO").upper()
    level = logging.getLevelName(level_name)
    if not isinstance(level, int):
        level = logging.INFO

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(VERCEL_FORMAT if os.environ.get("VERCEL") == "1" else DEV_FORMAT))
    root.addHandler(handler)
    root.setLevel(level)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


configure_logging()


@cache
def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


def _clean(value) -> str:
    # Newlines in user input could forge extra log entries (CWE-117)
    return str(value).translate(_UNSAFE_CHARS)


def sanitize_id_for_logging(id_value: str | None) -> str:
    """
    Short, log-safe form of a cart session id or token.

    Only the first 8 characters are kept so full secrets never reach the
    logs; empty values become "N/A".
    """
    if not id_value:
        return "N/A"
    return _clean(id_value)[:8]


def sanitize_string_for_logging(value: str | None, max_length: int = 50) -> str:
    """Log-safe form of an email or title, truncated with "..." past max_length."""
    if not value:
        return "N/A"
    cleaned = _clean(value)
    if len(cleaned) > max_length:
        return cleaned[:max_length] + "..."
    return cleaned

"""Logging setup for focalboard-mcp.

Everything goes to stderr; in stdio mode stdout is the protocol channel and a
stray log line there corrupts the session.
"""

import logging
import os
import re
import sys

DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
NOISY_LOGGERS = ("httpx", "httpcore", "mcp", "uvicorn.access")

_BEARER = re.compile(r"(Bearer\s+)[^\s'\"]+", re.IGNORECASE)


class RedactTokensFilter(logging.Filter):
    """Masks bearer tokens that end up in log messages (e.g. from exception text)."""

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        redacted = _BEARER.sub(r"\1***", message)
        if redacted != message:
            record.msg = redacted
            record.args = None
        return True


def get_log_level() -> int:
    """LOG_LEVEL from the environment, WARNING when unset or unknown."""
    level_name = os.getenv("LOG_LEVEL", "WARNING").upper()
    level = logging.getLevelName(level_name)
    return level if isinstance(level, int) else logging.WARNING


def configure_logging(verbose: bool = False) -> None:
    """
    Configure root logging once at startup.

    Args:
        verbose: Force DEBUG regardless of LOG_LEVEL
    """
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(DEFAULT_FORMAT))
    handler.addFilter(RedactTokensFilter())

    logging.basicConfig(
        level=logging.DEBUG if verbose else get_log_level(),
        handlers=[handler],
        force=True,
    )

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

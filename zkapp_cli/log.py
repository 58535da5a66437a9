"""
Logging setup for the `zk` CLI.

Library modules log through ``logging.getLogger(__name__)`` and never configure
handlers themselves; the CLI calls :func:`configure_logging` once at start-up.
Operator-facing output (steps, tables, prompts) goes through the rich console
in :mod:`zkapp_cli.ui`, not through these loggers.

Environment
-----------
- ZK_LOG_LEVEL: DEBUG, INFO, WARNING (default) or ERROR
"""

from __future__ import annotations

import logging
import os
import re
import sys
from typing import Optional, Union

__all__ = ["configure_logging", "RedactSecretsFilter", "LOGGER_NAME"]

LOGGER_NAME = "zkapp_cli"

_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

# "privateKey": "..." / privateKey=... in rendered messages
_SECRET_RE = re.compile(r"""(?i)(private_?key["']?\s*[:=]\s*["']?)([0-9a-zA-Z+/=x]+)""")


class RedactSecretsFilter(logging.Filter):
    """Masks anything that looks like a private key in a rendered record."""

    def filter(self, record: logging.LogRecord) -> bool:
        msg = record.getMessage()
        redacted = _SECRET_RE.sub(r"\1***", msg)
        if redacted != msg:
            record.msg = redacted
            record.args = None
        return True


def configure_logging(level: Optional[Union[str, int]] = None) -> logging.Logger:
    """
    Attach a stderr handler to the package logger. Safe to call more than once;
    later calls only adjust the level.
    """
    level = level or os.getenv("ZK_LOG_LEVEL", "").upper() or "WARNING"
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.WARNING)

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    if not any(getattr(h, "_zk_handler", False) for h in logger.handlers):
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(_FORMAT))
        handler.addFilter(RedactSecretsFilter())
        handler._zk_handler = True  # type: ignore[attr-defined]
        logger.addHandler(handler)
        logger.propagate = False
    return logger

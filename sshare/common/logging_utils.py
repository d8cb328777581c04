"""
Console logging for the sshare command line.
"""

from __future__ import annotations

import logging
from typing import IO

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logger(
    logger: logging.Logger, log_level: int, stream: IO[str] | None = None
) -> None:
    """Route ``logger`` to a single console handler at ``log_level``.

    The CLI calls this once per invocation, so a logger that already has
    handlers is only re-levelled; no second handler is attached.

    Args:
        logger: Logger to configure, normally the ``sshare`` package logger
        log_level: Level applied to the logger and its handlers
        stream: Destination for log lines; stderr if not given
    """
    logger.setLevel(log_level)
    if logger.handlers:
        for existing in logger.handlers:
            existing.setLevel(log_level)
        return

    console = logging.StreamHandler(stream)
    console.setLevel(log_level)
    console.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(console)

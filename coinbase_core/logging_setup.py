"""Structured logging setup using loguru.

Records from ``coinbase_core`` are disabled until the host opts in, either by
calling ``setup_logging`` or with ``logger.enable("coinbase_core")`` when it
manages its own loguru sinks.
"""
import sys
from pathlib import Path
from typing import Optional

from loguru import logger as _logger

PACKAGE = "coinbase_core"

LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
    "<level>{message}</level>"
)

_logger.disable(PACKAGE)


def setup_logging(
    log_file: Optional[str] = None,
    level: str = "INFO",
    enable_console: bool = True,
    replace_sinks: bool = True,
) -> None:
    """Turn on client logging and attach sinks.

    Args:
        log_file: Optional path to a rotating log file
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        enable_console: Whether to log to stdout as well
        replace_sinks: Remove existing loguru sinks first; pass False to keep
                       the host application's sinks
    """
    if replace_sinks:
        _logger.remove()

    # sinks added here only see this package's records
    only_client = {"": False, PACKAGE: level}

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        _logger.add(
            str(log_path),
            format=LOG_FORMAT,
            filter=only_client if not replace_sinks else None,
            level=level,
            rotation="100 MB",
            retention="7 days",
        )

    if enable_console:
        _logger.add(
            sys.stdout,
            format=LOG_FORMAT,
            filter=only_client if not replace_sinks else None,
            level=level,
            colorize=True,
        )

    _logger.enable(PACKAGE)


logger = _logger

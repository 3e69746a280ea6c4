"""Structured logging configuration."""

import os
import sys
from loguru import logger
from typing import Any


FILE_FORMAT = '{time:YYYY-MM-DD HH:mm:ss.SSS} | {level} | {extra[component]} | {message}'
CONSOLE_FORMAT = (
    '<dim>{time:HH:mm:ss}</dim> <level>{level: <8}</level> '
    '<cyan>{extra[component]: <6}</cyan> <level>{message}</level>'
)


def configure_logging(
    log_file: str | None = None,
    log_level: str = 'WARNING',
    include_console: bool = False,
) -> None:
    """Configure loguru sinks for the netdash package.

    The package disables its own logger on import; calling this re-enables it.
    Setting ``NETDASH_DEBUG`` turns on the stderr sink as well.

    Args:
        log_file: Path to a JSON log file (no file sink when omitted)
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
        include_console: Whether to also log to stderr
    """
    sinks: list[dict[str, Any]] = []
    if log_file:
        # One JSON object per line; old files kept for a week
        sinks.append({
            'sink': log_file,
            'format': FILE_FORMAT,
            'serialize': True,
            'rotation': '10 MB',
            'retention': '7 days',
            'backtrace': True,
            'diagnose': False,
        })
    if include_console or os.getenv('NETDASH_DEBUG'):
        sinks.append({'sink': sys.stderr, 'format': CONSOLE_FORMAT, 'colorize': True})

    # Drops loguru's stock stderr sink too
    logger.remove()
    logger.configure(extra={'component': ''})
    for options in sinks:
        logger.add(level=log_level, **options)
    logger.enable('netdash')


def get_logger(component: str = '') -> Any:
    """Get logger bound to a component name.

    Args:
        component: Name of the calling component (e.g. 'vlsm', 'cli')

    Returns:
        Logger instance with component bound
    """
    return logger.bind(component=component)


def log_operation(operation: str, params: dict[str, Any]) -> None:
    """Log the start of a user-facing operation with its inputs."""
    log = get_logger('cli')
    log.info('Operation started', operation=operation, params=params)


def log_operation_result(
    operation: str,
    success: bool,
    result: Any = None,
    error: str | None = None,
) -> None:
    """Log the outcome of a user-facing operation.

    Args:
        operation: Name of the operation
        success: Whether the operation produced a value
        result: Result value (only its type is logged)
        error: Error message (logged only if success=False)
    """
    log = get_logger('cli')

    if success:
        log.info('Operation completed', operation=operation, result_type=type(result).__name__)
    else:
        log.warning('Operation failed', operation=operation, error=error)

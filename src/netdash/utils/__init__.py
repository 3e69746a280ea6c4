"""Shared utilities: error values and logging."""

from netdash.utils.errors import AddressError, ErrorCodes, ToolError, is_error, unwrap
from netdash.utils.logging import configure_logging, get_logger


__all__ = [
    'AddressError',
    'ErrorCodes',
    'ToolError',
    'configure_logging',
    'get_logger',
    'is_error',
    'unwrap',
]

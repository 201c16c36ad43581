"""
contractkit utilities.

This module provides logging, retry and validation helpers.
"""

from contractkit.utils.logging import (
    LogContext,
    configure_logging,
    disable_logging,
    enable_debug,
    get_logger,
    set_level,
)
from contractkit.utils.retry import RetryConfig, calculate_delay, retry_async
from contractkit.utils.validation import normalize_hex, validate_address, validate_value

__all__ = [
    # Structured logging
    "get_logger",
    "configure_logging",
    "set_level",
    "disable_logging",
    "enable_debug",
    "LogContext",
    # Retry
    "RetryConfig",
    "calculate_delay",
    "retry_async",
    # Validation
    "validate_address",
    "normalize_hex",
    "validate_value",
]

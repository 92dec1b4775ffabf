"""
Logging utilities for request-scoped context.

Appends key=value context to log messages, truncating large values such as
chunk texts and answers.

Dependencies: logging (stdlib)
System role: Logging helper functions
"""

import logging
from typing import Any


def safe_log_value(value: Any, max_length: int = 200) -> str:
    """
    Convert a value to a short string for logging.

    Args:
        value: Value to convert
        max_length: Maximum length before truncating

    Returns:
        str: Safe string representation
    """
    if value is None:
        return "None"
    if isinstance(value, (list, tuple)):
        text = f"{type(value).__name__}({len(value)} items)"
    elif isinstance(value, dict):
        text = f"dict({len(value)} keys)"
    else:
        text = str(value)

    if len(text) > max_length:
        return text[:max_length] + f"... (truncated, {len(text)} total)"
    return text


def format_context(**context: Any) -> str:
    return " ".join(f"{key}={safe_log_value(val)}" for key, val in context.items())


def log_with_context(
    logger: logging.Logger,
    level: int,
    message: str,
    **context: Any,
) -> None:
    """Log a message followed by its key=value context."""
    suffix = format_context(**context)
    logger.log(level, f"{message} | {suffix}" if suffix else message)


def log_exception_with_context(
    logger: logging.Logger,
    message: str,
    exc: Exception,
    **context: Any,
) -> None:
    """Log an exception with traceback, error type and key=value context."""
    suffix = format_context(error_type=type(exc).__name__, error_msg=str(exc), **context)
    logger.error(f"{message} | {suffix}", exc_info=exc)

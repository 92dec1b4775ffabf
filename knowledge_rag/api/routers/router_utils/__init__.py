"""Shared router utilities."""

from .error_handling import handle_chat_errors, to_http_exception

__all__ = ["handle_chat_errors", "to_http_exception"]

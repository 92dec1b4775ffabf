"""API-specific dependencies."""

from .dependencies import (
    RequestIdentity,
    ServiceCache,
    get_chat_service,
    get_request_identity,
    get_service_cache,
)

__all__ = [
    "RequestIdentity",
    "ServiceCache",
    "get_chat_service",
    "get_request_identity",
    "get_service_cache",
]

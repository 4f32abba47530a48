"""Authenticated HTTP client for the certdesk backend

Provides the ApiClient facade and the pieces it composes:
- Transport: raw httpx sending
- RequestAuthenticator: bearer token attachment
- unwrap_envelope: success envelope removal
- RefreshCoordinator: single-flight token refresh on 401
"""

from .transport import ApiRequest, Transport
from .authenticator import RequestAuthenticator
from .envelope import unwrap_envelope
from .errors import (
    ApiClientError,
    ApiError,
    TransportError,
    RefreshFailedError,
    RefreshUnavailableError,
    get_error_message,
    get_validation_errors,
    format_error_for_logging,
    handle_api_error,
    is_auth_error,
    is_permission_error,
    is_not_found_error,
    is_conflict_error,
    is_validation_error,
    is_server_error,
    is_network_error,
)
from .refresh import RefreshCoordinator, RefreshState, PendingRequest, extract_refreshed_tokens
from .client import ApiClient
from .query import build_query_string, build_pagination_params, clean_params
from . import auth_api, endpoints

__all__ = [
    "ApiClient",
    "ApiRequest",
    "Transport",
    "RequestAuthenticator",
    "unwrap_envelope",
    "RefreshCoordinator",
    "RefreshState",
    "PendingRequest",
    "extract_refreshed_tokens",
    "ApiClientError",
    "ApiError",
    "TransportError",
    "RefreshFailedError",
    "RefreshUnavailableError",
    "get_error_message",
    "get_validation_errors",
    "format_error_for_logging",
    "handle_api_error",
    "is_auth_error",
    "is_permission_error",
    "is_not_found_error",
    "is_conflict_error",
    "is_validation_error",
    "is_server_error",
    "is_network_error",
    "build_query_string",
    "build_pagination_params",
    "clean_params",
    "auth_api",
    "endpoints",
]

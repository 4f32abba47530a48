"""API client error types and user-facing error messages"""

import datetime
import logging
from typing import Any, Callable, Dict, Optional, TYPE_CHECKING

import httpx

if TYPE_CHECKING:
    from .transport import ApiRequest

logger = logging.getLogger(__name__)

# Default messages by status code
STATUS_MESSAGES = {
    400: "Invalid Request.",
    401: "Your session has expired. Please login again.",
    403: "You do not have permission to perform this action.",
    404: "Data not found.",
    409: "A conflict occurred or the data already exists.",
    422: "The provided data is invalid.",
    429: "Too many requests. Please try again later.",
    500: "An internal server error occurred. Please try again.",
    502: "Server is currently unreachable.",
    503: "Service is undergoing maintenance.",
    504: "The server timed out.",
}

NETWORK_ERROR_MESSAGE = "Unable to connect to the server. Please check your internet connection."
TIMEOUT_MESSAGE = "The request took too long to respond. Please try again."
FALLBACK_MESSAGE = "An unexpected error occurred. Please try again."


class ApiClientError(Exception):
    """Base class for every error raised by the API client"""

    def __init__(self, message: str, request: Optional["ApiRequest"] = None):
        super().__init__(message)
        self.request = request


class TransportError(ApiClientError):
    """Network failure or timeout; never triggers a token refresh"""

    def __init__(self, request: Optional["ApiRequest"], message: str, timed_out: bool = False):
        super().__init__(message, request)
        self.timed_out = timed_out


class ApiError(ApiClientError):
    """Non-2xx response from the backend"""

    def __init__(
        self,
        request: Optional["ApiRequest"],
        status: int,
        data: Any = None,
        status_text: str = "",
    ):
        super().__init__(f"HTTP {status} {status_text}".strip(), request)
        self.status = status
        self.status_text = status_text
        self.data = data

    @classmethod
    def from_response(cls, request: Optional["ApiRequest"], response: httpx.Response) -> "ApiError":
        try:
            data = response.json()
        except ValueError:
            data = response.text or None
        return cls(request, response.status_code, data, response.reason_phrase)


class RefreshUnavailableError(ApiClientError):
    """A refresh was needed but the session holds no refresh token"""


class RefreshFailedError(ApiClientError):
    """The refresh endpoint failed or returned no access token"""


def is_auth_error(error: Exception) -> bool:
    return isinstance(error, ApiError) and error.status == 401


def is_permission_error(error: Exception) -> bool:
    return isinstance(error, ApiError) and error.status == 403


def is_not_found_error(error: Exception) -> bool:
    return isinstance(error, ApiError) and error.status == 404


def is_conflict_error(error: Exception) -> bool:
    return isinstance(error, ApiError) and error.status == 409


def is_validation_error(error: Exception) -> bool:
    return isinstance(error, ApiError) and error.status == 422


def is_server_error(error: Exception) -> bool:
    return isinstance(error, ApiError) and 500 <= error.status < 600


def is_network_error(error: Exception) -> bool:
    return isinstance(error, TransportError)


def get_error_message(error: Exception) -> str:
    """Map an error to a user-friendly message

    Priority: backend ``error`` field, backend ``message`` field, first
    validation error (422), default message for the status code.
    """
    if isinstance(error, TransportError):
        return TIMEOUT_MESSAGE if error.timed_out else NETWORK_ERROR_MESSAGE

    if isinstance(error, RefreshFailedError):
        return STATUS_MESSAGES[401]

    if not isinstance(error, ApiError):
        return str(error) or FALLBACK_MESSAGE

    data = error.data if isinstance(error.data, dict) else {}

    if isinstance(data.get("error"), str):
        return data["error"]

    if isinstance(data.get("message"), str):
        return data["message"]

    if error.status == 422 and isinstance(data.get("errors"), dict) and data["errors"]:
        first_error = next(iter(data["errors"].values()))
        if isinstance(first_error, list):
            if first_error:
                return str(first_error[0])
        elif first_error:
            return str(first_error)

    return STATUS_MESSAGES.get(error.status, FALLBACK_MESSAGE)


def get_validation_errors(error: Exception) -> Optional[Dict[str, Any]]:
    """Return the field errors of a 422 response, or None"""
    if not is_validation_error(error):
        return None
    data = error.data if isinstance(error.data, dict) else {}
    return data.get("errors") or None


def format_error_for_logging(error: Exception) -> Dict[str, Any]:
    request = getattr(error, "request", None)
    return {
        "message": get_error_message(error),
        "status": getattr(error, "status", None),
        "status_text": getattr(error, "status_text", None),
        "data": getattr(error, "data", None),
        "request": {
            "method": request.method if request else None,
            "path": request.path if request else None,
            "params": request.params if request else None,
        },
        "timestamp": datetime.datetime.now(datetime.timezone.utc).isoformat(),
    }


def handle_api_error(
    error: Exception,
    on_auth_error: Optional[Callable[[Exception], Any]] = None,
    on_permission_error: Optional[Callable[[Exception], Any]] = None,
    on_not_found: Optional[Callable[[Exception], Any]] = None,
    on_validation_error: Optional[Callable[[Exception, Optional[Dict[str, Any]]], Any]] = None,
    on_server_error: Optional[Callable[[Exception], Any]] = None,
    on_network_error: Optional[Callable[[Exception], Any]] = None,
) -> str:
    """Dispatch an error to the first matching handler

    Returns:
        The user-friendly message for the error
    """
    message = get_error_message(error)

    if is_auth_error(error) and on_auth_error:
        on_auth_error(error)
    elif is_permission_error(error) and on_permission_error:
        on_permission_error(error)
    elif is_not_found_error(error) and on_not_found:
        on_not_found(error)
    elif is_validation_error(error) and on_validation_error:
        on_validation_error(error, get_validation_errors(error))
    elif is_server_error(error) and on_server_error:
        on_server_error(error)
    elif is_network_error(error) and on_network_error:
        on_network_error(error)

    return message

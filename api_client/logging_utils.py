"""
Logging utilities for request debugging.
"""
import logging
from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from .transport import ApiRequest

logger = logging.getLogger(__name__)

SENSITIVE_HEADERS = ("authorization", "x-api-key", "api-key", "cookie")


def token_preview(token: Optional[str]) -> str:
    """Short, loggable form of a token"""
    if not token:
        return "NO TOKEN"
    return f"{token[:8]}..." if len(token) > 8 else "***"


def log_request(request: "ApiRequest"):
    """Log outgoing request details with sensitive headers redacted"""
    if not logger.isEnabledFor(logging.DEBUG):
        return

    logger.debug(f"{request.method} {request.path} (retried={request.retried})")
    if request.params:
        logger.debug(f"Params: {request.params}")
    for header_name, header_value in request.headers.items():
        if header_name.lower() in SENSITIVE_HEADERS:
            logger.debug(f"{header_name}: [REDACTED]")
        else:
            logger.debug(f"{header_name}: {header_value}")

"""Transport layer: sends a fully formed request with httpx"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

import httpx

from settings import API_URL, CONNECT_TIMEOUT, REQUEST_TIMEOUT
from .errors import TransportError
from .logging_utils import log_request

logger = logging.getLogger(__name__)

RESPONSE_TYPES = ("json", "text", "bytes")


@dataclass
class ApiRequest:
    """Everything needed to send, and later replay, one API call

    Attributes:
        method: HTTP method, upper case
        path: Path relative to the client's base URL
        params: Query parameters
        json: JSON body
        headers: Caller headers; Authorization is managed by the authenticator
        response_type: How to decode a successful body (json, text or bytes)
        retried: Set once the request has been replayed after a token refresh
    """
    method: str
    path: str
    params: Any = None
    json: Any = None
    headers: Dict[str, str] = field(default_factory=dict)
    response_type: str = "json"
    retried: bool = False

    def __post_init__(self):
        self.method = self.method.upper()
        if self.response_type not in RESPONSE_TYPES:
            raise ValueError(f"Unsupported response type: {self.response_type}")


class Transport:
    """Thin wrapper around a shared httpx.AsyncClient

    ``send`` never raises for an HTTP status; callers inspect the response.
    Network failures and timeouts are raised as TransportError.
    """

    def __init__(
        self,
        base_url: str = API_URL,
        timeout: float = REQUEST_TIMEOUT,
        connect_timeout: float = CONNECT_TIMEOUT,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = httpx.Timeout(timeout, connect=connect_timeout)
        self._client = client
        self._owns_client = client is None

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self.timeout,
                headers={"Content-Type": "application/json"},
            )
        return self._client

    def url_for(self, path: str) -> str:
        if path.startswith(("http://", "https://")):
            return path
        return f"{self.base_url}/{path.lstrip('/')}"

    async def send(self, request: ApiRequest) -> httpx.Response:
        """Send the request and return the raw response

        Raises:
            TransportError: on network failure or timeout
        """
        log_request(request)
        client = self._get_client()
        try:
            response = await client.request(
                request.method,
                self.url_for(request.path),
                params=request.params,
                json=request.json,
                headers=request.headers,
            )
        except httpx.TimeoutException as e:
            logger.error(f"{request.method} {request.path} timed out: {e}")
            raise TransportError(request, f"Request timed out: {e}", timed_out=True) from e
        except httpx.RequestError as e:
            logger.error(f"{request.method} {request.path} failed: {e}")
            raise TransportError(request, f"Request failed: {e}") from e

        logger.debug(f"{request.method} {request.path} - {response.status_code}")
        return response

    async def aclose(self):
        """Close the underlying client if this transport created it"""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.aclose()

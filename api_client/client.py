"""HTTP client facade used by the rest of the application"""

import logging
from typing import Any, Dict, Mapping, Optional, Sequence

import httpx

from session import SessionStore
from settings import API_URL, CONNECT_TIMEOUT, REQUEST_TIMEOUT
from .authenticator import RequestAuthenticator
from .endpoints import SKIP_REFRESH_ENDPOINTS
from .envelope import unwrap_envelope
from .errors import ApiError
from .query import clean_params
from .refresh import RefreshCoordinator
from .transport import ApiRequest, Transport

logger = logging.getLogger(__name__)


class ApiClient:
    """Authenticated client for the dashboard backend

    Every call goes through the same pipeline: attach the bearer token, send,
    and on a 401 let the refresh coordinator renew the token and replay the
    call once. Successful JSON bodies are returned with the success envelope
    removed; failures raise an ApiClientError subclass.
    """

    def __init__(
        self,
        base_url: str = API_URL,
        store: Optional[SessionStore] = None,
        transport: Optional[Transport] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        timeout: float = REQUEST_TIMEOUT,
        connect_timeout: float = CONNECT_TIMEOUT,
        skip_refresh_endpoints: Sequence[str] = SKIP_REFRESH_ENDPOINTS,
    ):
        """
        Args:
            base_url: Backend base URL
            store: Session store (a memory-only store is created if None)
            transport: Prebuilt transport; overrides the other network arguments
            http_client: httpx client for the transport to use
            timeout: Total request timeout in seconds
            connect_timeout: Connection timeout in seconds
            skip_refresh_endpoints: Paths whose 401 never triggers a refresh
        """
        self.store = store if store is not None else SessionStore()
        self.transport = transport or Transport(
            base_url=base_url,
            timeout=timeout,
            connect_timeout=connect_timeout,
            client=http_client,
        )
        self.authenticator = RequestAuthenticator(self.store)
        self.coordinator = RefreshCoordinator(self.store, self.transport, skip_refresh_endpoints)

    async def request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[Mapping[str, Any]] = None,
        json: Any = None,
        headers: Optional[Dict[str, str]] = None,
        response_type: str = "json",
    ) -> Any:
        """Send a request and return the unwrapped payload

        Args:
            method: HTTP method
            path: Path relative to the base URL
            params: Query parameters; None and empty values are dropped
            json: JSON body
            headers: Extra headers
            response_type: "json" (default), "text" or "bytes"

        Raises:
            ApiClientError: TransportError, ApiError or a refresh error
        """
        request = ApiRequest(
            method=method,
            path=path,
            params=clean_params(params) or None,
            json=json,
            headers=dict(headers or {}),
            response_type=response_type,
        )
        return await self._dispatch(request)

    async def get(self, path: str, **options) -> Any:
        return await self.request("GET", path, **options)

    async def post(self, path: str, body: Any = None, **options) -> Any:
        return await self.request("POST", path, json=body, **options)

    async def put(self, path: str, body: Any = None, **options) -> Any:
        return await self.request("PUT", path, json=body, **options)

    async def patch(self, path: str, body: Any = None, **options) -> Any:
        return await self.request("PATCH", path, json=body, **options)

    async def delete(self, path: str, **options) -> Any:
        return await self.request("DELETE", path, **options)

    async def _dispatch(self, request: ApiRequest, token: Optional[str] = None) -> Any:
        self.authenticator.apply(request, token)
        response = await self.transport.send(request)

        if response.is_success:
            return self._decode(request, response)

        error = ApiError.from_response(request, response)
        if self.coordinator.is_retry_eligible(error):
            logger.debug(f"{request.method} {request.path} returned 401, handing over to token refresh")
            return await self.coordinator.recover(error, self._dispatch)

        logger.error(f"{request.method} {request.path} failed with status {error.status}")
        raise error

    @staticmethod
    def _decode(request: ApiRequest, response: httpx.Response) -> Any:
        if request.response_type == "bytes":
            return response.content
        if request.response_type == "text":
            return response.text

        if not response.content:
            return None
        try:
            body = response.json()
        except ValueError:
            logger.debug(f"Non-JSON body from {request.path}, returning text")
            return response.text
        return unwrap_envelope(body)

    async def aclose(self):
        await self.transport.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.aclose()

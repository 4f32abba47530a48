"""Single-flight access token refresh

When a request fails with 401 the coordinator refreshes the access token
once, however many requests are failing at the same moment. Requests that
fail while a refresh is already running wait in a queue and are replayed
with the new token, or all fail together with the refresh error.

Every state change below happens between ``await`` points, so on a single
asyncio event loop the IDLE -> REFRESHING check-and-set cannot interleave
with another request. The coordinator is not thread-safe: sharing one across
threads or event loops would need a lock around that transition.
"""

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Awaitable, Callable, List, Optional, Sequence, Tuple

from session import SessionStore
from .endpoints import AUTH_REFRESH, SKIP_REFRESH_ENDPOINTS, is_skip_refresh_endpoint
from .errors import (
    ApiClientError,
    ApiError,
    RefreshFailedError,
    RefreshUnavailableError,
)
from .logging_utils import token_preview
from .transport import ApiRequest, Transport

logger = logging.getLogger(__name__)

# Re-issues a request through the full client pipeline with the given token
Replay = Callable[[ApiRequest, Optional[str]], Awaitable[Any]]


class RefreshState(Enum):
    IDLE = "idle"
    REFRESHING = "refreshing"


@dataclass
class PendingRequest:
    """A request waiting for the in-flight refresh to finish"""
    request: ApiRequest
    future: "asyncio.Future[str]"


def extract_refreshed_tokens(body: Any) -> Tuple[Optional[str], Optional[str]]:
    """Pull the new access token and optional rotated refresh token from a refresh response

    Returns:
        Tuple of (access_token, refresh_token), either may be None
    """
    if not isinstance(body, dict):
        return None, None

    nested = body.get("data")
    if not isinstance(nested, dict):
        nested = {}

    access_token = (
        body.get("accessToken")
        or body.get("token")
        or nested.get("accessToken")
        or nested.get("token")
    )
    refresh_token = body.get("refreshToken") or nested.get("refreshToken")

    if not isinstance(access_token, str):
        access_token = None
    if not isinstance(refresh_token, str):
        refresh_token = None
    return access_token, refresh_token


class RefreshCoordinator:
    """Owns the refresh state machine and the queue of waiting requests

    Args:
        store: Session store holding the credential pair
        transport: Raw transport used for the refresh call, bypassing the
            client's request and response hooks
        skip_endpoints: Paths whose 401 never triggers a refresh
    """

    def __init__(
        self,
        store: SessionStore,
        transport: Transport,
        skip_endpoints: Sequence[str] = SKIP_REFRESH_ENDPOINTS,
    ):
        self.store = store
        self.transport = transport
        self.skip_endpoints = tuple(skip_endpoints)
        self.state = RefreshState.IDLE
        self.refresh_count = 0
        self._queue: List[PendingRequest] = []

    @property
    def pending_count(self) -> int:
        return len(self._queue)

    def is_retry_eligible(self, error: Exception) -> bool:
        """Check whether an error should go through the refresh protocol

        Only a 401 on a request that has not been replayed yet, for an
        endpoint outside the skip-list, qualifies.
        """
        if not isinstance(error, ApiError) or error.status != 401:
            return False
        request = error.request
        if request is None or request.retried:
            return False
        return not is_skip_refresh_endpoint(request.path, self.skip_endpoints)

    async def recover(self, error: ApiError, replay: Replay) -> Any:
        """Refresh the token (or wait for the running refresh) and replay the request

        Args:
            error: The retry-eligible 401 error
            replay: Function re-issuing a request with a given token

        Returns:
            Whatever the replayed request returns

        Raises:
            ApiError: the original 401 when no refresh token is available
            RefreshFailedError: when the refresh call fails or the new
                tokens cannot be stored
        """
        request = error.request
        request.retried = True

        if self.state is RefreshState.REFRESHING:
            logger.debug(f"Refresh in progress, queueing {request.method} {request.path}")
            future = asyncio.get_running_loop().create_future()
            self._queue.append(PendingRequest(request, future))
            token = await future
            return await replay(request, token)

        self.state = RefreshState.REFRESHING
        logger.warning(f"401 on {request.method} {request.path}, refreshing access token")

        refresh_token = self.store.read().refresh_token
        if not refresh_token:
            logger.error("No refresh token available, forcing logout")
            self._finish(error=RefreshUnavailableError("No refresh token available", request))
            self.store.clear()
            raise error

        try:
            access_token, rotated_refresh_token = await self._request_new_tokens(refresh_token)
        except ApiClientError as refresh_error:
            logger.error(f"Token refresh failed: {refresh_error}")
            self._finish(error=refresh_error)
            self.store.clear()
            raise
        except BaseException:
            # Cancelled while refreshing: waiters fail, the session is kept
            logger.warning("Token refresh interrupted, failing queued requests")
            self._finish(error=RefreshFailedError("Token refresh was interrupted", request))
            raise

        logger.info(f"Token refreshed successfully ({token_preview(access_token)})")
        try:
            self.store.replace(access_token, rotated_refresh_token)
        except Exception as e:
            logger.error(f"Failed to store refreshed tokens: {e}")
            store_error = RefreshFailedError(f"Failed to store refreshed tokens: {e}", request)
            store_error.__cause__ = e
            self._finish(error=store_error)
            raise store_error from e

        self._finish(token=access_token)
        return await replay(request, access_token)

    async def _request_new_tokens(self, refresh_token: str) -> Tuple[str, Optional[str]]:
        """Call the refresh endpoint once

        Raises:
            RefreshFailedError: on transport failure, non-2xx status or a
                response without an access token
        """
        self.refresh_count += 1
        refresh_request = ApiRequest(
            method="POST",
            path=AUTH_REFRESH,
            json={"refreshToken": refresh_token},
        )

        try:
            response = await self.transport.send(refresh_request)
        except ApiClientError as e:
            raise RefreshFailedError(f"Token refresh request failed: {e}", refresh_request) from e

        if not response.is_success:
            cause = ApiError.from_response(refresh_request, response)
            raise RefreshFailedError(
                f"Token refresh failed with status {response.status_code}", refresh_request
            ) from cause

        try:
            body = response.json()
        except ValueError as e:
            raise RefreshFailedError("Token refresh response is not JSON", refresh_request) from e

        access_token, rotated_refresh_token = extract_refreshed_tokens(body)
        if not access_token:
            raise RefreshFailedError("No access token in refresh response", refresh_request)

        return access_token, rotated_refresh_token

    def _finish(self, token: Optional[str] = None, error: Optional[BaseException] = None):
        """Return to IDLE and complete every queued request in FIFO order"""
        queue, self._queue = self._queue, []
        self.state = RefreshState.IDLE

        if queue:
            logger.debug(f"Draining {len(queue)} queued request(s)")
        for pending in queue:
            # A cancelled waiter must not stop the rest of the queue draining
            if pending.future.done():
                continue
            if error is not None:
                pending.future.set_exception(error)
            else:
                pending.future.set_result(token)

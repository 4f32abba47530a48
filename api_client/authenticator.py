"""Request hook attaching the bearer token"""

import logging
from typing import Optional

from session import SessionStore
from .logging_utils import token_preview
from .transport import ApiRequest

logger = logging.getLogger(__name__)


class RequestAuthenticator:
    """Attaches the current access token to outgoing requests

    A missing token is not an error here; the backend decides whether the
    request needs one.
    """

    def __init__(self, store: SessionStore):
        self.store = store

    def apply(self, request: ApiRequest, token: Optional[str] = None) -> ApiRequest:
        """Set or remove the Authorization header

        Args:
            request: Request about to be sent
            token: Explicit token to use instead of the stored one

        Returns:
            The same request, updated in place
        """
        if token is None:
            token = self.store.read().access_token

        # Drop any header left over from a previous attempt, whatever its case
        for name in [h for h in request.headers if h.lower() == "authorization"]:
            del request.headers[name]

        if token:
            request.headers["Authorization"] = f"Bearer {token}"
            logger.debug(f"Attaching token {token_preview(token)} to {request.path}")
        else:
            logger.debug(f"No token available for {request.path}")
        return request

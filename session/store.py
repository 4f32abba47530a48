"""Session store holding the current user and credential pair"""

import logging
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Union

from .models import CredentialPair, SessionState, SessionUser
from .storage import SessionStorage

logger = logging.getLogger(__name__)

# SuperAdmin > Admin > Teacher
ROLE_HIERARCHY = {
    "teacher": 0,
    "admin": 1,
    "superadmin": 2,
}


class InvalidSessionError(ValueError):
    """Raised when login data is missing the user or a token"""


class SessionStore:
    """Current session state, optionally persisted to disk

    The API client only relies on ``read``, ``replace`` and ``clear``. The
    remaining methods serve the dashboard's session management (login,
    profile updates, role checks).

    Args:
        storage: Optional file storage. Without one the store is memory only.
    """

    def __init__(self, storage: Optional[SessionStorage] = None):
        self.storage = storage
        self._state = SessionState()
        self._logout_listeners: List[Callable[[], None]] = []

        if storage is not None:
            persisted = storage.load()
            if persisted is not None:
                self._state = persisted
                logger.debug("Restored session from storage")

    # Credential boundary used by the API client

    def read(self) -> CredentialPair:
        """Return the current credential pair"""
        return CredentialPair(
            access_token=self._state.token,
            refresh_token=self._state.refresh_token,
        )

    def replace(self, access_token: str, refresh_token: Optional[str] = None):
        """Atomically swap in a new access token

        Args:
            access_token: New access token
            refresh_token: Rotated refresh token; the current one is kept if omitted
        """
        if not access_token or not isinstance(access_token, str):
            logger.error("Refusing to store an invalid access token")
            return

        logger.debug(f"Updating tokens (rotated refresh token: {bool(refresh_token)})")
        self._set_state(
            token=access_token,
            refresh_token=refresh_token or self._state.refresh_token,
        )

    def clear(self):
        """Drop the session and notify logout listeners"""
        logger.info("Logging out, clearing session")
        self._state = SessionState()
        if self.storage is not None:
            try:
                self.storage.clear()
            except OSError as e:
                logger.error(f"Failed to remove session file: {e}")

        for listener in list(self._logout_listeners):
            try:
                listener()
            except Exception:
                logger.exception("Logout listener failed")

    def add_logout_listener(self, listener: Callable[[], None]) -> Callable[[], None]:
        """Register a callback invoked after the session is cleared

        Returns:
            A function that unregisters the listener
        """
        self._logout_listeners.append(listener)

        def remove():
            if listener in self._logout_listeners:
                self._logout_listeners.remove(listener)

        return remove

    # Session management

    def login(
        self,
        user_or_payload: Union[Mapping[str, Any], None],
        access_token: Optional[str] = None,
        refresh_token: Optional[str] = None,
    ):
        """Start a session

        Accepts either the login response as a single mapping
        (``{"user": ..., "accessToken": ..., "refreshToken": ...}``) or the
        user followed by both tokens.

        Raises:
            InvalidSessionError: if the user or either token is missing
        """
        if access_token and refresh_token:
            user_data = user_or_payload
            token, refresh = access_token, refresh_token
        elif isinstance(user_or_payload, Mapping):
            user_data = user_or_payload.get("user")
            token = user_or_payload.get("accessToken") or user_or_payload.get("token")
            refresh = user_or_payload.get("refreshToken")
        else:
            raise InvalidSessionError("Invalid login data format")

        if not isinstance(user_data, Mapping):
            raise InvalidSessionError("User data is required")
        if not token or not isinstance(token, str):
            raise InvalidSessionError("Access token is required")
        if not refresh or not isinstance(refresh, str):
            raise InvalidSessionError("Refresh token is required")

        user = SessionUser.model_validate(dict(user_data))
        if user.id is None or not user.username or not user.role:
            logger.warning(
                f"User data missing required fields: id={user.id is not None}, "
                f"username={bool(user.username)}, role={bool(user.role)}"
            )

        logger.info(f"Login successful for {user.username} ({user.role})")
        self._set_state(user=user, token=token, refresh_token=refresh, is_authenticated=True)

    def set_user(self, updates: Mapping[str, Any]):
        """Merge profile changes into the current user"""
        if self._state.user is None:
            logger.warning("Cannot update user - no user logged in")
            return

        merged = {**self._state.user.model_dump(), **dict(updates)}
        self._set_state(user=SessionUser.model_validate(merged))

    @property
    def user(self) -> Optional[Dict[str, Any]]:
        return self._state.user_dict()

    @property
    def is_authenticated(self) -> bool:
        return self._state.is_authenticated

    def has_role(self, roles: Union[str, Iterable[str]]) -> bool:
        """Check whether the user has one of the given roles (case-insensitive)"""
        user_role = self.get_role()
        if user_role is None:
            return False

        if isinstance(roles, str):
            roles = [roles]
        return any(role.lower() == user_role for role in roles)

    def has_permission(self, minimum_role: str) -> bool:
        """Check the user's role against the role hierarchy"""
        user_role = self.get_role()
        if user_role is None:
            return False

        user_level = ROLE_HIERARCHY.get(user_role, -1)
        required_level = ROLE_HIERARCHY.get(minimum_role.lower(), float("inf"))
        return user_level >= required_level

    def get_role(self) -> Optional[str]:
        user = self._state.user
        if user is None or not user.role:
            return None
        return user.role.lower()

    def is_logged_in(self) -> bool:
        state = self._state
        return state.is_authenticated and state.user is not None and bool(state.token)

    def _set_state(self, **changes):
        self._state = self._state.model_copy(update=changes)
        if self.storage is not None:
            self.storage.save(self._state)

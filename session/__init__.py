"""Session management package for certdesk

Holds the logged-in user and the credential pair that the API client reads
on every request and replaces after a token refresh.
"""

from .models import CredentialPair, SessionState, SessionUser
from .storage import SessionStorage
from .store import InvalidSessionError, SessionStore, ROLE_HIERARCHY

__all__ = [
    "CredentialPair",
    "SessionState",
    "SessionUser",
    "SessionStorage",
    "SessionStore",
    "InvalidSessionError",
    "ROLE_HIERARCHY",
]

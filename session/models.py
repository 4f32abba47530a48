"""Data models for the dashboard session"""

from dataclasses import dataclass
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict


SESSION_STATE_VERSION = 1


@dataclass(frozen=True)
class CredentialPair:
    """Access and refresh credentials held by the session

    Attributes:
        access_token: Short-lived bearer token attached to each request
        refresh_token: Longer-lived token used only to obtain a new access token
    """
    access_token: Optional[str] = None
    refresh_token: Optional[str] = None


class SessionUser(BaseModel):
    """User returned by the login endpoint"""
    model_config = ConfigDict(extra="allow")

    id: Optional[Any] = None
    username: Optional[str] = None
    role: Optional[str] = None


class SessionState(BaseModel):
    """Persisted session (what survives a restart)"""
    user: Optional[SessionUser] = None
    token: Optional[str] = None
    refresh_token: Optional[str] = None
    is_authenticated: bool = False
    version: int = SESSION_STATE_VERSION

    def user_dict(self) -> Optional[Dict[str, Any]]:
        return self.user.model_dump() if self.user else None

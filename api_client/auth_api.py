"""Auth endpoints"""

from typing import Any, Dict

from .client import ApiClient
from .endpoints import (
    AUTH_CHANGE_PASSWORD,
    AUTH_CHANGE_USERNAME,
    AUTH_LOGIN,
    AUTH_LOGOUT,
    AUTH_ME,
)


async def login(client: ApiClient, username: str, password: str) -> Dict[str, Any]:
    """Log in and return ``{user, accessToken, refreshToken}``

    The session store is not touched; pass the result to ``SessionStore.login``.
    """
    return await client.post(AUTH_LOGIN, {"username": username, "password": password})


async def logout(client: ApiClient) -> Any:
    """Invalidate the refresh token on the server"""
    return await client.post(AUTH_LOGOUT)


async def get_current_user(client: ApiClient) -> Any:
    return await client.get(AUTH_ME)


async def change_password(client: ApiClient, current_password: str, new_password: str) -> Any:
    return await client.patch(
        AUTH_CHANGE_PASSWORD,
        {"currentPassword": current_password, "newPassword": new_password},
    )


async def change_username(client: ApiClient, new_username: str, password: str) -> Any:
    # The backend expects the confirmation password as "currentPassword"
    return await client.patch(
        AUTH_CHANGE_USERNAME,
        {"newUsername": new_username, "currentPassword": password},
    )

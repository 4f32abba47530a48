"""
Tests for the auth endpoint functions.
"""

import json

import httpx
import pytest

from api_client import auth_api


def echo(request):
    return httpx.Response(200, json={"success": True, "data": json.loads(request.content or b"null")})


class TestAuthApi:

    @pytest.mark.asyncio
    async def test_login_returns_unwrapped_payload(self, backend, client) -> None:
        backend.route(
            "POST", "/auth/login",
            lambda r: httpx.Response(200, json={
                "success": True,
                "data": {"user": {"id": 1}, "accessToken": "A9", "refreshToken": "R9"},
            })
        )

        payload = await auth_api.login(client, "admin", "secret")

        assert payload["accessToken"] == "A9"
        assert json.loads(backend.calls("/auth/login")[0].content) == {"username": "admin", "password": "secret"}

    @pytest.mark.asyncio
    async def test_change_password_uses_patch(self, backend, client) -> None:
        backend.route("PATCH", "/auth/change-password", echo)

        body = await auth_api.change_password(client, "old123", "new123")

        assert body == {"currentPassword": "old123", "newPassword": "new123"}

    @pytest.mark.asyncio
    async def test_change_username_sends_current_password(self, backend, client) -> None:
        backend.route("PATCH", "/auth/change-username", echo)

        body = await auth_api.change_username(client, "newadmin", "secret")

        assert body == {"newUsername": "newadmin", "currentPassword": "secret"}

    @pytest.mark.asyncio
    async def test_me_and_logout(self, backend, client) -> None:
        backend.route("GET", "/auth/me", lambda r: httpx.Response(200, json={"success": True, "data": {"user": {"id": 1}}}))
        backend.route("POST", "/auth/logout", lambda r: httpx.Response(200, json={"success": True, "message": "Logged out"}))

        assert await auth_api.get_current_user(client) == {"user": {"id": 1}}
        assert await auth_api.logout(client) == {"success": True, "message": "Logged out"}

"""
Tests for the ApiClient facade: verbs, decoding and error surfacing.
"""

import json
import logging

import httpx
import pytest

from api_client import ApiClient, ApiError, TransportError, get_error_message
from conftest import BASE_URL


class TestVerbs:

    @pytest.mark.asyncio
    async def test_post_sends_json_body_with_token(self, backend, client) -> None:
        backend.route(
            "POST", "/branches",
            lambda r: httpx.Response(201, json={"success": True, "data": {"id": 9, **json.loads(r.content)}})
        )

        created = await client.post("/branches", {"name": "North"})

        assert created == {"id": 9, "name": "North"}
        request = backend.calls("/branches", "POST")[0]
        assert request.headers["Authorization"] == "Bearer A1"
        assert request.headers["Content-Type"] == "application/json"

    @pytest.mark.asyncio
    async def test_put_patch_delete(self, backend, client) -> None:
        backend.route("PUT", "/modules/1", lambda r: httpx.Response(200, json={"success": True, "data": "put"}))
        backend.route("PATCH", "/modules/1", lambda r: httpx.Response(200, json={"success": True, "data": "patch"}))
        backend.route("DELETE", "/modules/1", lambda r: httpx.Response(204))

        assert await client.put("/modules/1", {"name": "x"}) == "put"
        assert await client.patch("/modules/1", {"name": "y"}) == "patch"
        assert await client.delete("/modules/1") is None

    @pytest.mark.asyncio
    async def test_get_drops_blank_params(self, backend, client) -> None:
        backend.route("GET", "/students", lambda r: httpx.Response(200, json={"success": True, "students": []}))

        result = await client.get("/students", params={"page": 2, "search": "", "branch": None, "ids": [1, 2]})

        assert result == {"success": True, "students": []}
        request = backend.calls("/students")[0]
        assert request.url.params.multi_items() == [("page", "2"), ("ids", "1"), ("ids", "2")]


class TestDecoding:

    @pytest.mark.asyncio
    async def test_bytes_response(self, backend, client) -> None:
        backend.route("GET", "/certificates/1/pdf", lambda r: httpx.Response(200, content=b"%PDF-1.7"))
        assert await client.get("/certificates/1/pdf", response_type="bytes") == b"%PDF-1.7"

    @pytest.mark.asyncio
    async def test_text_response(self, backend, client) -> None:
        backend.route("GET", "/backups/export", lambda r: httpx.Response(200, text="id,name\n1,a\n"))
        assert await client.get("/backups/export", response_type="text") == "id,name\n1,a\n"

    @pytest.mark.asyncio
    async def test_non_json_body_falls_back_to_text(self, backend, client) -> None:
        backend.route("GET", "/health", lambda r: httpx.Response(200, text="OK"))
        assert await client.get("/health") == "OK"

    @pytest.mark.asyncio
    async def test_unknown_response_type_is_rejected(self, client) -> None:
        with pytest.raises(ValueError):
            await client.get("/branches", response_type="blob")


class TestErrors:

    @pytest.mark.asyncio
    async def test_error_carries_backend_message(self, backend, client) -> None:
        backend.route(
            "POST", "/branches",
            lambda r: httpx.Response(409, json={"success": False, "message": "Branch code already exists"})
        )

        with pytest.raises(ApiError) as exc_info:
            await client.post("/branches", {"code": "N1"})

        assert exc_info.value.status == 409
        assert get_error_message(exc_info.value) == "Branch code already exists"

    @pytest.mark.asyncio
    async def test_network_failure_is_transport_error(self, backend, client) -> None:
        def down(request):
            raise httpx.ConnectError("connection refused", request=request)

        backend.route("GET", "/branches", down)

        with pytest.raises(TransportError) as exc_info:
            await client.get("/branches")

        assert exc_info.value.timed_out is False
        assert backend.calls("/auth/refresh") == []

    @pytest.mark.asyncio
    async def test_recovered_401_is_not_logged_as_error(self, backend, client, caplog) -> None:
        backend.route(
            "GET", "/branches",
            lambda r: httpx.Response(200, json=[]) if r.headers.get("Authorization") == "Bearer A2"
            else httpx.Response(401, json={"success": False})
        )
        backend.route("POST", "/auth/refresh", lambda r: httpx.Response(200, json={"accessToken": "A2"}))

        with caplog.at_level(logging.DEBUG, logger="api_client.client"):
            assert await client.get("/branches") == []

        client_records = [r for r in caplog.records if r.name == "api_client.client"]
        assert any("token refresh" in r.getMessage() for r in client_records)
        assert all(r.levelno < logging.ERROR for r in client_records)

    @pytest.mark.asyncio
    async def test_raised_error_is_logged_as_error(self, backend, client, caplog) -> None:
        backend.route("GET", "/branches/3", lambda r: httpx.Response(403, json={"success": False}))

        with caplog.at_level(logging.ERROR, logger="api_client.client"):
            with pytest.raises(ApiError):
                await client.get("/branches/3")

        assert "failed with status 403" in caplog.text


class TestLifecycle:

    @pytest.mark.asyncio
    async def test_context_manager_closes_owned_client(self) -> None:
        async with ApiClient(base_url=BASE_URL) as client:
            http_client = client.transport._get_client()
        assert http_client.is_closed

    @pytest.mark.asyncio
    async def test_injected_client_is_left_open(self, client) -> None:
        http_client = client.transport._get_client()
        await client.aclose()
        assert not http_client.is_closed
        await http_client.aclose()

    def test_each_client_has_its_own_coordinator(self) -> None:
        assert ApiClient(base_url=BASE_URL).coordinator is not ApiClient(base_url=BASE_URL).coordinator

"""Tests for the external backend client."""

import asyncio

import httpx
import pytest

from portal.domain.errors import BackendNetworkError, BackendTimeoutError
from portal.infrastructure.clients.backend_client import BackendClient, normalize_backend_user, unwrap


def _client(handler, **kwargs):
    kwargs.setdefault("retry_delay", 0)
    return BackendClient("http://backend.test", transport=httpx.MockTransport(handler), **kwargs)


def _run(client, coro):
    async def scenario():
        try:
            return await coro
        finally:
            await client.aclose()

    return asyncio.run(scenario())


class TestBackendClient:
    """Tests for retries, timeouts and header forwarding."""

    def test_bearer_token_is_forwarded(self):
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(200, json={"success": True, "data": []})

        client = _client(handler)
        status, body = _run(client, client.forward("GET", "/api/news", "abc"))

        assert status == 200
        assert body == {"success": True, "data": []}
        assert seen[0].headers["Authorization"] == "Bearer abc"

    def test_get_is_retried_on_network_error(self):
        calls = []

        def handler(request):
            calls.append(request)
            if len(calls) < 3:
                raise httpx.ConnectError("refused", request=request)
            return httpx.Response(200, json={"ok": True})

        client = _client(handler, max_retries=3)
        status, _ = _run(client, client.forward("GET", "/api/news"))

        assert status == 200
        assert len(calls) == 3

    def test_get_gives_up_after_max_retries(self):
        calls = []

        def handler(request):
            calls.append(request)
            raise httpx.ConnectError("refused", request=request)

        client = _client(handler, max_retries=3)
        with pytest.raises(BackendNetworkError):
            _run(client, client.forward("GET", "/api/news"))
        assert len(calls) == 3

    def test_server_errors_are_retried_for_reads_only(self):
        calls = []

        def handler(request):
            calls.append(request.method)
            return httpx.Response(503, json={"success": False, "error": "down"})

        client = _client(handler, max_retries=2)
        status, _ = _run(client, client.forward("GET", "/api/news"))
        assert status == 503
        assert calls == ["GET", "GET"]

        calls.clear()
        client = _client(handler, max_retries=2)
        status, _ = _run(client, client.forward("POST", "/api/news", json={"title": "x"}))
        assert status == 503
        assert calls == ["POST"]

    def test_writes_are_never_retried(self):
        calls = []

        def handler(request):
            calls.append(request)
            raise httpx.ConnectError("refused", request=request)

        client = _client(handler, max_retries=3)
        with pytest.raises(BackendNetworkError):
            _run(client, client.forward("POST", "/api/news", json={"title": "x"}))
        assert len(calls) == 1

    def test_timeout_is_mapped(self):
        def handler(request):
            raise httpx.ReadTimeout("slow", request=request)

        client = _client(handler, max_retries=1)
        with pytest.raises(BackendTimeoutError) as exc:
            _run(client, client.forward("GET", "/api/news"))
        assert exc.value.status_code == 504

    def test_non_json_body(self):
        def handler(request):
            return httpx.Response(500, text="Internal failure")

        client = _client(handler, max_retries=1)
        status, body = _run(client, client.forward("DELETE", "/api/news/1"))

        assert status == 500
        assert body == {"success": False, "error": "Internal failure"}

    def test_check_health(self):
        def handler(request):
            return httpx.Response(200, json={"status": "ok"})

        client = _client(handler)
        assert _run(client, client.check_health()) is True

        def failing(request):
            raise httpx.ConnectError("refused", request=request)

        client = _client(failing)
        assert _run(client, client.check_health()) is False


class TestEnvelopeHelpers:
    """Tests for tolerant parsing of backend payloads."""

    def test_unwrap_accepts_aliased_keys(self):
        assert unwrap([{"id": 1}], "data") == [{"id": 1}]
        assert unwrap({"data": [{"id": 1}]}, "data", "users") == [{"id": 1}]
        assert unwrap({"users": [{"id": 2}]}, "data", "users") == [{"id": 2}]
        assert unwrap({"data": {"users": [{"id": 3}]}}, "data", "users") == [{"id": 3}]
        assert unwrap({"success": True}, "data") == []
        assert unwrap("oops", "data") == []

    def test_normalize_backend_user(self):
        user = normalize_backend_user(
            {"id": 5, "email": "a@x.com", "roles": [{"name": "news"}], "is_active": False, "created_at": "2026-01-01"}
        )

        assert user["id"] == "5"
        assert user["roles"] == ["news"]
        assert user["isActive"] is False
        assert user["createdAt"] == "2026-01-01"

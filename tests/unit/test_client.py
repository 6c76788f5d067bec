"""
Tests for the Twist API client (adapters/client.py).

Uses httpx.MockTransport so requests are inspected without a network.
"""

import json
from unittest.mock import AsyncMock, patch
from urllib.parse import parse_qs

import httpx
import pytest

import config
from adapters import endpoints
from adapters.client import ApiRequest, TwistClient
from adapters.services import close_twist_client, get_twist_client
from models import ErrorKind, Thread, TwistApiError, TwistError

BASE = "https://api.twist.com/api/v3/"


def _client(handler) -> TwistClient:
    return TwistClient("secret-token", base_url=BASE, transport=httpx.MockTransport(handler))


def _form(request: httpx.Request) -> dict[str, str]:
    return {k: v[0] for k, v in parse_qs(request.content.decode()).items()}


def _batch_item(code: int, body: object) -> dict:
    return {"code": code, "headers": "", "body": json.dumps(body)}


class TestApiRequest:
    """Request descriptor encoding."""

    def test_none_params_dropped(self) -> None:
        request = ApiRequest("GET", "comments/get", {"thread_id": 1, "limit": None})
        assert request.encoded_params() == {"thread_id": "1"}

    def test_lists_and_bools_encoded(self) -> None:
        request = ApiRequest("GET", "search/query", {"channel_ids": [1, 2], "mention_self": True})
        assert request.encoded_params() == {"channel_ids": "[1, 2]", "mention_self": "true"}

    def test_batch_entry_carries_query(self) -> None:
        entry = endpoints.get_thread(7).batch_entry(BASE)
        assert entry == {"method": "GET", "url": f"{BASE}threads/getone?id=7"}

    def test_is_read(self) -> None:
        assert endpoints.get_thread(1).is_read
        assert not endpoints.archive_thread(1).is_read


class TestExecute:
    """Single requests."""

    @pytest.mark.asyncio
    async def test_get_sends_auth_and_query(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"id": 7, "title": "Hello", "channel_id": 3})

        thread = await _client(handler).execute(endpoints.get_thread(7))

        assert isinstance(thread, Thread)
        assert thread.title == "Hello"
        assert seen[0].method == "GET"
        assert str(seen[0].url) == f"{BASE}threads/getone?id=7"
        assert seen[0].headers["Authorization"] == "Bearer secret-token"

    @pytest.mark.asyncio
    async def test_post_sends_form(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={})

        await _client(handler).execute(endpoints.mark_thread_read(5))

        assert seen[0].method == "POST"
        assert _form(seen[0]) == {"id": "5", "obj_index": "0"}

    @pytest.mark.asyncio
    async def test_error_response_raises_with_api_message(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(404, json={"error_code": 20, "error_string": "Thread not found"})

        with pytest.raises(TwistApiError) as exc_info:
            await _client(handler).execute(endpoints.get_thread(1))

        assert exc_info.value.message == "Thread not found"
        assert exc_info.value.kind == ErrorKind.NOT_FOUND
        assert exc_info.value.path == "threads/getone"

    @pytest.mark.asyncio
    async def test_reads_retried_on_server_error(self) -> None:
        responses = [httpx.Response(503, text=""), httpx.Response(200, json={"id": 1})]

        def handler(request: httpx.Request) -> httpx.Response:
            return responses.pop(0)

        thread = await _client(handler).execute(endpoints.get_thread(1))

        assert thread.id == 1
        assert responses == []

    @pytest.mark.asyncio
    async def test_mutations_not_retried(self) -> None:
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            return httpx.Response(503, text="")

        with pytest.raises(TwistApiError) as exc_info:
            await _client(handler).execute(endpoints.archive_thread(1))

        assert len(calls) == 1
        assert exc_info.value.message == "HTTP 503"

    @pytest.mark.asyncio
    async def test_transport_error_converted(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(TwistError) as exc_info:
            await _client(handler).execute(endpoints.archive_thread(1))

        assert exc_info.value.kind == ErrorKind.NETWORK_ERROR


class TestBatch:
    """Atomic batch submission."""

    @pytest.mark.asyncio
    async def test_empty_batch_makes_no_call(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise AssertionError("no request expected")

        assert await _client(handler).batch() == []

    @pytest.mark.asyncio
    async def test_results_parsed_in_order(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json=[
                _batch_item(200, {"id": 1, "name": "general"}),
                _batch_item(200, {"id": 7, "title": "Hi"}),
            ])

        channel, thread = await _client(handler).batch(
            endpoints.get_channel(1), endpoints.get_thread(7),
        )

        assert channel.name == "general"
        assert thread.title == "Hi"
        form = _form(seen[0])
        assert str(seen[0].url) == f"{BASE}batch"
        assert form["parallel"] == "true"
        assert json.loads(form["requests"]) == [
            {"method": "GET", "url": f"{BASE}channels/getone?id=1"},
            {"method": "GET", "url": f"{BASE}threads/getone?id=7"},
        ]

    @pytest.mark.asyncio
    async def test_mutation_batch_not_parallel(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json=[_batch_item(200, {})])

        await _client(handler).batch(endpoints.archive_thread(3))

        assert "parallel" not in _form(seen[0])

    @pytest.mark.asyncio
    async def test_failing_item_fails_whole_batch(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json=[
                _batch_item(200, {}),
                _batch_item(404, {"error_string": "Thread not found"}),
            ])

        with pytest.raises(TwistApiError) as exc_info:
            await _client(handler).batch(
                endpoints.mark_thread_read(1), endpoints.archive_thread(2),
            )

        assert exc_info.value.status_code == 404
        assert exc_info.value.path == "inbox/archive"
        assert "Thread not found" in exc_info.value.message

    @pytest.mark.asyncio
    async def test_batch_http_error_raises(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(400, json={"error_string": "Invalid batch"})

        with pytest.raises(TwistApiError, match="Invalid batch"):
            await _client(handler).batch(endpoints.archive_thread(1))

    @pytest.mark.asyncio
    async def test_result_count_mismatch_raises(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json=[])

        with pytest.raises(TwistApiError):
            await _client(handler).batch(endpoints.archive_thread(1))


class TestSharedClient:
    """Cached client lifecycle (adapters/services.py)."""

    @pytest.mark.asyncio
    async def test_close_releases_cached_client(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(config, "TWIST_API_KEY", "secret-token")
        client = get_twist_client()
        assert get_twist_client() is client

        with patch.object(TwistClient, "aclose", new_callable=AsyncMock) as aclose:
            await close_twist_client()

        aclose.assert_awaited_once()
        assert get_twist_client.cache_info().currsize == 0

    @pytest.mark.asyncio
    async def test_close_without_client_builds_nothing(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(config, "TWIST_API_KEY", "")

        with patch.object(TwistClient, "aclose", new_callable=AsyncMock) as aclose:
            await close_twist_client()

        aclose.assert_not_awaited()

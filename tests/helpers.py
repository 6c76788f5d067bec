"""
Shared test helpers for twist-mcp.

Centralizes the recording client double and raw API payload factories.
Payloads are the snake_case dicts the REST API returns, so every test also
goes through the models' from_api() parsing.
"""

from __future__ import annotations

from typing import Any, Callable

from adapters.client import ApiRequest

# 2024-01-01T00:00:00Z
TS_2024 = 1704067200


class FakeTwistClient:
    """
    Recording stand-in for TwistClient.

    Responses are keyed by endpoint path; a value may be a raw payload or a
    callable taking the ApiRequest. Failures are keyed by path, or by
    (path, id) to fail a single target.

    Attributes:
        calls: Requests sent through execute(), in order
        batches: Request lists sent through batch(), in order
    """

    def __init__(
        self,
        responses: dict[str, Any] | None = None,
        failures: dict[Any, Exception] | None = None,
        batch_error: Exception | None = None,
    ):
        self.responses = responses or {}
        self.failures = failures or {}
        self.batch_error = batch_error
        self.calls: list[ApiRequest] = []
        self.batches: list[list[ApiRequest]] = []

    async def execute(self, request: ApiRequest) -> Any:
        self.calls.append(request)
        return self._respond(request)

    async def batch(self, *requests: ApiRequest) -> list[Any]:
        self.batches.append(list(requests))
        if self.batch_error is not None:
            raise self.batch_error
        return [self._respond(request) for request in requests]

    def _respond(self, request: ApiRequest) -> Any:
        for key in ((request.path, request.params.get("id")), request.path):
            if key in self.failures:
                raise self.failures[key]
        raw = self.responses.get(request.path)
        if callable(raw):
            raw = raw(request)
        return request.parse_response(raw)

    @property
    def call_count(self) -> int:
        """Remote round trips made (single calls plus batches)."""
        return len(self.calls) + len(self.batches)

    def paths(self) -> list[str]:
        """Paths of single execute() calls, in order."""
        return [request.path for request in self.calls]


def by_id(payloads: dict[int, dict[str, Any]], param: str = "id") -> Callable[[ApiRequest], Any]:
    """Response handler returning the payload for the request's id param."""
    return lambda request: payloads[request.params[param]]


# =============================================================================
# PAYLOAD FACTORIES
# =============================================================================

def make_user(id: int = 1, name: str = "Ada Lovelace", **overrides: Any) -> dict[str, Any]:
    data = {
        "id": id,
        "name": name,
        "short_name": name.split()[0],
        "email": f"{name.split()[0].lower()}@example.com",
        "user_type": "USER",
        "bot": False,
        "removed": False,
        "timezone": "Europe/London",
    }
    data.update(overrides)
    return data


def make_thread(id: int = 100, **overrides: Any) -> dict[str, Any]:
    data = {
        "id": id,
        "title": f"Thread {id}",
        "content": "Thread body",
        "channel_id": 10,
        "workspace_id": 1,
        "creator": 1,
        "posted_ts": TS_2024,
        "comment_count": 0,
        "is_archived": False,
        "in_inbox": True,
        "starred": False,
    }
    data.update(overrides)
    return data


def make_comment(id: int = 500, thread_id: int = 100, creator: int = 1, **overrides: Any) -> dict[str, Any]:
    data = {
        "id": id,
        "content": f"Comment {id}",
        "thread_id": thread_id,
        "channel_id": 10,
        "workspace_id": 1,
        "creator": creator,
        "posted_ts": TS_2024,
    }
    data.update(overrides)
    return data


def make_conversation(id: int = 200, user_ids: list[int] | None = None, **overrides: Any) -> dict[str, Any]:
    data = {
        "id": id,
        "workspace_id": 1,
        "user_ids": user_ids if user_ids is not None else [1, 2],
        "title": None,
        "archived": False,
        "last_active_ts": TS_2024,
        "message_count": 2,
    }
    data.update(overrides)
    return data


def make_message(id: int = 700, conversation_id: int = 200, creator: int = 1, **overrides: Any) -> dict[str, Any]:
    data = {
        "id": id,
        "content": f"Message {id}",
        "creator": creator,
        "conversation_id": conversation_id,
        "workspace_id": 1,
        "posted_ts": TS_2024,
    }
    data.update(overrides)
    return data


def make_channel(id: int = 10, name: str = "general") -> dict[str, Any]:
    return {"id": id, "name": name, "workspace_id": 1}

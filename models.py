"""
Type definitions for twist-mcp.

Dataclasses defining the contracts between layers:
- Adapters produce these structures from API responses
- Formatters consume these structures and return markdown strings
- Tools wire everything together

The REST API speaks snake_case JSON with Unix-second timestamps. Each model
has a from_api() classmethod so the parsing lives next to the shape.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any


# ============================================================================
# ERROR TYPES
# ============================================================================

class ErrorKind(Enum):
    """Categories of errors for consistent handling."""
    AUTH_EXPIRED = "auth_expired"        # Token missing, invalid or revoked
    NOT_FOUND = "not_found"              # Resource doesn't exist
    PERMISSION_DENIED = "permission_denied"  # No access to resource
    RATE_LIMITED = "rate_limited"        # Hit API quota
    NETWORK_ERROR = "network_error"      # Connection failed or 5xx
    TIMEOUT = "timeout"                  # Request timed out
    INVALID_INPUT = "invalid_input"      # Bad parameters
    BULK_OPERATION_FAILED = "bulk_operation_failed"  # Scoped mutation failed outright
    API_ERROR = "api_error"              # Any other non-2xx response
    UNKNOWN = "unknown"                  # Unexpected error


class TwistError(Exception):
    """
    Structured error for consistent handling across layers.

    Adapters raise these on API failures.
    Tools raise them on invalid requests.
    server.py catches and formats them as MCP error results.
    """

    def __init__(
        self,
        kind: ErrorKind,
        message: str,
        details: dict[str, Any] | None = None,
        retryable: bool = False,
    ):
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.details = details or {}
        self.retryable = retryable

    def to_dict(self) -> dict[str, Any]:
        """Convert to dict for MCP response."""
        return {
            "error": True,
            "kind": self.kind.value,
            "message": self.message,
            "retryable": self.retryable,
            **self.details,
        }


class InvalidArgument(TwistError):
    """Malformed request shape. Raised before any remote call."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(ErrorKind.INVALID_INPUT, message, details)


class BulkOperationFailed(TwistError):
    """A workspace/channel-scoped mutation failed. No partial credit."""

    def __init__(self, upstream_message: str):
        super().__init__(
            ErrorKind.BULK_OPERATION_FAILED,
            f"Bulk operation failed: {upstream_message}",
            {"upstream_message": upstream_message},
        )


_STATUS_KINDS = {
    401: ErrorKind.AUTH_EXPIRED,
    403: ErrorKind.PERMISSION_DENIED,
    404: ErrorKind.NOT_FOUND,
    429: ErrorKind.RATE_LIMITED,
}


class TwistApiError(TwistError):
    """Non-2xx response from the REST API (or from one item in a batch)."""

    def __init__(self, status_code: int, message: str, path: str | None = None):
        if status_code in _STATUS_KINDS:
            kind = _STATUS_KINDS[status_code]
        elif status_code >= 500:
            kind = ErrorKind.NETWORK_ERROR
        else:
            kind = ErrorKind.API_ERROR
        details: dict[str, Any] = {"status_code": status_code}
        if path:
            details["path"] = path
        super().__init__(
            kind, message, details,
            retryable=status_code == 429 or status_code >= 500,
        )
        self.status_code = status_code
        self.path = path


# ============================================================================
# PARSING HELPERS
# ============================================================================

def parse_timestamp(data: dict[str, Any], key: str) -> datetime | None:
    """
    Read a timestamp field from an API object.

    Prefers the `{key}_ts` Unix-seconds variant; falls back to `{key}` as
    either a number or an ISO string.
    """
    raw = data.get(f"{key}_ts")
    if raw is None:
        raw = data.get(key)
    if raw is None or raw == "":
        return None
    if isinstance(raw, (int, float)):
        return datetime.fromtimestamp(raw, tz=timezone.utc)
    if isinstance(raw, str):
        try:
            parsed = datetime.fromisoformat(raw.replace("Z", "+00:00"))
        except ValueError:
            return None
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=timezone.utc)
        return parsed
    return None


def to_iso(value: datetime | None) -> str:
    """
    Render a datetime as ISO 8601 UTC with milliseconds and a Z suffix.

    Example: 2024-01-01T00:00:00.000Z
    """
    if value is None:
        return ""
    value = value.astimezone(timezone.utc)
    return value.strftime("%Y-%m-%dT%H:%M:%S.") + f"{value.microsecond // 1000:03d}Z"


# ============================================================================
# USER TYPES
# ============================================================================

@dataclass
class AwayMode:
    """Away/vacation status of the session user."""
    type: str
    date_from: str | None = None
    date_to: str | None = None


@dataclass
class User:
    """The authenticated (session) user."""
    id: int
    name: str
    email: str = ""
    short_name: str = ""
    timezone: str = "UTC"
    bot: bool = False
    lang: str = "en"
    default_workspace: int | None = None
    away_mode: AwayMode | None = None

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "User":
        away = data.get("away_mode")
        return cls(
            id=data["id"],
            name=data.get("name", ""),
            email=data.get("email", ""),
            short_name=data.get("short_name", ""),
            timezone=data.get("timezone", "UTC"),
            bot=bool(data.get("bot", False)),
            lang=data.get("lang", "en"),
            default_workspace=data.get("default_workspace") or None,
            away_mode=AwayMode(
                type=away.get("type", ""),
                date_from=away.get("date_from"),
                date_to=away.get("date_to"),
            ) if away else None,
        )


@dataclass
class WorkspaceUser:
    """A member of a workspace."""
    id: int
    name: str
    short_name: str = ""
    email: str | None = None
    user_type: str = "USER"
    bot: bool = False
    removed: bool = False
    timezone: str = "UTC"

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "WorkspaceUser":
        return cls(
            id=data["id"],
            name=data.get("name", ""),
            short_name=data.get("short_name", ""),
            email=data.get("email") or None,
            user_type=data.get("user_type", "USER"),
            bot=bool(data.get("bot", False)),
            removed=bool(data.get("removed", False)),
            timezone=data.get("timezone", "UTC"),
        )


# ============================================================================
# WORKSPACE / CHANNEL TYPES
# ============================================================================

@dataclass
class Workspace:
    """A workspace the session user belongs to."""
    id: int
    name: str
    creator: int
    created: datetime | None = None
    default_channel: int | None = None
    default_conversation: int | None = None
    plan: str | None = None
    avatar_id: str | None = None
    avatar_urls: dict[str, str] | None = None

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "Workspace":
        return cls(
            id=data["id"],
            name=data.get("name", ""),
            creator=data.get("creator", 0),
            created=parse_timestamp(data, "created"),
            default_channel=data.get("default_channel") or None,
            default_conversation=data.get("default_conversation") or None,
            plan=data.get("plan") or None,
            avatar_id=data.get("avatar_id") or None,
            avatar_urls=data.get("avatar_urls") or None,
        )


@dataclass
class Channel:
    """A channel within a workspace."""
    id: int
    name: str
    workspace_id: int = 0

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "Channel":
        return cls(
            id=data["id"],
            name=data.get("name", ""),
            workspace_id=data.get("workspace_id", 0),
        )


# ============================================================================
# THREAD / COMMENT TYPES
# ============================================================================

@dataclass
class Thread:
    """A thread in a channel. Also the shape of inbox entries."""
    id: int
    title: str
    channel_id: int
    workspace_id: int
    creator: int
    content: str = ""
    posted: datetime | None = None
    comment_count: int = 0
    is_archived: bool = False
    in_inbox: bool = False
    starred: bool = False
    participants: list[int] | None = None
    url: str | None = None

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "Thread":
        return cls(
            id=data["id"],
            title=data.get("title", ""),
            channel_id=data.get("channel_id", 0),
            workspace_id=data.get("workspace_id", 0),
            creator=data.get("creator", 0),
            content=data.get("content") or "",
            posted=parse_timestamp(data, "posted"),
            comment_count=data.get("comment_count", 0),
            is_archived=bool(data.get("is_archived", False)),
            in_inbox=bool(data.get("in_inbox", False)),
            starred=bool(data.get("starred", False)),
            participants=data.get("participants"),
            url=data.get("url") or None,
        )


@dataclass
class UnreadThread:
    """An entry from the unread-threads listing."""
    thread_id: int
    channel_id: int = 0
    obj_index: int = 0
    directed: bool = False

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "UnreadThread":
        return cls(
            thread_id=data["thread_id"],
            channel_id=data.get("channel_id", 0),
            obj_index=data.get("obj_index", 0),
            directed=bool(data.get("directed", False)),
        )


@dataclass
class Comment:
    """A comment on a thread."""
    id: int
    content: str
    thread_id: int
    creator: int
    posted: datetime | None = None
    channel_id: int | None = None
    workspace_id: int | None = None
    url: str | None = None

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "Comment":
        return cls(
            id=data["id"],
            content=data.get("content") or "",
            thread_id=data.get("thread_id", 0),
            creator=data.get("creator", 0),
            posted=parse_timestamp(data, "posted"),
            channel_id=data.get("channel_id"),
            workspace_id=data.get("workspace_id"),
            url=data.get("url") or None,
        )


# ============================================================================
# CONVERSATION TYPES
# ============================================================================

@dataclass
class Conversation:
    """A direct-message conversation."""
    id: int
    workspace_id: int
    user_ids: list[int] = field(default_factory=list)
    title: str | None = None
    archived: bool = False
    last_active: datetime | None = None
    message_count: int | None = None

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "Conversation":
        return cls(
            id=data["id"],
            workspace_id=data.get("workspace_id", 0),
            user_ids=list(data.get("user_ids") or []),
            title=data.get("title") or None,
            archived=bool(data.get("archived", False)),
            last_active=parse_timestamp(data, "last_active"),
            message_count=data.get("message_count"),
        )


@dataclass
class ConversationMessage:
    """A message within a conversation."""
    id: int
    content: str
    creator: int
    conversation_id: int
    posted: datetime | None = None
    workspace_id: int | None = None
    url: str | None = None

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "ConversationMessage":
        return cls(
            id=data["id"],
            content=data.get("content") or "",
            creator=data.get("creator", 0),
            conversation_id=data.get("conversation_id", 0),
            posted=parse_timestamp(data, "posted"),
            workspace_id=data.get("workspace_id"),
            url=data.get("url") or None,
        )


# ============================================================================
# SEARCH TYPES
# ============================================================================

@dataclass
class SearchResultItem:
    """A single hit from workspace search."""
    id: str
    type: str  # 'thread', 'comment' or 'message'
    snippet: str
    snippet_creator_id: int
    snippet_last_updated: datetime | None = None
    thread_id: int | None = None
    conversation_id: int | None = None
    channel_id: int | None = None

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "SearchResultItem":
        return cls(
            id=str(data["id"]),
            type=data.get("type", "thread"),
            snippet=data.get("snippet") or "",
            snippet_creator_id=data.get("snippet_creator_id", 0),
            snippet_last_updated=parse_timestamp(data, "snippet_last_updated"),
            thread_id=data.get("thread_id") or None,
            conversation_id=data.get("conversation_id") or None,
            channel_id=data.get("channel_id") or None,
        )


@dataclass
class SearchPage:
    """One page of search results."""
    items: list[SearchResultItem]
    has_more: bool = False
    next_cursor_mark: str | None = None

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "SearchPage":
        return cls(
            items=[SearchResultItem.from_api(item) for item in data.get("items", [])],
            has_more=bool(data.get("has_more", False)),
            next_cursor_mark=data.get("next_cursor_mark") or None,
        )


# ============================================================================
# MARK-DONE TYPES
# ============================================================================

@dataclass
class MarkDoneOperations:
    """Which side effects a mark-done call should apply."""
    mark_read: bool = True
    archive: bool = True
    clear_unread: bool = False

    def to_dict(self) -> dict[str, bool]:
        return {
            "markRead": self.mark_read,
            "archive": self.archive,
            "clearUnread": self.clear_unread,
        }


@dataclass
class FailedItem:
    """A target whose operations failed during one-by-one execution."""
    item: int
    error: str


@dataclass
class MarkDoneOutcome:
    """
    Result of a mark-done call.

    Individual mode: completed + failed partition the requested ids.
    Bulk mode: both lists stay empty (the API reports no per-id result).
    """
    item_type: str  # 'thread' or 'conversation'
    mode: str  # 'individual' or 'bulk'
    operations: MarkDoneOperations
    total_requested: int = 0
    completed: list[int] = field(default_factory=list)
    failed: list[FailedItem] = field(default_factory=list)
    workspace_id: int | None = None
    channel_id: int | None = None

    @property
    def success_count(self) -> int:
        return len(self.completed)

    @property
    def failure_count(self) -> int:
        return len(self.failed)

    def to_structured(self) -> dict[str, Any]:
        selectors = None
        if self.workspace_id or self.channel_id:
            selectors = {"workspaceId": self.workspace_id, "channelId": self.channel_id}
        return {
            "type": "mark_done_result",
            "itemType": self.item_type,
            "mode": self.mode,
            "completed": list(self.completed),
            "failed": [{"item": f.item, "error": f.error} for f in self.failed],
            "totalRequested": self.total_requested,
            "successCount": self.success_count,
            "failureCount": self.failure_count,
            "operations": self.operations.to_dict(),
            "selectors": selectors,
        }


# ============================================================================
# TOOL RESPONSE TYPES
# ============================================================================

def remove_none_fields(value: Any) -> Any:
    """Recursively drop None-valued keys from dicts (lists are walked too)."""
    if isinstance(value, dict):
        return {k: remove_none_fields(v) for k, v in value.items() if v is not None}
    if isinstance(value, list):
        return [remove_none_fields(item) for item in value]
    return value


@dataclass
class ToolOutput:
    """Result of every tool: markdown for the model, structured data for clients.

    structured_content always carries a `type` discriminator
    (e.g. 'mark_done_result'). None fields are dropped on the way out.
    """
    text_content: str
    structured_content: dict[str, Any]

    def __post_init__(self) -> None:
        self.structured_content = remove_none_fields(self.structured_content)

    def to_dict(self) -> dict[str, Any]:
        return {
            "content": [{"type": "text", "text": self.text_content}],
            "structuredContent": self.structured_content,
        }

"""
Request builders for the Twist REST API endpoints the tools use.

Pure functions: each returns an ApiRequest and makes no network call, so a
request can be executed alone (client.execute) or placed in a batch
(client.batch).
"""

from datetime import datetime
from typing import Any

from adapters.client import ApiRequest
from models import (
    Channel,
    Comment,
    Conversation,
    ConversationMessage,
    SearchPage,
    Thread,
    UnreadThread,
    User,
    Workspace,
    WorkspaceUser,
)


def _list_of(model: Any):
    def parse(data: Any) -> list[Any]:
        return [model.from_api(item) for item in data or []]
    return parse


def _parse_count(data: Any) -> int:
    if isinstance(data, dict):
        return int(data.get("data", data.get("count", 0)))
    return int(data or 0)


# ============================================================================
# USERS / WORKSPACES / CHANNELS
# ============================================================================

def get_session_user() -> ApiRequest:
    return ApiRequest("GET", "users/get_session_user", parse=User.from_api)


def get_workspaces() -> ApiRequest:
    return ApiRequest("GET", "workspaces/get", parse=_list_of(Workspace))


def get_workspace_users(workspace_id: int) -> ApiRequest:
    return ApiRequest(
        "GET", "workspace_users/get",
        {"id": workspace_id},
        parse=_list_of(WorkspaceUser),
    )


def get_workspace_user(workspace_id: int, user_id: int) -> ApiRequest:
    return ApiRequest(
        "GET", "workspace_users/getone",
        {"id": workspace_id, "user_id": user_id},
        parse=WorkspaceUser.from_api,
    )


def get_channel(channel_id: int) -> ApiRequest:
    return ApiRequest("GET", "channels/getone", {"id": channel_id}, parse=Channel.from_api)


# ============================================================================
# THREADS / COMMENTS
# ============================================================================

def get_thread(thread_id: int) -> ApiRequest:
    return ApiRequest("GET", "threads/getone", {"id": thread_id}, parse=Thread.from_api)


def get_unread_threads(workspace_id: int) -> ApiRequest:
    return ApiRequest(
        "GET", "threads/get_unread",
        {"workspace_id": workspace_id},
        parse=_list_of(UnreadThread),
    )


def mark_thread_read(thread_id: int, obj_index: int = 0) -> ApiRequest:
    return ApiRequest("POST", "threads/mark_read", {"id": thread_id, "obj_index": obj_index})


def mark_all_threads_read(
    workspace_id: int | None = None,
    channel_id: int | None = None,
) -> ApiRequest:
    """Mark every thread read, scoped to a workspace or a channel."""
    return ApiRequest(
        "POST", "threads/mark_all_read",
        {"workspace_id": workspace_id, "channel_id": channel_id},
    )


def clear_unread_threads(workspace_id: int) -> ApiRequest:
    return ApiRequest("POST", "threads/clear_unread", {"workspace_id": workspace_id})


def get_comments(
    thread_id: int,
    newer_than: datetime | None = None,
    older_than: datetime | None = None,
    limit: int | None = None,
) -> ApiRequest:
    return ApiRequest(
        "GET", "comments/get",
        {
            "thread_id": thread_id,
            "newer_than_ts": newer_than,
            "older_than_ts": older_than,
            "limit": limit,
        },
        parse=_list_of(Comment),
    )


def get_comment(comment_id: int) -> ApiRequest:
    return ApiRequest("GET", "comments/getone", {"id": comment_id}, parse=Comment.from_api)


def add_comment(
    thread_id: int,
    content: str,
    recipients: list[int] | None = None,
) -> ApiRequest:
    return ApiRequest(
        "POST", "comments/add",
        {"thread_id": thread_id, "content": content, "recipients": recipients},
        parse=Comment.from_api,
    )


# ============================================================================
# CONVERSATIONS / MESSAGES
# ============================================================================

def get_conversation(conversation_id: int) -> ApiRequest:
    return ApiRequest(
        "GET", "conversations/getone",
        {"id": conversation_id},
        parse=Conversation.from_api,
    )


def mark_conversation_read(conversation_id: int) -> ApiRequest:
    return ApiRequest("POST", "conversations/mark_read", {"id": conversation_id})


def archive_conversation(conversation_id: int) -> ApiRequest:
    return ApiRequest("POST", "conversations/archive", {"id": conversation_id})


def get_messages(
    conversation_id: int,
    newer_than: datetime | None = None,
    older_than: datetime | None = None,
    limit: int | None = None,
) -> ApiRequest:
    return ApiRequest(
        "GET", "conversation_messages/get",
        {
            "conversation_id": conversation_id,
            "newer_than_ts": newer_than,
            "older_than_ts": older_than,
            "limit": limit,
        },
        parse=_list_of(ConversationMessage),
    )


def get_message(message_id: int) -> ApiRequest:
    return ApiRequest(
        "GET", "conversation_messages/getone",
        {"id": message_id},
        parse=ConversationMessage.from_api,
    )


def add_message(conversation_id: int, content: str) -> ApiRequest:
    return ApiRequest(
        "POST", "conversation_messages/add",
        {"conversation_id": conversation_id, "content": content},
        parse=ConversationMessage.from_api,
    )


# ============================================================================
# INBOX
# ============================================================================

def get_inbox(
    workspace_id: int,
    since: datetime | None = None,
    until: datetime | None = None,
    limit: int | None = None,
) -> ApiRequest:
    return ApiRequest(
        "GET", "inbox/get",
        {"workspace_id": workspace_id, "since_ts": since, "until_ts": until, "limit": limit},
        parse=_list_of(Thread),
    )


def get_inbox_count(workspace_id: int) -> ApiRequest:
    return ApiRequest(
        "GET", "inbox/get_count",
        {"workspace_id": workspace_id},
        parse=_parse_count,
    )


def archive_thread(thread_id: int) -> ApiRequest:
    """Archive a thread in the inbox."""
    return ApiRequest("POST", "inbox/archive", {"id": thread_id})


def archive_all(
    workspace_id: int | None = None,
    channel_ids: list[int] | None = None,
) -> ApiRequest:
    """
    Archive every inbox thread in a workspace, or in the given channels.

    A channel-only request omits workspace_id entirely.
    """
    return ApiRequest(
        "POST", "inbox/archive_all",
        {"workspace_id": workspace_id, "channel_ids": channel_ids},
    )


# ============================================================================
# REACTIONS / SEARCH
# ============================================================================

def _reaction_params(target_type: str, target_id: int, emoji: str) -> dict[str, Any]:
    key = {"thread": "thread_id", "comment": "comment_id", "message": "message_id"}[target_type]
    return {key: target_id, "reaction": emoji}


def add_reaction(target_type: str, target_id: int, emoji: str) -> ApiRequest:
    return ApiRequest("POST", "reactions/add", _reaction_params(target_type, target_id, emoji))


def remove_reaction(target_type: str, target_id: int, emoji: str) -> ApiRequest:
    return ApiRequest("POST", "reactions/remove", _reaction_params(target_type, target_id, emoji))


def search(
    query: str,
    workspace_id: int,
    channel_ids: list[int] | None = None,
    author_ids: list[int] | None = None,
    mention_self: bool | None = None,
    date_from: str | None = None,
    date_to: str | None = None,
    limit: int | None = None,
    cursor: str | None = None,
) -> ApiRequest:
    return ApiRequest(
        "GET", "search/query",
        {
            "query": query,
            "workspace_id": workspace_id,
            "channel_ids": channel_ids,
            "author_ids": author_ids,
            "mention_self": mention_self,
            "date_from": date_from,
            "date_to": date_to,
            "limit": limit,
            "cursor_mark": cursor,
        },
        parse=SearchPage.from_api,
    )

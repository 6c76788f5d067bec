"""
Twist web URL construction.

Relative paths mirror the web app's routing; full URLs prefix TWIST_WEB_URL.
Pure functions, no I/O.
"""

from config import TWIST_WEB_URL


def workspace_path(workspace_id: int) -> str:
    return f"/a/{workspace_id}/"


def channel_path(workspace_id: int, channel_id: int) -> str:
    return f"/a/{workspace_id}/ch/{channel_id}/"


def thread_path(workspace_id: int, thread_id: int, channel_id: int | None = None) -> str:
    """Thread link. Without a channel, threads resolve through the inbox route."""
    if channel_id:
        return f"/a/{workspace_id}/ch/{channel_id}/t/{thread_id}/"
    return f"/a/{workspace_id}/inbox/t/{thread_id}/"


def comment_path(workspace_id: int, channel_id: int, thread_id: int, comment_id: int | str) -> str:
    return f"/a/{workspace_id}/ch/{channel_id}/t/{thread_id}/c/{comment_id}"


def conversation_path(workspace_id: int, conversation_id: int) -> str:
    return f"/a/{workspace_id}/msg/{conversation_id}/"


def message_path(workspace_id: int, conversation_id: int, message_id: int | str) -> str:
    return f"/a/{workspace_id}/msg/{conversation_id}/m/{message_id}"


def full_twist_url(path: str) -> str:
    """Prefix a relative path with the web app root."""
    return f"{TWIST_WEB_URL}{path}"


def workspace_url(workspace_id: int) -> str:
    return full_twist_url(workspace_path(workspace_id))


def channel_url(workspace_id: int, channel_id: int) -> str:
    return full_twist_url(channel_path(workspace_id, channel_id))


def thread_url(workspace_id: int, thread_id: int, channel_id: int | None = None) -> str:
    return full_twist_url(thread_path(workspace_id, thread_id, channel_id))


def comment_url(workspace_id: int, channel_id: int, thread_id: int, comment_id: int | str) -> str:
    return full_twist_url(comment_path(workspace_id, channel_id, thread_id, comment_id))


def conversation_url(workspace_id: int, conversation_id: int) -> str:
    return full_twist_url(conversation_path(workspace_id, conversation_id))


def message_url(workspace_id: int, conversation_id: int, message_id: int | str) -> str:
    return full_twist_url(message_path(workspace_id, conversation_id, message_id))

"""
Formatters: Pure functions rendering tool results as markdown.

No MCP awareness, no Twist API calls. Receive model dataclasses, return text.
Easily testable with inline snapshots.
"""

from .users import format_user_info, format_users
from .workspaces import format_workspaces
from .inbox import format_inbox
from .threads import format_thread
from .conversations import format_conversation
from .search import format_search_results, preview
from .actions import format_reply, format_reaction
from .mark_done import format_mark_done, next_step_hint

__all__ = [
    "format_user_info",
    "format_users",
    "format_workspaces",
    "format_inbox",
    "format_thread",
    "format_conversation",
    "format_search_results",
    "preview",
    "format_reply",
    "format_reaction",
    "format_mark_done",
    "next_step_hint",
]

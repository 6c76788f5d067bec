"""
Tools: MCP tool implementations.

Each tool has its own module with the implementation logic.
server.py provides thin @mcp.tool() wrappers that call into these.

Every do_* function takes the Twist client first (build_link needs none)
and returns a ToolOutput.
"""

from .user_info import do_user_info
from .get_workspaces import do_get_workspaces
from .get_users import do_get_users
from .fetch_inbox import do_fetch_inbox
from .load_thread import do_load_thread
from .load_conversation import do_load_conversation
from .search_content import do_search_content
from .reply import do_reply
from .react import do_react
from .mark_done import do_mark_done
from .build_link import do_build_link

# Single source of truth for registered tool names.
TOOL_NAMES = frozenset({
    "user-info", "get-workspaces", "get-users", "fetch-inbox", "load-thread",
    "load-conversation", "search-content", "reply", "react", "mark-done",
    "build-link",
})

__all__ = [
    "do_user_info", "do_get_workspaces", "do_get_users", "do_fetch_inbox",
    "do_load_thread", "do_load_conversation", "do_search_content", "do_reply",
    "do_react", "do_mark_done", "do_build_link", "TOOL_NAMES",
]

#!/usr/bin/env python3
"""
Twist MCP Server

Exposes a Twist account (workspaces, channels, threads, comments,
conversations, reactions, search, inbox) as MCP tools.

Every tool returns markdown for the model plus a structured payload with a
`type` discriminator. Documentation is provided via MCP Resources.

Architecture:
- formatters/: Pure functions (no MCP, no API calls)
- adapters/: Thin Twist REST API wrapper (request descriptors, batch)
- tools/: Tool implementations (business logic)
- server.py: Thin MCP wrappers (this file)
"""

import os
import signal
import sys
from contextlib import asynccontextmanager
from typing import Annotated, AsyncIterator, Awaitable, Callable, Literal

from mcp.server.fastmcp import FastMCP
from mcp.types import CallToolResult, TextContent, ToolAnnotations
from pydantic import Field

import config
from adapters.client import TwistClient
from adapters.services import close_twist_client, get_twist_client
from logging_config import configure_logging, logger
from models import ToolOutput, TwistError
from resources.tools import get_tool_registry
from tools import (
    do_build_link,
    do_fetch_inbox,
    do_get_users,
    do_get_workspaces,
    do_load_conversation,
    do_load_thread,
    do_mark_done,
    do_react,
    do_reply,
    do_search_content,
    do_user_info,
)


@asynccontextmanager
async def lifespan(app: FastMCP) -> AsyncIterator[None]:
    """Release the shared client's connection pool when the server stops."""
    try:
        yield
    finally:
        await close_twist_client()


# Initialize MCP server
mcp = FastMCP("Twist", lifespan=lifespan)


# ============================================================================
# RESULT CONVERSION
# ============================================================================

def _annotations(title: str, read_only: bool, destructive: bool, idempotent: bool) -> ToolAnnotations:
    return ToolAnnotations(
        title=f"Twist: {title}",
        readOnlyHint=read_only,
        destructiveHint=destructive,
        idempotentHint=idempotent,
        openWorldHint=False,
    )


READ_ONLY = {"read_only": True, "destructive": False, "idempotent": True}


def to_call_result(output: ToolOutput) -> CallToolResult:
    return CallToolResult(
        content=[TextContent(type="text", text=output.text_content)],
        structuredContent=output.structured_content,
    )


def error_result(error: TwistError) -> CallToolResult:
    return CallToolResult(
        content=[TextContent(type="text", text=f"Error: {error.message}")],
        structuredContent=error.to_dict(),
        isError=True,
    )


async def _run(tool: Callable[[TwistClient], Awaitable[ToolOutput]]) -> CallToolResult:
    """Build the client, run the tool, and turn TwistError into an error result."""
    try:
        output = await tool(get_twist_client())
    except TwistError as e:
        logger.warning(f"Tool failed ({e.kind.value}): {e.message}")
        return error_result(e)
    return to_call_result(output)


# ============================================================================
# TOOLS: read
# ============================================================================

@mcp.tool(name="user-info", annotations=_annotations("User Info", **READ_ONLY))
async def user_info() -> CallToolResult:
    """
    Get the authenticated user's profile.

    Returns user ID, name, email, timezone, bot status, language, default
    workspace and away mode (when set).
    """
    return await _run(do_user_info)


@mcp.tool(name="get-workspaces", annotations=_annotations("Get Workspaces", **READ_ONLY))
async def get_workspaces() -> CallToolResult:
    """
    Get all workspaces the user belongs to.

    Each workspace lists its ID, name, creator, creation date and, when set,
    its default channel, default conversation and plan. Names are resolved
    for creators, channels and conversations.
    """
    return await _run(do_get_workspaces)


@mcp.tool(name="get-users", annotations=_annotations("Get Users", **READ_ONLY))
async def get_users(
    workspaceId: Annotated[int, Field(description="The workspace ID to get users from.")],
    userIds: Annotated[list[int] | None, Field(
        description="Specific user IDs to fetch. Omit or pass [] for all workspace users.",
    )] = None,
    searchText: Annotated[str | None, Field(
        description="Filter users by name or email (case-insensitive).",
    )] = None,
) -> CallToolResult:
    """
    Get users from a workspace.

    Retrieves all workspace users by default, or specific users when userIds
    is given. searchText narrows the list by name or email.
    """
    return await _run(lambda client: do_get_users(client, workspaceId, userIds, searchText))


@mcp.tool(name="fetch-inbox", annotations=_annotations("Fetch Inbox", **READ_ONLY))
async def fetch_inbox(
    workspaceId: Annotated[int, Field(description="The workspace ID to fetch inbox for.")],
    sinceDate: Annotated[str | None, Field(description="Only items since this date (YYYY-MM-DD).")] = None,
    untilDate: Annotated[str | None, Field(description="Only items until this date (YYYY-MM-DD).")] = None,
    limit: Annotated[int, Field(ge=1, le=100, description="Maximum number of items to return.")] = 50,
    onlyUnread: Annotated[bool, Field(description="Only return unread items.")] = False,
) -> CallToolResult:
    """
    Fetch the inbox for a workspace.

    Returns inbox threads with unread and starred markers, the inbox count,
    and the unread threads.
    """
    return await _run(lambda client: do_fetch_inbox(
        client, workspaceId, sinceDate, untilDate, limit, onlyUnread,
    ))


@mcp.tool(name="load-thread", annotations=_annotations("Load Thread", **READ_ONLY))
async def load_thread(
    threadId: Annotated[int, Field(description="The thread ID to load.")],
    newerThanDate: Annotated[str | None, Field(description="Comments newer than this date (YYYY-MM-DD).")] = None,
    olderThanDate: Annotated[str | None, Field(description="Comments older than this date (YYYY-MM-DD).")] = None,
    limit: Annotated[int, Field(ge=1, le=100, description="Maximum number of comments to return.")] = 50,
    includeParticipants: Annotated[bool, Field(description="Include thread participants.")] = True,
) -> CallToolResult:
    """
    Load a thread with its metadata and comments.

    Supports filtering comments by date. Creator, commenter and participant
    names are resolved.
    """
    return await _run(lambda client: do_load_thread(
        client, threadId, newerThanDate, olderThanDate, limit, includeParticipants,
    ))


@mcp.tool(name="load-conversation", annotations=_annotations("Load Conversation", **READ_ONLY))
async def load_conversation(
    conversationId: Annotated[int, Field(description="The conversation ID to load.")],
    newerThanDate: Annotated[str | None, Field(description="Messages newer than this date (YYYY-MM-DD).")] = None,
    olderThanDate: Annotated[str | None, Field(description="Messages older than this date (YYYY-MM-DD).")] = None,
    limit: Annotated[int, Field(ge=1, le=100, description="Maximum number of messages to return.")] = 50,
    includeParticipants: Annotated[bool, Field(description="Include participant names.")] = True,
) -> CallToolResult:
    """
    Load a conversation (direct message) with its metadata and messages.

    Supports filtering messages by date.
    """
    return await _run(lambda client: do_load_conversation(
        client, conversationId, newerThanDate, olderThanDate, limit, includeParticipants,
    ))


@mcp.tool(name="search-content", annotations=_annotations("Search Content", **READ_ONLY))
async def search_content(
    query: Annotated[str, Field(min_length=1, description="The search query string.")],
    workspaceId: Annotated[int, Field(description="The workspace ID to search in.")],
    channelIds: Annotated[list[int] | None, Field(description="Filter by channel IDs.")] = None,
    authorIds: Annotated[list[int] | None, Field(description="Filter by author user IDs.")] = None,
    mentionSelf: Annotated[bool | None, Field(description="Only results mentioning you.")] = None,
    dateFrom: Annotated[str | None, Field(description="Start date (YYYY-MM-DD).")] = None,
    dateTo: Annotated[str | None, Field(description="End date (YYYY-MM-DD).")] = None,
    limit: Annotated[int, Field(ge=1, le=100, description="Maximum number of results to return.")] = 50,
    cursor: Annotated[str | None, Field(description="Cursor for the next page.")] = None,
) -> CallToolResult:
    """
    Search a workspace for threads, comments and messages.

    Filter by channels, authors, dates and mentions. When more results exist
    the payload carries a cursor for the next page.
    """
    return await _run(lambda client: do_search_content(
        client, query, workspaceId,
        channel_ids=channelIds, author_ids=authorIds, mention_self=mentionSelf,
        date_from=dateFrom, date_to=dateTo, limit=limit, cursor=cursor,
    ))


@mcp.tool(name="build-link", annotations=_annotations("Build Link", **READ_ONLY))
async def build_link(
    workspaceId: Annotated[int, Field(description="The workspace ID.")],
    conversationId: Annotated[int | None, Field(description="Conversation ID (direct message links).")] = None,
    messageId: Annotated[int | str | None, Field(description="Message ID within the conversation.")] = None,
    channelId: Annotated[int | None, Field(description="Channel ID (thread links in channels).")] = None,
    threadId: Annotated[int | None, Field(description="Thread ID (thread/comment links).")] = None,
    commentId: Annotated[int | str | None, Field(description="Comment ID within the thread.")] = None,
    fullUrl: Annotated[bool, Field(description="Full URL (true) or relative path (false).")] = True,
) -> CallToolResult:
    """
    Build Twist URLs for threads, comments, conversations or messages.

    Provide workspaceId and either conversationId (+ optional messageId) or
    threadId (+ optional channelId, commentId). Comment links need channelId.
    """
    try:
        output = do_build_link(
            workspaceId, conversationId, messageId, channelId, threadId, commentId, fullUrl,
        )
    except TwistError as e:
        return error_result(e)
    return to_call_result(output)


# ============================================================================
# TOOLS: write
# ============================================================================

@mcp.tool(name="reply", annotations=_annotations(
    "Reply", read_only=False, destructive=False, idempotent=False,
))
async def reply(
    targetType: Annotated[Literal["thread", "conversation"], Field(
        description="thread (posts a comment) or conversation (posts a message).",
    )],
    targetId: Annotated[int, Field(description="The thread or conversation ID.")],
    content: Annotated[str, Field(min_length=1, description="The content of the reply.")],
    recipients: Annotated[list[int] | None, Field(
        description="User IDs to notify (thread replies only).",
    )] = None,
) -> CallToolResult:
    """
    Post a reply to a thread (as a comment) or a conversation (as a message).
    """
    return await _run(lambda client: do_reply(client, targetType, targetId, content, recipients))


@mcp.tool(name="react", annotations=_annotations(
    "React", read_only=False, destructive=True, idempotent=False,
))
async def react(
    targetType: Annotated[Literal["thread", "comment", "message"], Field(
        description="The type of object to react to.",
    )],
    targetId: Annotated[int, Field(description="The thread, comment or message ID.")],
    emoji: Annotated[str, Field(min_length=1, description='The emoji, e.g. "👍".')],
    operation: Annotated[Literal["add", "remove"], Field(
        description="Add or remove the reaction.",
    )] = "add",
) -> CallToolResult:
    """
    Add or remove an emoji reaction on a thread, comment or conversation message.
    """
    return await _run(lambda client: do_react(client, targetType, targetId, emoji, operation))


@mcp.tool(name="mark-done", annotations=_annotations(
    "Mark Done", read_only=False, destructive=True, idempotent=True,
))
async def mark_done(
    type: Annotated[Literal["thread", "conversation"], Field(
        description="The type of items to mark as done.",
    )],
    ids: Annotated[list[int] | None, Field(
        description="Specific thread or conversation IDs. Use this OR bulk selectors.",
    )] = None,
    workspaceId: Annotated[int | None, Field(
        description="Mark all threads in this workspace as done (threads only).",
    )] = None,
    channelId: Annotated[int | None, Field(
        description="Mark all threads in this channel as done (threads only).",
    )] = None,
    markRead: Annotated[bool, Field(description="Mark items as read.")] = True,
    archive: Annotated[bool, Field(description="Archive items.")] = True,
    clearUnread: Annotated[bool, Field(
        description="Clear all unread markers for the workspace (threads only, needs workspaceId).",
    )] = False,
) -> CallToolResult:
    """
    Mark threads or conversations as done.

    Individual mode (ids): every operation goes out as one batch. If the
    batch fails, each item is retried on its own and the result lists which
    items succeeded and which failed, with the error for each.

    Bulk mode (workspaceId or channelId, threads only): marks everything in
    scope read and/or archived. clearUnread with workspaceId clears all
    unread markers instead. Bulk mode succeeds or fails as a whole.

    See twist://docs/mark-done for the full response shape.
    """
    return await _run(lambda client: do_mark_done(
        client, type, ids,
        workspace_id=workspaceId, channel_id=channelId,
        mark_read=markRead, archive=archive, clear_unread=clearUnread,
    ))


# ============================================================================
# RESOURCES: Documentation
# ============================================================================

@mcp.resource("twist://docs/overview")
def docs_overview() -> str:
    """Overview of the Twist MCP server."""
    return """# Twist MCP

Read and act on a Twist account.

## Tools

| Tool | Purpose |
|------|---------|
| `user-info` | Your profile |
| `get-workspaces` | Workspaces you belong to |
| `get-users` | Members of a workspace |
| `fetch-inbox` | Inbox threads with unread markers |
| `load-thread` | A thread with comments |
| `load-conversation` | A direct-message conversation with messages |
| `search-content` | Search threads, comments and messages |
| `reply` | Post a comment or message |
| `react` | Add or remove an emoji reaction |
| `mark-done` | Mark read and archive, by id or in bulk |
| `build-link` | Build a twist.com URL |

## Typical flow

1. `get-workspaces` to find the workspace ID
2. `fetch-inbox` to see what's waiting
3. `load-thread` / `load-conversation` to read
4. `reply` / `react` to respond
5. `mark-done` to clear what you've handled

Every tool returns markdown plus a structured payload whose `type` field
names its shape (`inbox_data`, `thread_data`, `mark_done_result`, ...).

Per-tool documentation: `twist://tools/{tool_name}`.
"""


@mcp.resource("twist://docs/mark-done")
def docs_mark_done() -> str:
    """Detailed documentation for the mark-done tool."""
    return """# mark-done

## Parameters

| Param | Type | Description |
|-------|------|-------------|
| `type` | "thread" \\| "conversation" | Required |
| `ids` | list[int] | Explicit IDs (individual mode) |
| `workspaceId` | int | Bulk scope (threads only) |
| `channelId` | int | Bulk scope (threads only) |
| `markRead` | bool | Default true |
| `archive` | bool | Default true |
| `clearUnread` | bool | Default false. Threads + workspaceId only |

## Individual mode

All operations go out as one batch. If the batch fails, each item is
retried on its own, in order. An item's first error ends its run and it is
reported under `failed`; the rest carry on.

`successCount + failureCount == totalRequested` always holds.

## Bulk mode

Scoped to a workspace or a channel. `clearUnread` with a workspace replaces
markRead/archive. Any failure fails the whole call with
`Bulk operation failed: <reason>`. No per-item results.

## Response Shape

```json
{
  "type": "mark_done_result",
  "itemType": "thread",
  "mode": "individual",
  "completed": [1, 3],
  "failed": [{"item": 2, "error": "Thread not found"}],
  "totalRequested": 3,
  "successCount": 2,
  "failureCount": 1,
  "operations": {"markRead": true, "archive": true, "clearUnread": false}
}
```

`selectors` (`workspaceId` / `channelId`) is present in bulk mode.
"""


# ============================================================================
# AUTO-GENERATED TOOL DOCUMENTATION RESOURCES
# ============================================================================

# Register tool functions for twist://tools/* resource generation
# Must be done after all @mcp.tool() decorators have run
_tool_registry = get_tool_registry()
_tool_registry.register_from_mcp(mcp)


@mcp.resource("twist://tools/{tool_name}")
def tool_resource(tool_name: str) -> str:
    """Auto-generated documentation for a specific tool from its docstring."""
    try:
        resource = _tool_registry.get_resource(f"twist://tools/{tool_name}")
        return resource["text"]
    except KeyError:
        return f"# {tool_name}\n\nTool not found."


# ============================================================================
# SERVER ENTRY POINT
# ============================================================================

def _shutdown_handler(signum: int, frame: object) -> None:
    """Handle termination signals by exiting immediately.

    os._exit() is required because sys.exit() raises SystemExit,
    which asyncio's event loop catches and ignores. The server
    would survive SIGTERM until stdin closes.
    """
    os._exit(0)


def main() -> None:
    """Run the server over stdio."""
    configure_logging(config.LOG_LEVEL)
    if not config.TWIST_API_KEY:
        logger.error(f"{config.API_KEY_ENV} is not set; cannot start the Twist MCP server")
        sys.exit(1)

    signal.signal(signal.SIGTERM, _shutdown_handler)
    signal.signal(signal.SIGINT, _shutdown_handler)
    mcp.run()


if __name__ == "__main__":
    main()

"""
Fetch inbox tool: inbox threads with unread state.

Inbox listing, inbox count and unread threads are independent reads, so
they run concurrently.
"""

import asyncio
import logging
from typing import Any

from adapters import endpoints
from adapters.client import TwistClient
from formatters import format_inbox
from models import Thread, ToolOutput, to_iso
from validation import parse_date, validate_limit

logger = logging.getLogger(__name__)


def _inbox_thread_dict(thread: Thread) -> dict[str, Any]:
    return {
        "id": thread.id,
        "title": thread.title,
        "channelId": thread.channel_id,
        "workspaceId": thread.workspace_id,
        "creator": thread.creator,
        "posted": to_iso(thread.posted) or None,
        "commentCount": thread.comment_count,
        "starred": thread.starred,
        "isArchived": thread.is_archived,
    }


async def do_fetch_inbox(
    client: TwistClient,
    workspace_id: int,
    since_date: str | None = None,
    until_date: str | None = None,
    limit: int = 50,
    only_unread: bool = False,
) -> ToolOutput:
    """
    Fetch the inbox for a workspace.

    Threads are marked unread when they appear in the unread-threads listing.
    With only_unread, the listing is narrowed to those threads.
    """
    since = parse_date(since_date, "sinceDate")
    until = parse_date(until_date, "untilDate")
    validate_limit(limit)

    inbox, unread_count, unread = await asyncio.gather(
        client.execute(endpoints.get_inbox(workspace_id, since=since, until=until, limit=limit)),
        client.execute(endpoints.get_inbox_count(workspace_id)),
        client.execute(endpoints.get_unread_threads(workspace_id)),
    )

    unread_ids = {u.thread_id for u in unread}
    unread_threads = [t for t in inbox if t.id in unread_ids]
    threads = unread_threads if only_unread else inbox
    logger.debug(
        f"Inbox {workspace_id}: {len(inbox)} threads, {len(unread_threads)} unread"
    )

    return ToolOutput(
        text_content=format_inbox(
            workspace_id, threads, unread_ids, unread_count, len(unread_threads),
        ),
        structured_content={
            "type": "inbox_data",
            "workspaceId": workspace_id,
            "threads": [
                {
                    "id": t.id,
                    "title": t.title,
                    "channelId": t.channel_id,
                    "creatorId": t.creator,
                    "isUnread": t.id in unread_ids,
                    "isStarred": t.starred,
                }
                for t in threads
            ],
            "unreadCount": unread_count,
            "unreadThreads": [_inbox_thread_dict(t) for t in unread_threads],
            "totalThreads": len(threads),
        },
    )

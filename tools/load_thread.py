"""
Load thread tool: a thread with its comments and participants.

Two round trips: thread + comments in one batch, then the channel and every
user mentioned (creator, commenters, participants) in a second batch.
"""

from adapters import endpoints
from adapters.client import TwistClient
from formatters import format_thread
from models import ToolOutput, to_iso
from urls import comment_url, thread_url
from validation import parse_date, validate_limit


async def do_load_thread(
    client: TwistClient,
    thread_id: int,
    newer_than_date: str | None = None,
    older_than_date: str | None = None,
    limit: int = 50,
    include_participants: bool = True,
) -> ToolOutput:
    """
    Load a thread and its comments.

    Args:
        client: Twist API client
        thread_id: Thread to load
        newer_than_date: Only comments after this date (YYYY-MM-DD)
        older_than_date: Only comments before this date (YYYY-MM-DD)
        limit: Maximum comments (1-100)
        include_participants: Resolve and list thread participants

    Returns:
        ToolOutput with markdown and a thread_data payload
    """
    newer_than = parse_date(newer_than_date, "newerThanDate")
    older_than = parse_date(older_than_date, "olderThanDate")
    validate_limit(limit)

    thread, comments = await client.batch(
        endpoints.get_thread(thread_id),
        endpoints.get_comments(thread_id, newer_than=newer_than, older_than=older_than, limit=limit),
    )

    user_ids = [thread.creator, *(c.creator for c in comments)]
    if include_participants and thread.participants:
        user_ids.extend(thread.participants)
    user_ids = list(dict.fromkeys(user_ids))

    channel, *users = await client.batch(
        endpoints.get_channel(thread.channel_id),
        *(endpoints.get_workspace_user(thread.workspace_id, uid) for uid in user_ids),
    )
    user_names = {u.id: u.name for u in users}

    participants = thread.participants if include_participants else None

    return ToolOutput(
        text_content=format_thread(thread, channel, comments, user_names, include_participants),
        structured_content={
            "type": "thread_data",
            "thread": {
                "id": thread.id,
                "title": thread.title,
                "content": thread.content,
                "channelId": thread.channel_id,
                "channelName": channel.name,
                "workspaceId": thread.workspace_id,
                "creator": thread.creator,
                "creatorName": user_names.get(thread.creator),
                "posted": to_iso(thread.posted),
                "commentCount": thread.comment_count,
                "isArchived": thread.is_archived,
                "inInbox": thread.in_inbox,
                "participants": participants,
                "participantNames": (
                    [user_names[pid] for pid in participants if pid in user_names]
                    if participants else None
                ),
                "threadUrl": thread_url(thread.workspace_id, thread.id, thread.channel_id),
            },
            "comments": [
                {
                    "id": c.id,
                    "content": c.content,
                    "creator": c.creator,
                    "creatorName": user_names.get(c.creator),
                    "threadId": c.thread_id,
                    "posted": to_iso(c.posted),
                    "commentUrl": comment_url(
                        thread.workspace_id, thread.channel_id, c.thread_id, c.id,
                    ),
                }
                for c in comments
            ],
            "totalComments": thread.comment_count,
        },
    )

"""
Search content tool: workspace search across threads, comments and messages.
"""

from typing import Any

from adapters import endpoints
from adapters.client import TwistClient
from formatters import format_search_results
from models import SearchResultItem, ToolOutput, to_iso
from urls import comment_url, message_url, thread_url
from validation import parse_date, require_text, validate_limit


def result_url(item: SearchResultItem, workspace_id: int) -> str:
    """Web link for a search hit, by hit type."""
    if item.type == "thread":
        return thread_url(workspace_id, item.thread_id or 0, item.channel_id)
    if item.type == "comment":
        return comment_url(workspace_id, item.channel_id or 0, item.thread_id or 0, item.id)
    return message_url(workspace_id, item.conversation_id or 0, item.id)


async def _resolve_names(
    client: TwistClient,
    workspace_id: int,
    items: list[SearchResultItem],
) -> tuple[dict[int, str], dict[int, str]]:
    """Creator and channel names for the hits, fetched in one batch."""
    if not items:
        return {}, {}

    user_ids = list(dict.fromkeys(item.snippet_creator_id for item in items))
    channel_ids = list(dict.fromkeys(item.channel_id for item in items if item.channel_id))

    responses = await client.batch(
        *(endpoints.get_workspace_user(workspace_id, uid) for uid in user_ids),
        *(endpoints.get_channel(cid) for cid in channel_ids),
    )
    users, channels = responses[:len(user_ids)], responses[len(user_ids):]
    return {u.id: u.name for u in users}, {c.id: c.name for c in channels}


async def do_search_content(
    client: TwistClient,
    query: str,
    workspace_id: int,
    channel_ids: list[int] | None = None,
    author_ids: list[int] | None = None,
    mention_self: bool | None = None,
    date_from: str | None = None,
    date_to: str | None = None,
    limit: int = 50,
    cursor: str | None = None,
) -> ToolOutput:
    """
    Search a workspace.

    Dates are validated locally and passed through as YYYY-MM-DD.
    """
    require_text(query, "query")
    parse_date(date_from, "dateFrom")
    parse_date(date_to, "dateTo")
    validate_limit(limit)

    page = await client.execute(endpoints.search(
        query,
        workspace_id,
        channel_ids=channel_ids,
        author_ids=author_ids,
        mention_self=mention_self,
        date_from=date_from,
        date_to=date_to,
        limit=limit,
        cursor=cursor,
    ))

    user_names, channel_names = await _resolve_names(client, workspace_id, page.items)

    results: list[dict[str, Any]] = [
        {
            "id": item.id,
            "type": item.type,
            "content": item.snippet,
            "creatorId": item.snippet_creator_id,
            "creatorName": user_names.get(item.snippet_creator_id),
            "created": to_iso(item.snippet_last_updated),
            "threadId": item.thread_id,
            "conversationId": item.conversation_id,
            "channelId": item.channel_id,
            "channelName": channel_names.get(item.channel_id) if item.channel_id else None,
            "workspaceId": workspace_id,
            "url": result_url(item, workspace_id),
        }
        for item in page.items
    ]

    return ToolOutput(
        text_content=format_search_results(
            query, workspace_id, page.items, page.has_more, user_names, channel_names,
        ),
        structured_content={
            "type": "search_results",
            "query": query,
            "workspaceId": workspace_id,
            "results": results,
            "totalResults": len(results),
            "hasMore": page.has_more,
            "cursor": page.next_cursor_mark,
        },
    )

"""
Search formatter.

Snippets longer than PREVIEW_CHARS are truncated with an ellipsis.
"""

from models import SearchResultItem, to_iso

from .threads import UNKNOWN

PREVIEW_CHARS = 200


def preview(text: str, limit: int = PREVIEW_CHARS) -> str:
    """Truncate text for listing, marking the cut with '...'."""
    if len(text) > limit:
        return f"{text[:limit]}..."
    return text


def format_search_results(
    query: str,
    workspace_id: int,
    items: list[SearchResultItem],
    has_more: bool,
    user_names: dict[int, str],
    channel_names: dict[int, str],
) -> str:
    lines = [
        f'# Search Results for "{query}"',
        "",
        f"**Search Scope:** Workspace {workspace_id}",
        f"**Results Found:** {len(items)}",
        f"**More Available:** {'Yes' if has_more else 'No'}",
        "",
    ]

    if not items:
        lines.append("_No results found_")
    else:
        lines.append("## Results")
        lines.append("")
        for item in items:
            date = to_iso(item.snippet_last_updated).split("T")[0]
            creator = user_names.get(item.snippet_creator_id, UNKNOWN)
            lines.append(f"### {item.type.capitalize()} {item.id}")
            lines.append(f"**Created:** {date} | **Creator:** {creator} ({item.snippet_creator_id})")
            if item.thread_id:
                lines.append(f"**Thread:** {item.thread_id}")
            if item.conversation_id:
                lines.append(f"**Conversation:** {item.conversation_id}")
            if item.channel_id:
                channel = channel_names.get(item.channel_id, UNKNOWN)
                lines.append(f"**Channel:** {channel} ({item.channel_id})")
            lines.append("")
            lines.append(preview(item.snippet))
            lines.append("")

    if has_more:
        lines.extend([
            "## Next Steps",
            "",
            "More results available. Use the cursor to fetch the next page.",
        ])

    return "\n".join(lines)

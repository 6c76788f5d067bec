"""
Inbox formatter.
"""

from models import Thread


def format_inbox(
    workspace_id: int,
    threads: list[Thread],
    unread_ids: set[int],
    unread_count: int,
    total_unread: int,
) -> str:
    """
    Render an inbox listing.

    Args:
        workspace_id: Workspace the inbox belongs to
        threads: Threads to list (already filtered by onlyUnread)
        unread_ids: Ids of threads the user hasn't read
        unread_count: Inbox count reported by the API
        total_unread: Number of unread threads in the fetched inbox
    """
    lines = [
        f"# Inbox for Workspace {workspace_id}",
        "",
        f"**Total Threads:** {unread_count}",
        f"**Unread Threads:** {total_unread}",
        "",
        f"## Threads ({len(threads)})",
        "",
    ]

    if not threads:
        lines.append("_No threads in inbox_")
    else:
        for thread in threads:
            unread = " 🔵" if thread.id in unread_ids else ""
            star = " ⭐" if thread.starred else ""
            lines.append(f"- **{thread.id}**: {thread.title}{unread}{star} (Channel {thread.channel_id})")
    lines.append("")

    if unread_count > 0:
        lines.extend([
            "## Next Steps",
            "",
            "- Use `load-thread` to read specific threads with their comments",
            "- Use `load-conversation` to read specific conversations with their messages",
            "- Use `mark-done` to mark items as read and archive them",
        ])

    return "\n".join(lines)

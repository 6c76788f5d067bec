"""
Thread formatter: thread metadata, body, comments and participants.

Receives Thread/Comment/Channel dataclasses plus a user id → name lookup,
returns markdown. No API calls.
"""

from models import Channel, Comment, Thread, to_iso

UNKNOWN = "Unknown"


def format_thread(
    thread: Thread,
    channel: Channel,
    comments: list[Comment],
    user_names: dict[int, str],
    include_participants: bool = True,
) -> str:
    """
    Render a thread with its comments.

    Comments are listed in the order the API returned them. The participants
    section is only emitted when requested and the thread has any.
    """
    creator = user_names.get(thread.creator, UNKNOWN)
    lines = [
        f"# Thread: {thread.title}",
        "",
        f"**Thread ID:** {thread.id}",
        f"**Channel:** {channel.name}",
        f"**Workspace ID:** {thread.workspace_id}",
        f"**Creator:** {creator} ({thread.creator})",
        f"**Posted:** {to_iso(thread.posted)}",
        f"**Comments:** {thread.comment_count}",
        f"**Archived:** {'Yes' if thread.is_archived else 'No'}",
        f"**In Inbox:** {'Yes' if thread.in_inbox else 'No'}",
        "",
        "## Content",
        "",
        thread.content,
        "",
        f"## Comments ({len(comments)})",
        "",
    ]

    for comment in comments:
        author = user_names.get(comment.creator, UNKNOWN)
        lines.append(f"### Comment {comment.id}")
        lines.append(f"**Creator:** {author} ({comment.creator}) | **Posted:** {to_iso(comment.posted)}")
        lines.append("")
        lines.append(comment.content)
        lines.append("")

    if include_participants and thread.participants:
        lines.append("## Participants")
        lines.append("")
        lines.append(", ".join(
            f"{user_names.get(pid, UNKNOWN)} ({pid})" for pid in thread.participants
        ))

    return "\n".join(lines)

"""
Conversation formatter: direct-message metadata and messages.
"""

from models import Conversation, ConversationMessage, to_iso

from .threads import UNKNOWN


def format_conversation(
    conversation: Conversation,
    messages: list[ConversationMessage],
    user_names: dict[int, str],
    include_participants: bool = True,
) -> str:
    lines = [
        f"# Conversation {conversation.id}",
        "",
        f"**Conversation ID:** {conversation.id}",
    ]
    if conversation.title:
        lines.append(f"**Title:** {conversation.title}")
    lines.extend([
        f"**Workspace ID:** {conversation.workspace_id}",
        f"**Archived:** {'Yes' if conversation.archived else 'No'}",
        f"**Last Active:** {to_iso(conversation.last_active)}",
        "",
    ])

    if include_participants:
        lines.append("## Participants")
        lines.append("")
        lines.append(", ".join(user_names.get(uid, UNKNOWN) for uid in conversation.user_ids))
        lines.append("")

    lines.append(f"## Messages ({len(messages)})")
    lines.append("")
    for message in messages:
        author = user_names.get(message.creator, UNKNOWN)
        lines.append(f"### Message {message.id}")
        lines.append(f"**Creator:** {author} | **Posted:** {to_iso(message.posted)}")
        lines.append("")
        lines.append(message.content)
        lines.append("")

    return "\n".join(lines)

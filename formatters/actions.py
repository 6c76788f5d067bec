"""
Formatters for write actions: reply and react.
"""


def format_reply(target_type: str, target_id: int, reply_id: int, created: str, content: str) -> str:
    target = f"Thread {target_id}" if target_type == "thread" else f"Conversation {target_id}"
    return "\n".join([
        "# Reply Posted",
        "",
        f"**Target:** {target}",
        f"**Reply ID:** {reply_id}",
        f"**Created:** {created}",
        "",
        "## Content",
        "",
        content,
    ])


def format_reaction(operation: str, target_type: str, target_id: int, emoji: str) -> str:
    return "\n".join([
        f"# Reaction {'Added' if operation == 'add' else 'Removed'}",
        "",
        f"**Target:** {target_type} {target_id}",
        f"**Emoji:** {emoji}",
        f"**Operation:** {operation}",
    ])

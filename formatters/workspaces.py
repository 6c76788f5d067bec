"""
Workspace formatter.

Names for creators, default channels and default conversations are passed
in as lookups; anything missing from a lookup renders as the bare id.
"""

from models import Workspace, to_iso


def _named(name: str | None, object_id: int) -> str:
    return f"{name} ({object_id})" if name else str(object_id)


def format_workspaces(
    workspaces: list[Workspace],
    creator_names: dict[int, str],
    channel_names: dict[int, str],
    conversation_titles: dict[int, str],
) -> str:
    if not workspaces:
        return "# Workspaces\n\nNo workspaces found."

    plural = "" if len(workspaces) == 1 else "s"
    lines = ["# Workspaces", "", f"Found {len(workspaces)} workspace{plural}:", ""]

    for workspace in workspaces:
        lines.append(f"## {workspace.name}")
        lines.append(f"**ID:** {workspace.id}")
        lines.append(f"**Creator:** {_named(creator_names.get(workspace.creator), workspace.creator)}")
        lines.append(f"**Created:** {to_iso(workspace.created)}")
        if workspace.default_channel:
            name = channel_names.get(workspace.default_channel)
            lines.append(f"**Default Channel:** {_named(name, workspace.default_channel)}")
        if workspace.default_conversation:
            title = conversation_titles.get(workspace.default_conversation)
            lines.append(f"**Default Conversation:** {_named(title, workspace.default_conversation)}")
        if workspace.plan:
            lines.append(f"**Plan:** {workspace.plan}")
        lines.append("")

    return "\n".join(lines)

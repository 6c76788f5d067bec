"""
User formatters: session user and workspace member listings.

Receives User/WorkspaceUser dataclasses, returns markdown.
"""

from models import User, WorkspaceUser


def format_user_info(user: User) -> str:
    """Render the session user's profile."""
    lines = [
        "# User Information",
        "",
        f"**User ID:** {user.id}",
        f"**Name:** {user.name}",
        f"**Email:** {user.email}",
        f"**Timezone:** {user.timezone}",
        f"**Bot:** {'Yes' if user.bot else 'No'}",
        f"**Language:** {user.lang}",
    ]
    if user.default_workspace:
        lines.append(f"**Default Workspace:** {user.default_workspace}")

    if user.away_mode:
        lines.extend([
            "",
            "## Away Mode",
            f"**Type:** {user.away_mode.type}",
            f"**From:** {user.away_mode.date_from}",
            f"**To:** {user.away_mode.date_to}",
        ])

    return "\n".join(lines)


def format_users(
    workspace_id: int,
    users: list[WorkspaceUser],
    total_users: int,
    search_text: str | None = None,
) -> str:
    """
    Render a workspace member listing.

    Args:
        workspace_id: Workspace the users belong to
        users: Users to show (already filtered)
        total_users: Count before filtering
        search_text: Filter that was applied, if any
    """
    total = f"**Total Users:** {total_users}"
    if search_text:
        total += f" ({len(users)} matching search)"

    lines = ["# Workspace Users", "", f"**Workspace ID:** {workspace_id}", total, ""]

    if not users:
        lines.append("No users found.")
        return "\n".join(lines)

    for user in users:
        lines.append(f"## {user.name}{' 🤖' if user.bot else ''}")
        lines.append(f"**ID:** {user.id}")
        if user.email:
            lines.append(f"**Email:** {user.email}")
        lines.append(f"**User Type:** {user.user_type}")
        lines.append(f"**Timezone:** {user.timezone}")
        lines.append(f"**Status:** {'Removed' if user.removed else 'Active'}")
        lines.append("")

    return "\n".join(lines)

"""
Get users tool: workspace members, optionally by id and filtered by text.
"""

from adapters import endpoints
from adapters.client import TwistClient
from formatters import format_users
from models import ToolOutput, WorkspaceUser


def matches_search(user: WorkspaceUser, search_text: str) -> bool:
    """Case-insensitive substring match on name or email."""
    needle = search_text.lower()
    if needle in user.name.lower():
        return True
    return bool(user.email) and needle in user.email.lower()


async def do_get_users(
    client: TwistClient,
    workspace_id: int,
    user_ids: list[int] | None = None,
    search_text: str | None = None,
) -> ToolOutput:
    """
    List workspace users.

    With no user_ids (or an empty list) every member is fetched in one call;
    otherwise the given users are fetched together in a single batch.
    """
    if user_ids:
        users = await client.batch(
            *(endpoints.get_workspace_user(workspace_id, uid) for uid in user_ids)
        )
    else:
        users = await client.execute(endpoints.get_workspace_users(workspace_id))

    total_users = len(users)
    filtered = [u for u in users if matches_search(u, search_text)] if search_text else users

    return ToolOutput(
        text_content=format_users(workspace_id, filtered, total_users, search_text),
        structured_content={
            "type": "get_users",
            "workspaceId": workspace_id,
            "users": [
                {
                    "id": u.id,
                    "name": u.name,
                    "shortName": u.short_name,
                    "email": u.email,
                    "userType": u.user_type,
                    "bot": u.bot,
                    "removed": u.removed,
                    "timezone": u.timezone,
                }
                for u in filtered
            ],
            "totalUsers": total_users,
            "filteredUsers": len(filtered),
            "appliedFilters": {
                "workspaceId": workspace_id,
                "userIds": user_ids,
                "searchText": search_text,
            },
        },
    )

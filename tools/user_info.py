"""
User info tool: the authenticated user's profile.
"""

from adapters import endpoints
from adapters.client import TwistClient
from formatters import format_user_info
from models import ToolOutput


async def do_user_info(client: TwistClient) -> ToolOutput:
    """Fetch the session user and render their profile."""
    user = await client.execute(endpoints.get_session_user())

    return ToolOutput(
        text_content=format_user_info(user),
        structured_content={
            "type": "user_info",
            "userId": user.id,
            "name": user.name,
            "email": user.email,
            "timezone": user.timezone,
            "bot": user.bot,
            "defaultWorkspace": user.default_workspace,
        },
    )

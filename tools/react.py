"""
React tool: add or remove an emoji reaction on a thread, comment or message.

The target is fetched first so the response can link to it.
"""

from adapters import endpoints
from adapters.client import TwistClient
from formatters import format_reaction
from models import InvalidArgument, ToolOutput
from urls import comment_url, message_url, thread_url
from validation import require_text

REACTION_TARGETS = ("thread", "comment", "message")
REACTION_OPERATIONS = ("add", "remove")


async def _target_url(client: TwistClient, target_type: str, target_id: int) -> str:
    if target_type == "thread":
        thread = await client.execute(endpoints.get_thread(target_id))
        return thread.url or thread_url(thread.workspace_id, thread.id, thread.channel_id)

    if target_type == "comment":
        comment = await client.execute(endpoints.get_comment(target_id))
        if comment.url:
            return comment.url
        workspace_id = comment.workspace_id or 0
        if comment.channel_id:
            return comment_url(workspace_id, comment.channel_id, comment.thread_id, comment.id)
        return thread_url(workspace_id, comment.thread_id)

    message = await client.execute(endpoints.get_message(target_id))
    return message.url or message_url(message.workspace_id or 0, message.conversation_id, message.id)


async def do_react(
    client: TwistClient,
    target_type: str,
    target_id: int,
    emoji: str,
    operation: str = "add",
) -> ToolOutput:
    """Add or remove a reaction. Mutation: sent once, never retried."""
    if target_type not in REACTION_TARGETS:
        raise InvalidArgument(
            f"targetType must be one of {', '.join(REACTION_TARGETS)}, got {target_type!r}"
        )
    if operation not in REACTION_OPERATIONS:
        raise InvalidArgument(f"operation must be 'add' or 'remove', got {operation!r}")
    require_text(emoji, "emoji")

    target_url = await _target_url(client, target_type, target_id)

    if operation == "add":
        await client.execute(endpoints.add_reaction(target_type, target_id, emoji))
    else:
        await client.execute(endpoints.remove_reaction(target_type, target_id, emoji))

    return ToolOutput(
        text_content=format_reaction(operation, target_type, target_id, emoji),
        structured_content={
            "type": "reaction_result",
            "success": True,
            "operation": operation,
            "targetType": target_type,
            "targetId": target_id,
            "emoji": emoji,
            "targetUrl": target_url,
        },
    )

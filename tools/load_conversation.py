"""
Load conversation tool: a direct-message conversation with its messages.
"""

from adapters import endpoints
from adapters.client import TwistClient
from formatters import format_conversation
from models import ToolOutput, to_iso
from urls import conversation_url, message_url
from validation import parse_date, validate_limit


async def do_load_conversation(
    client: TwistClient,
    conversation_id: int,
    newer_than_date: str | None = None,
    older_than_date: str | None = None,
    limit: int = 50,
    include_participants: bool = True,
) -> ToolOutput:
    """
    Load a conversation and its messages.

    Conversation + messages come back in one batch; participant names in a
    second.
    """
    newer_than = parse_date(newer_than_date, "newerThanDate")
    older_than = parse_date(older_than_date, "olderThanDate")
    validate_limit(limit)

    conversation, messages = await client.batch(
        endpoints.get_conversation(conversation_id),
        endpoints.get_messages(
            conversation_id, newer_than=newer_than, older_than=older_than, limit=limit,
        ),
    )

    users = await client.batch(*(
        endpoints.get_workspace_user(conversation.workspace_id, uid)
        for uid in conversation.user_ids
    ))
    user_names = {u.id: u.name for u in users}
    workspace_id = conversation.workspace_id

    return ToolOutput(
        text_content=format_conversation(conversation, messages, user_names, include_participants),
        structured_content={
            "type": "conversation_data",
            "conversation": {
                "id": conversation.id,
                "title": conversation.title,
                "workspaceId": workspace_id,
                "userIds": conversation.user_ids if include_participants else [],
                "archived": conversation.archived,
                "lastActive": to_iso(conversation.last_active),
                "conversationUrl": conversation_url(workspace_id, conversation.id),
            },
            "messages": [
                {
                    "id": m.id,
                    "content": m.content,
                    "creatorId": m.creator,
                    "creatorName": user_names.get(m.creator),
                    "conversationId": m.conversation_id,
                    "posted": to_iso(m.posted),
                    "messageUrl": message_url(workspace_id, m.conversation_id, m.id),
                }
                for m in messages
            ],
            "totalMessages": conversation.message_count or 0,
        },
    )

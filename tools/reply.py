"""
Reply tool: post a comment on a thread or a message in a conversation.

Mutation: sent once, never retried.
"""

from datetime import datetime, timezone

from adapters import endpoints
from adapters.client import TwistClient
from formatters import format_reply
from models import Comment, ConversationMessage, InvalidArgument, ToolOutput, to_iso
from urls import comment_url, message_url, thread_url
from validation import require_text

REPLY_TARGETS = ("thread", "conversation")


def _comment_link(comment: Comment) -> str:
    if comment.url:
        return comment.url
    workspace_id = comment.workspace_id or 0
    if comment.channel_id:
        return comment_url(workspace_id, comment.channel_id, comment.thread_id, comment.id)
    return thread_url(workspace_id, comment.thread_id)


def _message_link(message: ConversationMessage) -> str:
    if message.url:
        return message.url
    return message_url(message.workspace_id or 0, message.conversation_id, message.id)


async def do_reply(
    client: TwistClient,
    target_type: str,
    target_id: int,
    content: str,
    recipients: list[int] | None = None,
) -> ToolOutput:
    """
    Post a reply.

    Args:
        client: Twist API client
        target_type: 'thread' (posts a comment) or 'conversation' (posts a message)
        target_id: Thread or conversation ID
        content: Reply body (markdown)
        recipients: User IDs to notify (thread replies only)
    """
    if target_type not in REPLY_TARGETS:
        raise InvalidArgument(
            f"targetType must be one of {', '.join(REPLY_TARGETS)}, got {target_type!r}"
        )
    require_text(content, "content")

    if target_type == "thread":
        reply = await client.execute(endpoints.add_comment(target_id, content, recipients))
        reply_url = _comment_link(reply)
    else:
        reply = await client.execute(endpoints.add_message(target_id, content))
        reply_url = _message_link(reply)

    created = to_iso(reply.posted or datetime.now(timezone.utc))

    return ToolOutput(
        text_content=format_reply(target_type, target_id, reply.id, created, content),
        structured_content={
            "type": "reply_result",
            "success": True,
            "targetType": target_type,
            "targetId": target_id,
            "replyId": reply.id,
            "content": content,
            "created": created,
            "replyUrl": reply_url,
        },
    )

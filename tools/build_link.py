"""
Build link tool: Twist web URLs for threads, comments, conversations, messages.

Pure URL construction, no API calls.
"""

import urls
from models import InvalidArgument, ToolOutput


def do_build_link(
    workspace_id: int,
    conversation_id: int | None = None,
    message_id: int | str | None = None,
    channel_id: int | None = None,
    thread_id: int | None = None,
    comment_id: int | str | None = None,
    full_url: bool = True,
) -> ToolOutput:
    """
    Build a link.

    conversation_id (+ optional message_id) takes precedence over
    thread_id (+ optional channel_id, comment_id). Comment links need
    channel_id.

    Raises:
        InvalidArgument: Neither conversation_id nor thread_id given, or a
            comment link without channel_id
    """
    if conversation_id is not None:
        if message_id is not None:
            link_type = "message"
            path = urls.message_path(workspace_id, conversation_id, message_id)
        else:
            link_type = "conversation"
            path = urls.conversation_path(workspace_id, conversation_id)
    elif thread_id is not None:
        if comment_id is not None:
            if channel_id is None:
                raise InvalidArgument("channelId is required when building a comment link")
            link_type = "comment"
            path = urls.comment_path(workspace_id, channel_id, thread_id, comment_id)
        else:
            link_type = "thread"
            path = urls.thread_path(workspace_id, thread_id, channel_id)
    else:
        raise InvalidArgument("Must provide either conversationId OR threadId to build a link")

    url = urls.full_twist_url(path) if full_url else path

    params = {
        "workspaceId": workspace_id,
        "conversationId": conversation_id,
        "messageId": message_id,
        "channelId": channel_id,
        "threadId": thread_id,
        "commentId": comment_id,
    }
    return ToolOutput(
        text_content=url,
        structured_content={
            "type": "link_data",
            "url": url,
            "linkType": link_type,
            "params": params,
            "appliedFilters": {**params, "fullUrl": full_url},
        },
    )

"""
Get workspaces tool: every workspace the user belongs to.

Names are resolved with three batches after the listing: default channels,
default conversations, then creators (looked up in the workspace they
created). Each batch is skipped when it has nothing to fetch.
"""

from typing import Any

from adapters import endpoints
from adapters.client import TwistClient
from formatters import format_workspaces
from models import Conversation, ToolOutput, Workspace, to_iso


def conversation_title(conversation: Conversation) -> str:
    """Title, or a stand-in naming the participants."""
    if conversation.title:
        return conversation.title
    return f"Conversation with users: {', '.join(str(uid) for uid in conversation.user_ids)}"


async def _resolve_names(
    client: TwistClient,
    workspaces: list[Workspace],
) -> tuple[dict[int, str], dict[int, str], dict[int, str]]:
    # dict.fromkeys keeps first-seen order and drops duplicates
    channel_ids = list(dict.fromkeys(w.default_channel for w in workspaces if w.default_channel))
    conversation_ids = list(dict.fromkeys(
        w.default_conversation for w in workspaces if w.default_conversation
    ))
    workspace_by_creator = {w.creator: w.id for w in workspaces}

    channels = await client.batch(*(endpoints.get_channel(cid) for cid in channel_ids))
    channel_names = {c.id: c.name for c in channels}

    conversations = await client.batch(
        *(endpoints.get_conversation(cid) for cid in conversation_ids)
    )
    conversation_titles = {c.id: conversation_title(c) for c in conversations}

    creators = await client.batch(*(
        endpoints.get_workspace_user(workspace_id, creator_id)
        for creator_id, workspace_id in workspace_by_creator.items()
    ))
    creator_names = {u.id: u.name for u in creators}

    return creator_names, channel_names, conversation_titles


def _workspace_dict(
    workspace: Workspace,
    creator_names: dict[int, str],
    channel_names: dict[int, str],
    conversation_titles: dict[int, str],
) -> dict[str, Any]:
    return {
        "id": workspace.id,
        "name": workspace.name,
        "creator": workspace.creator,
        "creatorName": creator_names.get(workspace.creator),
        "created": to_iso(workspace.created),
        "defaultChannel": workspace.default_channel,
        "defaultChannelName": channel_names.get(workspace.default_channel or 0),
        "defaultConversation": workspace.default_conversation,
        "defaultConversationTitle": conversation_titles.get(workspace.default_conversation or 0),
        "plan": workspace.plan,
        "avatarId": workspace.avatar_id,
        "avatarUrls": workspace.avatar_urls,
    }


async def do_get_workspaces(client: TwistClient) -> ToolOutput:
    """List workspaces with creator, default channel and conversation names."""
    workspaces = await client.execute(endpoints.get_workspaces())
    if not workspaces:
        return ToolOutput(
            text_content=format_workspaces([], {}, {}, {}),
            structured_content={"type": "get_workspaces", "workspaces": []},
        )

    creator_names, channel_names, conversation_titles = await _resolve_names(client, workspaces)

    return ToolOutput(
        text_content=format_workspaces(
            workspaces, creator_names, channel_names, conversation_titles,
        ),
        structured_content={
            "type": "get_workspaces",
            "workspaces": [
                _workspace_dict(w, creator_names, channel_names, conversation_titles)
                for w in workspaces
            ],
        },
    )

"""
Mark done tool: mark threads or conversations read and archive them.

Two modes:
- Bulk (threads only): scope by workspaceId or channelId. One API call per
  requested operation; any failure fails the whole call.
- Individual: explicit ids. All operations go out as one atomic batch. If
  the batch fails, every target is retried one by one so each failure can be
  attributed to a specific id.

Per-target lifecycle during fallback: pending → running → completed | failed.
The first error ends that target's run; later targets still go ahead.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Protocol

from adapters import endpoints
from adapters.client import ApiRequest
from formatters import format_mark_done
from logging_config import log_fallback
from models import (
    BulkOperationFailed,
    FailedItem,
    InvalidArgument,
    MarkDoneOperations,
    MarkDoneOutcome,
    ToolOutput,
)

logger = logging.getLogger(__name__)

MARK_DONE_TYPES = ("thread", "conversation")


class MutationClient(Protocol):
    """The slice of TwistClient mark-done needs."""

    async def execute(self, request: ApiRequest) -> Any: ...

    async def batch(self, *requests: ApiRequest) -> list[Any]: ...


# ============================================================================
# PER-TARGET STATE
# ============================================================================

class TargetState(Enum):
    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass
class TargetRun:
    """One target's operations and where its run has got to."""
    item: int
    requests: list[ApiRequest]
    state: TargetState = TargetState.PENDING
    error: str | None = None

    async def run(self, client: MutationClient) -> None:
        self.state = TargetState.RUNNING
        for request in self.requests:
            try:
                await client.execute(request)
            except Exception as e:
                self.state = TargetState.FAILED
                self.error = str(e) or "Unknown error"
                return
        self.state = TargetState.COMPLETED


@dataclass
class FallbackResult:
    completed: list[int] = field(default_factory=list)
    failed: list[FailedItem] = field(default_factory=list)


# ============================================================================
# REQUEST PLANNING
# ============================================================================

def target_requests(item_type: str, item_id: int, ops: MarkDoneOperations) -> list[ApiRequest]:
    """Requests for one target, in order: mark read, then archive."""
    requests: list[ApiRequest] = []
    if item_type == "thread":
        if ops.mark_read:
            requests.append(endpoints.mark_thread_read(item_id, obj_index=0))
        if ops.archive:
            requests.append(endpoints.archive_thread(item_id))
    else:
        if ops.mark_read:
            requests.append(endpoints.mark_conversation_read(item_id))
        if ops.archive:
            requests.append(endpoints.archive_conversation(item_id))
    return requests


def bulk_requests(
    workspace_id: int | None,
    channel_id: int | None,
    ops: MarkDoneOperations,
) -> list[ApiRequest]:
    """
    Requests for a workspace- or channel-scoped call.

    clear_unread with a workspace replaces mark-read and archive entirely.
    Workspace scope wins over channel scope when both are given.
    """
    if ops.clear_unread and workspace_id:
        return [endpoints.clear_unread_threads(workspace_id)]

    requests: list[ApiRequest] = []
    if ops.mark_read:
        if workspace_id:
            requests.append(endpoints.mark_all_threads_read(workspace_id=workspace_id))
        elif channel_id:
            requests.append(endpoints.mark_all_threads_read(channel_id=channel_id))
    if ops.archive:
        if workspace_id:
            requests.append(endpoints.archive_all(workspace_id=workspace_id))
        elif channel_id:
            requests.append(endpoints.archive_all(channel_ids=[channel_id]))
    return requests


# ============================================================================
# EXECUTION STRATEGIES
# ============================================================================

async def attempt_atomic_batch(client: MutationClient, requests: list[ApiRequest]) -> Exception | None:
    """
    Submit every request as one batch.

    Returns:
        None on success, otherwise the exception the batch raised
    """
    try:
        await client.batch(*requests)
    except Exception as e:
        return e
    return None


async def run_sequential_fallback(client: MutationClient, runs: list[TargetRun]) -> FallbackResult:
    """Run each target's requests one at a time, in target order."""
    result = FallbackResult()
    for target in runs:
        await target.run(client)
        if target.state is TargetState.COMPLETED:
            result.completed.append(target.item)
        else:
            result.failed.append(FailedItem(item=target.item, error=target.error or "Unknown error"))
    return result


async def run_bulk(
    client: MutationClient,
    workspace_id: int | None,
    channel_id: int | None,
    ops: MarkDoneOperations,
) -> None:
    """Apply the scoped operations in order. Any failure is fatal."""
    for request in bulk_requests(workspace_id, channel_id, ops):
        try:
            await client.execute(request)
        except Exception as e:
            raise BulkOperationFailed(str(e) or "Unknown error") from e


async def run_individual(
    client: MutationClient,
    item_type: str,
    ids: list[int],
    ops: MarkDoneOperations,
) -> FallbackResult:
    runs = [TargetRun(item_id, target_requests(item_type, item_id, ops)) for item_id in ids]
    batch = [request for target in runs for request in target.requests]

    error = await attempt_atomic_batch(client, batch)
    if error is None:
        return FallbackResult(completed=list(ids))

    log_fallback("mark-done", len(ids), str(error))
    return await run_sequential_fallback(client, runs)


# ============================================================================
# TOOL ENTRY POINT
# ============================================================================

def validate_request(
    item_type: str,
    ids: list[int] | None,
    workspace_id: int | None,
    channel_id: int | None,
    clear_unread: bool,
) -> None:
    """Reject malformed requests before any API call."""
    if item_type not in MARK_DONE_TYPES:
        raise InvalidArgument(f"type must be 'thread' or 'conversation', got {item_type!r}")
    if not ids and not workspace_id and not channel_id:
        raise InvalidArgument("Must provide either ids, workspaceId, or channelId")
    if ids and (workspace_id or channel_id):
        raise InvalidArgument("Provide either ids or workspaceId/channelId, not both")
    if item_type == "conversation" and (workspace_id or channel_id or clear_unread):
        raise InvalidArgument(
            "Bulk operations (workspaceId, channelId, clearUnread) are only supported for threads"
        )


async def execute_mark_done(
    client: MutationClient,
    item_type: str,
    ids: list[int] | None = None,
    workspace_id: int | None = None,
    channel_id: int | None = None,
    mark_read: bool = True,
    archive: bool = True,
    clear_unread: bool = False,
) -> MarkDoneOutcome:
    """
    Run a mark-done request and report what happened.

    Raises:
        InvalidArgument: Bad selector/type combination (no API call made)
        BulkOperationFailed: A scoped call failed
    """
    validate_request(item_type, ids, workspace_id, channel_id, clear_unread)
    ops = MarkDoneOperations(mark_read=mark_read, archive=archive, clear_unread=clear_unread)

    outcome = MarkDoneOutcome(
        item_type=item_type,
        mode="individual",
        operations=ops,
        total_requested=len(ids or []),
        workspace_id=workspace_id,
        channel_id=channel_id,
    )

    if item_type == "thread" and (workspace_id or channel_id):
        outcome.mode = "bulk"
        await run_bulk(client, workspace_id, channel_id, ops)
        logger.info(f"mark-done bulk: workspace={workspace_id} channel={channel_id} done")
        return outcome

    result = await run_individual(client, item_type, list(ids or []), ops)
    outcome.completed = result.completed
    outcome.failed = result.failed
    logger.info(
        f"mark-done {item_type}s: {outcome.success_count} succeeded, "
        f"{outcome.failure_count} failed"
    )
    return outcome


async def do_mark_done(
    client: MutationClient,
    item_type: str,
    ids: list[int] | None = None,
    workspace_id: int | None = None,
    channel_id: int | None = None,
    mark_read: bool = True,
    archive: bool = True,
    clear_unread: bool = False,
) -> ToolOutput:
    """Mark-done tool: execute and render."""
    outcome = await execute_mark_done(
        client, item_type, ids,
        workspace_id=workspace_id,
        channel_id=channel_id,
        mark_read=mark_read,
        archive=archive,
        clear_unread=clear_unread,
    )
    return ToolOutput(
        text_content=format_mark_done(outcome),
        structured_content=outcome.to_structured(),
    )

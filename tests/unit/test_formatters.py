"""
Tests for the pure markdown formatters.

Formatters take model dataclasses, so these tests build them directly.
"""

from datetime import datetime, timezone

from inline_snapshot import snapshot

from formatters import (
    format_conversation,
    format_mark_done,
    format_search_results,
    format_workspaces,
    next_step_hint,
    preview,
)
from models import (
    Conversation,
    ConversationMessage,
    FailedItem,
    MarkDoneOperations,
    MarkDoneOutcome,
    SearchResultItem,
    Workspace,
)

JAN_1 = datetime(2024, 1, 1, tzinfo=timezone.utc)


class TestMarkDoneFormatter:

    def test_bulk_channel_scope(self) -> None:
        outcome = MarkDoneOutcome(
            "thread", "bulk", MarkDoneOperations(mark_read=True, archive=False), channel_id=42,
        )
        assert format_mark_done(outcome) == snapshot("""\
# Mark Threads Done

**Mode:** Bulk Operation
**Channel ID:** 42
**Mark Read:** Yes
**Archive:** No

✅ Bulk operation completed successfully
## Next Steps

Use `fetch-inbox` to see remaining unread threads.""")

    def test_all_completed(self) -> None:
        outcome = MarkDoneOutcome(
            "conversation", "individual", MarkDoneOperations(),
            total_requested=2, completed=[5, 6],
        )
        assert format_mark_done(outcome) == snapshot("""\
# Mark Conversations Done

**Mode:** Individual IDs
**Total Requested:** 2
**Successful:** 2
**Failed:** 0
**Mark Read:** Yes
**Archive:** Yes

## Completed

5, 6

## Next Steps

Check your conversations for remaining unread messages.""")

    def test_hint_on_failure(self) -> None:
        outcome = MarkDoneOutcome(
            "thread", "individual", MarkDoneOperations(),
            total_requested=1, failed=[FailedItem(1, "Forbidden")],
        )
        assert next_step_hint(outcome) == "Review failed items and retry if needed."

    def test_no_hint_when_nothing_ran(self) -> None:
        outcome = MarkDoneOutcome("thread", "individual", MarkDoneOperations())
        assert next_step_hint(outcome) == ""
        assert format_mark_done(outcome).endswith("## Next Steps\n")


class TestWorkspacesFormatter:

    def test_missing_names_fall_back_to_ids(self) -> None:
        workspaces = [
            Workspace(id=1, name="Acme", creator=7, created=JAN_1, default_channel=10),
            Workspace(id=2, name="Side", creator=8, created=JAN_1),
        ]
        assert format_workspaces(workspaces, {7: "Ada"}, {}, {}) == snapshot("""\
# Workspaces

Found 2 workspaces:

## Acme
**ID:** 1
**Creator:** Ada (7)
**Created:** 2024-01-01T00:00:00.000Z
**Default Channel:** 10

## Side
**ID:** 2
**Creator:** 8
**Created:** 2024-01-01T00:00:00.000Z
""")


class TestSearchFormatter:

    def test_preview_truncates(self) -> None:
        assert preview("x" * 200) == "x" * 200
        assert preview("x" * 201) == "x" * 200 + "..."

    def test_comment_hit(self) -> None:
        item = SearchResultItem(
            id="500",
            type="comment",
            snippet="Looks good",
            snippet_creator_id=3,
            snippet_last_updated=JAN_1,
            thread_id=100,
            channel_id=10,
        )
        assert format_search_results("good", 1, [item], False, {}, {10: "general"}) == snapshot("""\
# Search Results for "good"

**Search Scope:** Workspace 1
**Results Found:** 1
**More Available:** No

## Results

### Comment 500
**Created:** 2024-01-01 | **Creator:** Unknown (3)
**Thread:** 100
**Channel:** general (10)

Looks good
""")

    def test_no_results(self) -> None:
        text = format_search_results("zzz", 1, [], False, {}, {})
        assert text.endswith("_No results found_")


class TestConversationFormatter:

    def test_titled_conversation(self) -> None:
        conversation = Conversation(
            id=200, workspace_id=1, user_ids=[1, 2], title="Standup", last_active=JAN_1,
        )
        messages = [ConversationMessage(id=700, content="Morning", creator=2, conversation_id=200, posted=JAN_1)]

        assert format_conversation(conversation, messages, {1: "Ada"}) == snapshot("""\
# Conversation 200

**Conversation ID:** 200
**Title:** Standup
**Workspace ID:** 1
**Archived:** No
**Last Active:** 2024-01-01T00:00:00.000Z

## Participants

Ada, Unknown

## Messages (1)

### Message 700
**Creator:** Unknown | **Posted:** 2024-01-01T00:00:00.000Z

Morning
""")

"""
Mark-done report formatter.

Renders a MarkDoneOutcome as markdown: mode, selectors and operations,
the completed/failed partition (individual mode), and a next-step hint.
"""

from models import MarkDoneOutcome


def _yes_no(flag: bool) -> str:
    return "Yes" if flag else "No"


def next_step_hint(outcome: MarkDoneOutcome) -> str:
    """
    Suggest what to do after a mark-done call.

    Bulk mode and clean individual runs point back at the inbox (threads)
    or conversations. Any failure asks for a review instead.
    """
    if outcome.mode == "bulk" or (not outcome.failed and outcome.completed):
        if outcome.item_type == "thread":
            return "Use `fetch-inbox` to see remaining unread threads."
        return "Check your conversations for remaining unread messages."
    if outcome.failed:
        return "Review failed items and retry if needed."
    return ""


def format_mark_done(outcome: MarkDoneOutcome) -> str:
    kind = "Threads" if outcome.item_type == "thread" else "Conversations"
    ops = outcome.operations
    lines = [f"# Mark {kind} Done", ""]

    if outcome.mode == "bulk":
        lines.append("**Mode:** Bulk Operation")
        if outcome.workspace_id:
            lines.append(f"**Workspace ID:** {outcome.workspace_id}")
        if outcome.channel_id:
            lines.append(f"**Channel ID:** {outcome.channel_id}")
        if ops.clear_unread:
            lines.append("**Operation:** Clear all unread markers")
        else:
            lines.append(f"**Mark Read:** {_yes_no(ops.mark_read)}")
            lines.append(f"**Archive:** {_yes_no(ops.archive)}")
        lines.append("")
        lines.append("✅ Bulk operation completed successfully")
    else:
        lines.extend([
            "**Mode:** Individual IDs",
            f"**Total Requested:** {outcome.total_requested}",
            f"**Successful:** {outcome.success_count}",
            f"**Failed:** {outcome.failure_count}",
            f"**Mark Read:** {_yes_no(ops.mark_read)}",
            f"**Archive:** {_yes_no(ops.archive)}",
            "",
        ])

        if outcome.completed:
            lines.append("## Completed")
            lines.append("")
            lines.append(", ".join(str(item) for item in outcome.completed))
            lines.append("")

        if outcome.failed:
            lines.append("## Failed")
            lines.append("")
            for failure in outcome.failed:
                lines.append(f"- {outcome.item_type} {failure.item}: {failure.error}")
            lines.append("")

    lines.append("## Next Steps")
    lines.append("")
    hint = next_step_hint(outcome)
    if hint:
        lines.append(hint)

    return "\n".join(lines)

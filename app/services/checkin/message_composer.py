"""
Message Composer

Template-based texts shown with a check-in: a one-line progress
description, a short opening message and a detailed comparison report.
"""
from typing import List, Optional

from app.models.database.change_snapshot import ChangeSnapshot
from app.models.dto.progress import ProgressClassification, ProgressResult


class MessageComposer:
    """Builds human-facing check-in texts from a ProgressResult."""

    def describe(self, result: ProgressResult, current: ChangeSnapshot) -> str:
        """One-line description of progress since the last check-in."""
        if result.classification == ProgressClassification.INACTIVE:
            return "No changes since last time. Are you stuck?"
        if result.classification == ProgressClassification.STUCK:
            return f"Same files as last time: {current.summary} No progress visible."
        if result.classification == ProgressClassification.PROGRESSING and result.new_files:
            return f"New changes: {', '.join(sorted(result.new_files))}. {current.summary}"
        return current.summary

    def opening_message(self, result: ProgressResult, description: str) -> str:
        """Short greeting that opens the check-in."""
        if result.is_stuck:
            return "Looks like you might be stuck. Maybe take a break or ask someone for help?"
        if result.has_changes:
            return f"I see activity in the code: {description} How is the task going?"
        return "Haven't seen any code changes for a while. Is everything OK with the task?"

    def detailed_report(
        self,
        result: ProgressResult,
        previous: Optional[ChangeSnapshot],
        current: ChangeSnapshot,
    ) -> str:
        """Multi-line comparison of the previous and current change sets."""
        current_files = sorted(current.changed_files)

        if previous is None:
            listing = ", ".join(current_files) or "no changes"
            return (
                "First check-in for this workspace:\n"
                f"- Files changed: {len(current_files)}\n"
                f"- Files: {listing}"
            )

        lines: List[str] = [
            "Change statistics:",
            f"- Files in diff before: {len(previous.changed_files)}",
            f"- Files in diff now: {len(current_files)}",
            "",
        ]

        if result.new_files:
            lines.append(f"New changes ({len(result.new_files)}):")
            lines.extend(f"  - {path}" for path in sorted(result.new_files))
            lines.append("")

        if result.removed_files:
            lines.append(f"Removed from diff ({len(result.removed_files)}):")
            lines.extend(f"  - {path}" for path in sorted(result.removed_files))
            lines.append("")

        if result.classification == ProgressClassification.STUCK:
            lines.append("Same files as before:")
            lines.extend(f"  - {path}" for path in current_files)
            lines.append("")

        if result.is_stuck:
            lines.append("STATUS: Same changes, no progress")
        else:
            lines.append("STATUS: Progress detected")

        lines.append("")
        lines.append(f"Last check-in: {previous.taken_at.isoformat(timespec='seconds')}")

        if current.summary:
            lines.append(f"Summary: {current.summary}")

        return "\n".join(lines)

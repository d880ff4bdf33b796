"""
Relationship history: notes, reminders and the combined timeline.

Date range filters compare ISO 8601 strings lexically, so callers should
pass dates in the same format Dex uses. Sorting parses the dates.
"""

from datetime import datetime, timezone
from typing import Literal, Optional

from dex_mcp.models.contact import DexNote, DexReminder, TimelineItem

ReminderStatus = Literal["active", "completed", "all"]

_EARLIEST = datetime.min.replace(tzinfo=timezone.utc)


def parse_date(value: Optional[str]) -> datetime:
    """
    Parse an ISO 8601 date or timestamp for sorting.

    Naive values are treated as UTC. Missing or unparseable values sort
    before everything else.
    """
    if not value:
        return _EARLIEST
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return _EARLIEST
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _in_range(value: Optional[str], date_from: Optional[str], date_to: Optional[str]) -> bool:
    value = value or ""
    if date_from and value < date_from:
        return False
    if date_to and value > date_to:
        return False
    return True


class RelationshipHistoryTools:
    """Read-only views of a contact's notes and reminders."""

    def __init__(self, client):
        self.client = client

    async def get_contact_history(
        self,
        contact_id: str,
        include_notes: bool = True,
        include_reminders: bool = True,
        date_from: Optional[str] = None,
        date_to: Optional[str] = None,
    ) -> list[TimelineItem]:
        """
        Get a contact's timeline of notes and reminders, most recent first.

        Args:
            contact_id: Contact ID
            include_notes: Include notes (dated by event time)
            include_reminders: Include reminders (dated by due date, tagged
                'completed' or 'active')
            date_from: Drop items dated before this ISO 8601 value
            date_to: Drop items dated after this ISO 8601 value
        """
        timeline: list[TimelineItem] = []

        if include_notes:
            for note in await self.client.get_notes(contact_id):
                if not _in_range(note.event_time, date_from, date_to):
                    continue
                timeline.append(TimelineItem(
                    type="note",
                    date=note.event_time or "",
                    content=note.note,
                    id=note.id,
                ))

        if include_reminders:
            for reminder in await self.client.get_reminders(contact_id):
                if not _in_range(reminder.due_at_date, date_from, date_to):
                    continue
                timeline.append(TimelineItem(
                    type="reminder",
                    date=reminder.due_at_date or "",
                    content=reminder.body,
                    id=reminder.id,
                    tags=["completed"] if reminder.is_complete else ["active"],
                ))

        timeline.sort(key=lambda item: parse_date(item.date), reverse=True)
        return timeline

    async def get_contact_notes(
        self,
        contact_id: str,
        limit: Optional[int] = None,
        date_from: Optional[str] = None,
    ) -> list[DexNote]:
        """Get a contact's notes, most recent first."""
        notes = await self.client.get_notes(contact_id)

        if date_from:
            notes = [n for n in notes if (n.event_time or "") >= date_from]

        notes.sort(key=lambda n: parse_date(n.event_time), reverse=True)

        if limit:
            notes = notes[:limit]
        return notes

    async def get_contact_reminders(
        self,
        contact_id: str,
        status: ReminderStatus = "all",
        date_from: Optional[str] = None,
    ) -> list[DexReminder]:
        """Get a contact's reminders filtered by status, latest due date first."""
        if status not in ("active", "completed", "all"):
            raise ValueError(f"Invalid reminder status '{status}'. Must be one of: active, completed, all")

        reminders = await self.client.get_reminders(contact_id)

        if status != "all":
            is_complete = status == "completed"
            reminders = [r for r in reminders if r.is_complete == is_complete]

        if date_from:
            reminders = [r for r in reminders if (r.due_at_date or "") >= date_from]

        reminders.sort(key=lambda r: parse_date(r.due_at_date), reverse=True)
        return reminders

"""
Contact enrichment: merge new details into contacts, add notes and reminders.
"""

import logging
from typing import Any, Optional

from dex_mcp.models.contact import DexContact, DexNote, DexReminder

logger = logging.getLogger(__name__)

# List fields that are merged with existing values instead of replaced
MERGED_LIST_FIELDS = ("social_profiles", "tags")


def merge_unique(existing: list, additions: list) -> list:
    """Concatenate two lists, keeping the first occurrence of each value."""
    merged = []
    for value in [*existing, *additions]:
        if value not in merged:
            merged.append(value)
    return merged


class ContactEnrichmentTools:
    """Write operations that add information to contacts."""

    def __init__(self, client):
        self.client = client

    async def enrich_contact(
        self,
        contact_id: str,
        updates: Optional[dict[str, Any]] = None,
        **fields: Any,
    ) -> DexContact:
        """
        Merge new information into an existing contact.

        Updates can be given as a nested ``updates`` dict or as keyword
        fields; a nested dict takes precedence. List fields (social_profiles,
        tags) are merged with the current values without duplicates. Other
        fields overwrite. None values are ignored.

        Args:
            contact_id: Contact to enrich
            updates: Field updates

        Returns:
            The updated contact

        Raises:
            DexNotFoundError: If the contact does not exist.
        """
        changes = updates if updates is not None else fields
        current = await self.client.get_contact(contact_id)
        current_data = current.model_dump()

        merged: dict[str, Any] = {}
        for key, value in changes.items():
            if value is None:
                continue
            if key in MERGED_LIST_FIELDS:
                existing = current_data.get(key)
                merged[key] = merge_unique(existing, list(value)) if existing else list(value)
            else:
                merged[key] = value

        logger.info(f"Enriching contact {contact_id} with fields: {sorted(merged)}")
        return await self.client.update_contact(contact_id, merged)

    async def add_contact_note(
        self,
        contact_id: str,
        content: str,
        date: Optional[str] = None,
    ) -> DexNote:
        """Create a note for a contact, dated now unless a date is given."""
        return await self.client.create_note(content, [contact_id], event_time=date)

    async def create_contact_reminder(
        self,
        contact_id: str,
        reminder_date: str,
        note: str,
        reminder_type: Optional[str] = None,
    ) -> DexReminder:
        """
        Create an open reminder for a contact.

        reminder_type is accepted for compatibility but Dex has no field for it.
        """
        if reminder_type:
            logger.debug(f"Ignoring reminder_type '{reminder_type}' for contact {contact_id}")
        return await self.client.create_reminder(note, reminder_date, [contact_id])

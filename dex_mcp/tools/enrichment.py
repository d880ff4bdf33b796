from __future__ import annotations

from typing import Any, Optional

from mcp.server.fastmcp import FastMCP

from ..dependencies import get_discovery_tools, get_enrichment_tools


def bind(mcp: FastMCP) -> None:
    @mcp.tool()
    async def enrich_contact(
        contact_id: str,
        email: Optional[str] = None,
        phone: Optional[str] = None,
        social_profiles: Optional[list[str]] = None,
        company: Optional[str] = None,
        title: Optional[str] = None,
        notes: Optional[str] = None,
        tags: Optional[list[str]] = None,
        updates: Optional[dict[str, Any]] = None,
    ) -> dict[str, Any]:
        """Add or update information for an existing contact. Social profiles and tags are
        merged with existing values; other fields are replaced.

        Args:
            contact_id: The unique ID of the contact to enrich
            email: Email address to add or update
            phone: Phone number to add or update
            social_profiles: Social media profile URLs to add
            company: Company name to update
            title: Job title to update
            notes: Additional context or notes
            tags: Tags to add
            updates: Arbitrary field updates; replaces the individual fields above
        """
        contact = await get_enrichment_tools().enrich_contact(
            contact_id,
            updates=updates,
            email=email,
            phone=phone,
            social_profiles=social_profiles,
            company=company,
            title=title,
            notes=notes,
            tags=tags,
        )
        get_discovery_tools().invalidate_cache()
        return contact.model_dump(mode="json")

    @mcp.tool()
    async def add_contact_note(
        contact_id: str,
        content: str,
        date: Optional[str] = None,
    ) -> dict[str, Any]:
        """Create a new note for a contact to track interactions and important information.

        Args:
            contact_id: The unique ID of the contact
            content: The note content
            date: Date of the interaction (ISO 8601 format, defaults to now)
        """
        note = await get_enrichment_tools().add_contact_note(contact_id, content, date=date)
        get_discovery_tools().search_index.invalidate()
        return note.model_dump(mode="json")

    @mcp.tool()
    async def create_contact_reminder(
        contact_id: str,
        reminder_date: str,
        note: str,
        reminder_type: Optional[str] = None,
    ) -> dict[str, Any]:
        """Set a reminder for future follow-up with a contact.

        Args:
            contact_id: The unique ID of the contact
            reminder_date: When to be reminded (ISO 8601 format)
            note: What to be reminded about
            reminder_type: Type of reminder (optional)
        """
        reminder = await get_enrichment_tools().create_contact_reminder(
            contact_id, reminder_date, note, reminder_type=reminder_type
        )
        get_discovery_tools().search_index.invalidate()
        return reminder.model_dump(mode="json")

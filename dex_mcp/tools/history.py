from __future__ import annotations

from typing import Any, Literal, Optional

from mcp.server.fastmcp import FastMCP

from ..dependencies import get_history_tools


def bind(mcp: FastMCP) -> None:
    @mcp.tool()
    async def get_contact_history(
        contact_id: str,
        include_notes: bool = True,
        include_reminders: bool = True,
        date_from: Optional[str] = None,
        date_to: Optional[str] = None,
    ) -> list[dict[str, Any]]:
        """Get the complete relationship timeline for a contact, including all notes and
        reminders, most recent first.

        Args:
            contact_id: The unique ID of the contact
            include_notes: Include notes in timeline
            include_reminders: Include reminders in timeline
            date_from: Filter history from this date (ISO 8601 format)
            date_to: Filter history to this date (ISO 8601 format)
        """
        timeline = await get_history_tools().get_contact_history(
            contact_id,
            include_notes=include_notes,
            include_reminders=include_reminders,
            date_from=date_from,
            date_to=date_to,
        )
        return [item.model_dump(mode="json", exclude_none=True) for item in timeline]

    @mcp.tool()
    async def get_contact_notes(
        contact_id: str,
        limit: Optional[int] = None,
        date_from: Optional[str] = None,
    ) -> list[dict[str, Any]]:
        """Get all notes for a specific contact, sorted by date (most recent first)."""
        notes = await get_history_tools().get_contact_notes(
            contact_id, limit=limit, date_from=date_from
        )
        return [n.model_dump(mode="json") for n in notes]

    @mcp.tool()
    async def get_contact_reminders(
        contact_id: str,
        status: Literal["active", "completed", "all"] = "all",
        date_from: Optional[str] = None,
    ) -> list[dict[str, Any]]:
        """Get all reminders for a specific contact, optionally filtered by status."""
        reminders = await get_history_tools().get_contact_reminders(
            contact_id, status=status, date_from=date_from
        )
        return [r.model_dump(mode="json") for r in reminders]

from __future__ import annotations

from typing import Any, Literal, Optional

from mcp.server.fastmcp import FastMCP

from ..dependencies import get_discovery_tools


def bind(mcp: FastMCP) -> None:
    @mcp.tool()
    async def find_contact(
        name: Optional[str] = None,
        email: Optional[str] = None,
        phone: Optional[str] = None,
        social_url: Optional[str] = None,
        company: Optional[str] = None,
    ) -> list[dict[str, Any]]:
        """Find contacts using smart matching with fuzzy name search or exact matches on
        email/phone/social URLs. Returns top matches with confidence scores.

        Args:
            name: Name to search (supports fuzzy matching for typos and different orderings)
            email: Email address for exact match
            phone: Phone number for exact match
            social_url: Social media profile URL (LinkedIn, Twitter, etc.) for exact match
            company: Company name to boost match confidence
        """
        matches = await get_discovery_tools().find_contact(
            name=name, email=email, phone=phone, social_url=social_url, company=company
        )
        return [m.model_dump(mode="json") for m in matches]

    @mcp.tool()
    async def get_contact_details(contact_id: str) -> dict[str, Any]:
        """Retrieve complete information for a specific contact by ID."""
        contact = await get_discovery_tools().get_contact_details(contact_id)
        return contact.model_dump(mode="json")

    @mcp.tool()
    async def search_contacts_full_text(
        query: str,
        max_results: int = 10,
        min_confidence: int = 50,
        document_types: Optional[list[Literal["contact", "note", "reminder"]]] = None,
    ) -> list[dict[str, Any]]:
        """Search across contact names, job titles, descriptions, emails, phones, notes and
        reminders. Results are grouped per contact with highlighted snippets.

        Args:
            query: Free text to search for (typos tolerated)
            max_results: Maximum number of contacts to return
            min_confidence: Minimum match confidence from 0 to 100
            document_types: Only search these record types
        """
        results = await get_discovery_tools().search_full_text(
            query,
            max_results=max_results,
            min_confidence=min_confidence,
            document_types=document_types,
        )
        return [r.model_dump(mode="json") for r in results]

    @mcp.tool()
    def get_search_index_stats() -> dict[str, Any]:
        """Returns document and contact counts of the full-text index and its estimated size."""
        return get_discovery_tools().get_search_stats().model_dump()

"""Data models for the Dex MCP server."""

from dex_mcp.models.contact import (
    ContactMatch,
    ContactRef,
    DexContact,
    DexNote,
    DexReminder,
    EmailAddress,
    PhoneNumber,
    TimelineItem,
)
from dex_mcp.models.search import (
    DocumentMetadata,
    MatchContext,
    MemoryStats,
    SearchableDocument,
    SearchResult,
)

__all__ = [
    "ContactMatch",
    "ContactRef",
    "DexContact",
    "DexNote",
    "DexReminder",
    "EmailAddress",
    "PhoneNumber",
    "TimelineItem",
    "DocumentMetadata",
    "MatchContext",
    "MemoryStats",
    "SearchableDocument",
    "SearchResult",
]

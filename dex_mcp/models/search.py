"""
Data models for the full-text search index.
"""

from typing import Literal, Optional
from pydantic import BaseModel, Field

from dex_mcp.models.contact import DexContact

DocumentType = Literal["contact", "note", "reminder"]


class DocumentMetadata(BaseModel):
    """Where a searchable document came from."""

    field: Optional[str] = Field(None, description="Contact field name (contact documents)")
    date: Optional[str] = Field(None, description="Event or due date (notes and reminders)")
    raw_content: Optional[str] = Field(None, description="Original unstripped content")


class SearchableDocument(BaseModel):
    """A unit of searchable text belonging to exactly one contact."""

    contact_id: str = Field(..., description="Owning contact ID")
    document_type: DocumentType = Field(..., description="Source record type")
    document_id: str = Field(..., description="Source record ID")
    searchable_text: str = Field(..., description="Text the fuzzy index matches against")
    metadata: DocumentMetadata = Field(default_factory=DocumentMetadata)


class MatchContext(BaseModel):
    """One matching document shown with a search result."""

    document_type: DocumentType
    field: Optional[str] = Field(None, description="Contact field, 'note' or 'reminder'")
    snippet: str = Field(..., description="Excerpt with the match wrapped in **")
    full_content: Optional[str] = Field(None, description="Original note or reminder content")


class SearchResult(BaseModel):
    """A contact ranked by full-text relevance."""

    contact: DexContact
    confidence: int = Field(..., ge=0, le=100, description="Aggregated confidence 0-100")
    match_context: list[MatchContext] = Field(default_factory=list)


class MemoryStats(BaseModel):
    """Rough memory footprint of the search index."""

    document_count: int
    contact_count: int
    estimated_size_mb: float

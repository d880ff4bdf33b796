"""
Full-text search API endpoints.
"""

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field
from typing import List, Literal, Optional

from dex_mcp.api.errors import to_http_exception
from dex_mcp.dependencies import get_discovery_tools
from dex_mcp.dex.client import DexAPIError
from dex_mcp.models import MemoryStats, SearchResult
from dex_mcp.services.discovery import ContactDiscoveryTools

router = APIRouter()


class SearchRequest(BaseModel):
    """Full-text search request."""
    query: str
    max_results: int = Field(default=10, ge=1, le=100)
    min_confidence: int = Field(default=50, ge=0, le=100)
    document_types: Optional[List[Literal["contact", "note", "reminder"]]] = None


@router.post("/search", response_model=List[SearchResult])
async def search_contacts(
    request: SearchRequest,
    discovery: ContactDiscoveryTools = Depends(get_discovery_tools),
):
    """
    Search contacts, notes and reminders.

    The index is rebuilt from Dex first if its cache has expired.

    Raises:
        HTTPException: 400 for an empty query, 502/503 if Dex fails.
    """
    if not request.query.strip():
        raise HTTPException(
            status_code=400,
            detail="Query cannot be empty"
        )

    try:
        return await discovery.search_full_text(
            request.query,
            max_results=request.max_results,
            min_confidence=request.min_confidence,
            document_types=request.document_types,
        )
    except DexAPIError as e:
        raise to_http_exception(e)


@router.get("/search/stats", response_model=MemoryStats)
async def search_stats(discovery: ContactDiscoveryTools = Depends(get_discovery_tools)):
    """Get document and contact counts of the search index."""
    return discovery.get_search_stats()

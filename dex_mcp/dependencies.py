"""
Shared service instances for the MCP server and the HTTP API.

The Dex client and the tool services are created on first use and reused,
so the contact cache and the search index survive between tool calls.
"""

from typing import Optional

from dex_mcp.config.settings import get_settings
from dex_mcp.dex.client import DexClient
from dex_mcp.services.discovery import ContactDiscoveryTools
from dex_mcp.services.enrichment import ContactEnrichmentTools
from dex_mcp.services.history import RelationshipHistoryTools
from dex_mcp.services.search_index import FullTextSearchIndex

_client: Optional[DexClient] = None
_discovery: Optional[ContactDiscoveryTools] = None
_history: Optional[RelationshipHistoryTools] = None
_enrichment: Optional[ContactEnrichmentTools] = None


def get_client() -> DexClient:
    """
    Get the shared Dex client.

    Raises:
        ValueError: If DEX_API_KEY is not configured.
    """
    global _client
    if _client is None:
        _client = DexClient()
    return _client


def get_discovery_tools() -> ContactDiscoveryTools:
    global _discovery
    if _discovery is None:
        settings = get_settings()
        _discovery = ContactDiscoveryTools(
            get_client(),
            search_index=FullTextSearchIndex(settings.dex_search_cache_ttl_minutes),
            cache_ttl_minutes=settings.contacts_cache_ttl_minutes,
        )
    return _discovery


def get_history_tools() -> RelationshipHistoryTools:
    global _history
    if _history is None:
        _history = RelationshipHistoryTools(get_client())
    return _history


def get_enrichment_tools() -> ContactEnrichmentTools:
    global _enrichment
    if _enrichment is None:
        _enrichment = ContactEnrichmentTools(get_client())
    return _enrichment


async def close_client():
    """Close the shared client's HTTP session, if one was opened."""
    if _client is not None:
        await _client.close()


def reset_dependencies():
    """Drop all shared instances (mainly for testing)."""
    global _client, _discovery, _history, _enrichment
    _client = None
    _discovery = None
    _history = None
    _enrichment = None

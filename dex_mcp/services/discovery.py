"""
Contact discovery: smart matching, contact details and full-text search.
"""

import logging
import time
from typing import Callable, Optional

from dex_mcp.dex.client import DexAPIError, fetch_all_contacts
from dex_mcp.models.contact import ContactMatch, DexContact
from dex_mcp.models.search import MemoryStats, SearchResult
from dex_mcp.services.matching import ContactMatcher, MatchParameterError
from dex_mcp.services.search_index import FullTextSearchIndex

logger = logging.getLogger(__name__)


class ContactDiscoveryTools:
    """
    Finds contacts in Dex.

    Keeps a short-lived cache of all contacts for local matching and owns
    the full-text search index.
    """

    def __init__(
        self,
        client,
        search_index: Optional[FullTextSearchIndex] = None,
        cache_ttl_minutes: float = 5,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.client = client
        self.search_index = search_index or FullTextSearchIndex(clock=clock)
        self.matcher = ContactMatcher()
        self.cache_ttl_seconds = cache_ttl_minutes * 60
        self._clock = clock
        self._contacts_cache: Optional[list[DexContact]] = None
        self._cache_timestamp: float = 0.0

    async def _get_contacts(self) -> list[DexContact]:
        """Return all contacts, reloading them when the cache has expired."""
        now = self._clock()
        if self._contacts_cache is not None and now - self._cache_timestamp < self.cache_ttl_seconds:
            return self._contacts_cache

        contacts = await fetch_all_contacts(self.client)
        self._contacts_cache = contacts
        self._cache_timestamp = now
        self.matcher.set_contacts(contacts)
        return contacts

    async def find_contact(
        self,
        name: Optional[str] = None,
        email: Optional[str] = None,
        phone: Optional[str] = None,
        social_url: Optional[str] = None,
        company: Optional[str] = None,
    ) -> list[ContactMatch]:
        """
        Find contacts by name, email, phone or social profile.

        An email is first looked up through Dex's exact email search. If
        that finds nothing or fails, all contacts are loaded and matched
        locally.

        Raises:
            MatchParameterError: If no identifying parameter was given.
        """
        if not (name or email or phone or social_url):
            raise MatchParameterError(
                "At least one search parameter (name, email, phone, or social_url) is required"
            )

        if email:
            try:
                found = await self.client.search_contact_by_email(email)
                if found:
                    return [
                        ContactMatch(
                            contact=contact,
                            confidence=100,
                            match_reason="Exact email match via search API",
                        )
                        for contact in found
                    ]
            except DexAPIError as e:
                logger.warning(f"Email search failed, falling back to full contact list: {e}")

        await self._get_contacts()
        return self.matcher.find_matches(
            name=name,
            email=email,
            phone=phone,
            social_url=social_url,
            company=company,
        )

    async def get_contact_details(self, contact_id: str) -> DexContact:
        """Get the complete record of one contact."""
        return await self.client.get_contact(contact_id)

    async def search_full_text(
        self,
        query: str,
        max_results: int = 10,
        min_confidence: int = 50,
        document_types: Optional[list[str]] = None,
    ) -> list[SearchResult]:
        """Search names, job titles, emails, phones, notes and reminders."""
        if self.search_index.is_stale:
            logger.info("Refreshing full-text search index")
            await self.search_index.refresh_index(self.client)
            stats = self.search_index.get_memory_stats()
            logger.info(
                f"Indexed {stats.document_count} documents for {stats.contact_count} contacts"
            )
        return self.search_index.search(
            query,
            max_results=max_results,
            min_confidence=min_confidence,
            document_types=document_types,
        )

    def get_search_stats(self) -> MemoryStats:
        return self.search_index.get_memory_stats()

    def invalidate_cache(self):
        """Drop cached contacts and mark the search index stale."""
        self._contacts_cache = None
        self._cache_timestamp = 0.0
        self.search_index.invalidate()

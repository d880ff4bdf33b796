"""
In-memory full-text search across contacts, notes and reminders.

The index loads everything from Dex, turns it into searchable documents,
and answers fuzzy queries with results aggregated per contact. It is
rebuilt at most once per TTL period.
"""

import time
from typing import Callable, Iterable, Optional

from dex_mcp.dex.client import fetch_all_contacts
from dex_mcp.models.contact import DexContact
from dex_mcp.models.search import (
    DocumentType,
    MatchContext,
    MemoryStats,
    SearchableDocument,
    SearchResult,
)
from dex_mcp.services.document_extractor import (
    extract_contact_documents,
    extract_note_documents,
    extract_reminder_documents,
)
from dex_mcp.services.fuzzy_index import FuzzyIndex, FuzzyKey
from dex_mcp.services.matching import round_half_up

SNIPPET_RADIUS = 60
SNIPPET_PREVIEW_LENGTH = 150
MULTI_MATCH_BONUS = 2
MAX_MULTI_MATCH_BONUS = 10

# Rough per-record sizes used for memory estimates
AVG_DOCUMENT_BYTES = 200
AVG_CONTACT_BYTES = 1000

DOCUMENT_KEYS = [FuzzyKey("searchable_text", lambda d: d.searchable_text, weight=1)]


def build_snippet(text: str, span: Optional[tuple[int, int]]) -> str:
    """
    Build a short excerpt of text around a match.

    Args:
        text: Full document text
        span: Half-open (start, end) offsets of the match, or None

    Returns:
        Up to 60 characters of context on each side of the match with the
        matched text wrapped in **, and "..." where the text was cut. With
        no span, the first 150 characters.
    """
    if span is None:
        preview = text[:SNIPPET_PREVIEW_LENGTH]
        return preview + ("..." if len(text) > SNIPPET_PREVIEW_LENGTH else "")

    start, end = span
    snippet_start = max(0, start - SNIPPET_RADIUS)
    snippet_end = min(len(text), end + SNIPPET_RADIUS)

    snippet = (
        text[snippet_start:start]
        + f"**{text[start:end]}**"
        + text[end:snippet_end]
    )

    if snippet_start > 0:
        snippet = "..." + snippet
    if snippet_end < len(text):
        snippet = snippet + "..."
    return snippet


class FullTextSearchIndex:
    """
    Fuzzy search index over all Dex data.

    State (documents, contacts and the fuzzy index) is replaced as a whole
    on refresh, so searches never observe a half-built index.
    """

    def __init__(
        self,
        cache_ttl_minutes: float = 30,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Initialize an empty index.

        Args:
            cache_ttl_minutes: Minutes a refresh stays valid
            clock: Monotonic time source in seconds (injectable for tests)
        """
        self.cache_ttl_seconds = cache_ttl_minutes * 60
        self._clock = clock

        self.documents: list[SearchableDocument] = []
        self.contacts: dict[str, DexContact] = {}
        self._index: Optional[FuzzyIndex[SearchableDocument]] = None
        self.last_refresh: Optional[float] = None

    @property
    def is_stale(self) -> bool:
        """True if the index was never built or its TTL has elapsed."""
        if self.last_refresh is None:
            return True
        return self._clock() - self.last_refresh >= self.cache_ttl_seconds

    def invalidate(self):
        """Force the next refresh_index() call to rebuild."""
        self.last_refresh = None

    async def refresh_index(self, client) -> None:
        """
        Reload all data from Dex and rebuild the index if the TTL elapsed.

        Args:
            client: DexClient (or compatible) providing list_contacts,
                get_notes and get_reminders

        Raises:
            DexAPIError: If any fetch fails. The previous index is kept.
        """
        if not self.is_stale:
            return

        now = self._clock()

        # Step 1: Load all data
        contacts = await fetch_all_contacts(client)
        notes = await client.get_notes()
        reminders = await client.get_reminders()

        # Step 2: Extract documents
        documents: list[SearchableDocument] = []
        contacts_map: dict[str, DexContact] = {}
        for contact in contacts:
            contacts_map[contact.id] = contact
            documents.extend(extract_contact_documents(contact))
        for note in notes:
            documents.extend(extract_note_documents(note))
        for reminder in reminders:
            documents.extend(extract_reminder_documents(reminder))

        # Step 3: Build the fuzzy index and swap state in one step
        index = FuzzyIndex(documents, DOCUMENT_KEYS)
        self.documents, self.contacts, self._index, self.last_refresh = (
            documents, contacts_map, index, now
        )

    def search(
        self,
        query: str,
        max_results: int = 10,
        min_confidence: int = 50,
        document_types: Optional[Iterable[DocumentType]] = None,
    ) -> list[SearchResult]:
        """
        Search the index.

        Args:
            query: Free text to look for
            max_results: Maximum number of contacts to return
            min_confidence: Minimum per-document confidence (0-100)
            document_types: Restrict to these document types

        Returns:
            Contacts ranked by aggregated confidence: the best document
            confidence plus 2 per matching document (bonus capped at 10),
            capped at 100.
        """
        if self._index is None:
            return []

        allowed = set(document_types) if document_types else None
        contacts = self.contacts
        buckets: dict[str, list[tuple[int, MatchContext]]] = {}

        for hit in self._index.search(query):
            doc = hit.item
            if allowed is not None and doc.document_type not in allowed:
                continue
            if doc.contact_id not in contacts:
                continue

            confidence = round_half_up((1 - hit.score) * 100)
            if confidence < min_confidence:
                continue

            context = MatchContext(
                document_type=doc.document_type,
                field=doc.metadata.field or doc.document_type,
                snippet=build_snippet(doc.searchable_text, hit.span),
                full_content=doc.metadata.raw_content,
            )
            buckets.setdefault(doc.contact_id, []).append((confidence, context))

        results = []
        for contact_id, matches in buckets.items():
            highest = max(confidence for confidence, _ in matches)
            bonus = min(len(matches) * MULTI_MATCH_BONUS, MAX_MULTI_MATCH_BONUS)
            results.append(SearchResult(
                contact=contacts[contact_id],
                confidence=min(100, highest + bonus),
                match_context=[context for _, context in matches],
            ))

        results.sort(key=lambda r: r.confidence, reverse=True)
        return results[:max_results]

    def get_memory_stats(self) -> MemoryStats:
        """Estimate the index's memory footprint."""
        document_count = len(self.documents)
        contact_count = len(self.contacts)
        estimated_bytes = document_count * AVG_DOCUMENT_BYTES + contact_count * AVG_CONTACT_BYTES
        return MemoryStats(
            document_count=document_count,
            contact_count=contact_count,
            estimated_size_mb=estimated_bytes / (1024 * 1024),
        )

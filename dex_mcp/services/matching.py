"""
Contact matching on identifying information.

Exact identifiers (email, phone, social profile) win outright. Only when
none of them matches does the matcher fall back to fuzzy name matching,
optionally boosted by a company name compared against the job title.
"""

from decimal import Decimal, ROUND_HALF_UP
from typing import Optional

from dex_mcp.models.contact import ContactMatch, DexContact
from dex_mcp.services.fuzzy_index import FuzzyIndex, FuzzyKey
from dex_mcp.services.normalization import (
    normalize_email,
    normalize_phone,
    normalize_social_url,
)

MIN_NAME_CONFIDENCE = 60
MAX_MATCHES = 5
COMPANY_SIMILARITY_THRESHOLD = 0.8
COMPANY_BOOST = 15

NAME_KEYS = [
    FuzzyKey("full_name", lambda c: c.full_name, weight=2),
    FuzzyKey("first_name", lambda c: c.first_name, weight=1),
    FuzzyKey("last_name", lambda c: c.last_name, weight=1),
]


class MatchParameterError(ValueError):
    """Raised when no identifying search parameter was given."""


def round_half_up(value: float) -> int:
    """Round to the nearest integer with .5 going up."""
    return int(Decimal(str(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def word_similarity(first: str, second: str) -> float:
    """Jaccard similarity of the whitespace-separated words of two strings."""
    words1 = set(first.split())
    words2 = set(second.split())
    union = words1 | words2
    if not union:
        return 0.0
    return len(words1 & words2) / len(union)


class ContactMatcher:
    """Ranks contacts against partial identifying information."""

    def __init__(self):
        self.contacts: list[DexContact] = []
        self._name_index: FuzzyIndex[DexContact] = FuzzyIndex([], NAME_KEYS)

    def set_contacts(self, contacts: list[DexContact]):
        """Replace the contact set and rebuild the name index."""
        self.contacts = list(contacts)
        self._name_index = FuzzyIndex(self.contacts, NAME_KEYS)

    def find_matches(
        self,
        name: Optional[str] = None,
        email: Optional[str] = None,
        phone: Optional[str] = None,
        social_url: Optional[str] = None,
        company: Optional[str] = None,
    ) -> list[ContactMatch]:
        """
        Find contacts matching the given parameters.

        Args:
            name: Full or partial name, typos allowed
            email: Email address, compared case-insensitively
            phone: Phone number in any format
            social_url: Social profile URL or handle
            company: Company name used to boost name matches

        Returns:
            Exact identifier matches (deduplicated, confidence 100) if there
            are any, otherwise up to 5 fuzzy name matches sorted by
            confidence descending.

        Raises:
            MatchParameterError: If name, email, phone and social_url are all empty.
        """
        if not (name or email or phone or social_url):
            raise MatchParameterError(
                "At least one search parameter (name, email, phone, or social_url) is required"
            )

        matches: list[ContactMatch] = []

        # Priority 1: exact matches on identifiers
        if email:
            matches.extend(self._find_by_email(email))
        if phone:
            matches.extend(self._find_by_phone(phone))
        if social_url:
            matches.extend(self._find_by_social_url(social_url))

        if matches:
            return self._deduplicate(matches)

        # Priority 2: fuzzy name matching
        if name:
            matches.extend(self._find_by_name(name, company))

        matches.sort(key=lambda m: m.confidence, reverse=True)
        return matches[:MAX_MATCHES]

    def _find_by_email(self, email: str) -> list[ContactMatch]:
        target = normalize_email(email)
        return [
            ContactMatch(contact=contact, confidence=100, match_reason="Exact email match")
            for contact in self.contacts
            if any(e.email and normalize_email(e.email) == target for e in contact.emails)
        ]

    def _find_by_phone(self, phone: str) -> list[ContactMatch]:
        target = normalize_phone(phone)
        return [
            ContactMatch(contact=contact, confidence=100, match_reason="Exact phone match")
            for contact in self.contacts
            if any(
                p.phone_number and normalize_phone(p.phone_number) == target
                for p in contact.phones
            )
        ]

    def _find_by_social_url(self, url: str) -> list[ContactMatch]:
        target = normalize_social_url(url)
        return [
            ContactMatch(contact=contact, confidence=100, match_reason="Exact social profile match")
            for contact in self.contacts
            if any(normalize_social_url(value) == target for value in contact.social_values())
        ]

    def _find_by_name(self, name: str, company: Optional[str]) -> list[ContactMatch]:
        matches = []

        for hit in self._name_index.search(name):
            contact = hit.item
            confidence = max(0.0, (1 - hit.score) * 100)
            match_reason = "Name fuzzy match"

            # Boost confidence if company also matches the job title
            if company and contact.job_title:
                similarity = word_similarity(company.lower(), contact.job_title.lower())
                if similarity > COMPANY_SIMILARITY_THRESHOLD:
                    confidence = min(100.0, confidence + COMPANY_BOOST)
                    match_reason = "Name and company match"

            if confidence >= MIN_NAME_CONFIDENCE:
                matches.append(ContactMatch(
                    contact=contact,
                    confidence=round_half_up(confidence),
                    match_reason=match_reason,
                ))

        return matches

    @staticmethod
    def _deduplicate(matches: list[ContactMatch]) -> list[ContactMatch]:
        seen: set[str] = set()
        deduplicated = []
        for match in matches:
            if match.contact.id not in seen:
                seen.add(match.contact.id)
                deduplicated.append(match)
        return deduplicated

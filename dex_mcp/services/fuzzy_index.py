"""
Approximate string search over a list of items.

Each item exposes one or more text keys with a weight. A query is aligned
against every key with rapidfuzz; keys whose distance stays within the
threshold contribute to the item's weighted score. Scores are distances:
0.0 is a perfect match and 1.0 matches nothing.
"""

import math
from dataclasses import dataclass
from typing import Any, Callable, Generic, Optional, TypeVar
from rapidfuzz import fuzz

T = TypeVar("T")

DEFAULT_THRESHOLD = 0.4
DEFAULT_MIN_MATCH_LENGTH = 2


@dataclass(frozen=True)
class FuzzyKey:
    """A named, weighted text field of an indexed item."""

    name: str
    getter: Callable[[Any], Optional[str]]
    weight: float = 1.0


@dataclass(frozen=True)
class FuzzyHit(Generic[T]):
    """A matched item with its distance and best match location."""

    item: T
    score: float
    key: str
    span: Optional[tuple[int, int]]


def _fold_case(text: str) -> str:
    # Lowercase without changing string length so offsets stay valid
    return "".join(ch if len(ch.lower()) != 1 else ch.lower() for ch in text)


class FuzzyIndex(Generic[T]):
    """
    Fuzzy full-text index with weighted keys.

    Matching ignores case and position: a query matches anywhere inside a
    key's text. There is no exact-match shortcut, so an exact hit scores
    0.0 through the same scoring path as any other hit.
    """

    def __init__(
        self,
        items: list[T],
        keys: list[FuzzyKey],
        threshold: float = DEFAULT_THRESHOLD,
        min_match_length: int = DEFAULT_MIN_MATCH_LENGTH,
    ):
        if not keys:
            raise ValueError("At least one key is required")

        self.items = list(items)
        self.keys = keys
        self.threshold = threshold
        self.min_match_length = min_match_length

        # Pre-fold key texts once per item
        self._texts: list[list[Optional[str]]] = []
        for item in self.items:
            row = []
            for key in keys:
                value = key.getter(item)
                row.append(_fold_case(value) if value else None)
            self._texts.append(row)

    def __len__(self) -> int:
        return len(self.items)

    def _score_key(self, query: str, text: str) -> Optional[tuple[float, tuple[int, int]]]:
        """Return (distance, span) for one key, or None if it does not match."""
        cutoff = (1.0 - self.threshold) * 100

        if len(query) < len(text):
            alignment = fuzz.partial_ratio_alignment(query, text, score_cutoff=cutoff)
            if alignment is None or alignment.score < cutoff:
                return None
            span = (alignment.dest_start, alignment.dest_end)
            # Edge windows can align a few characters of a long query
            min_span = max(self.min_match_length, math.ceil(len(query) * (1.0 - self.threshold)))
            if span[1] - span[0] < min_span:
                return None
            return 1.0 - alignment.score / 100, span

        # Query at least as long as the text: compare whole strings
        similarity = fuzz.ratio(query, text)
        if similarity < cutoff:
            return None
        return 1.0 - similarity / 100, (0, len(text))

    def search(self, query: str) -> list[FuzzyHit[T]]:
        """
        Search all items.

        Args:
            query: Free text to look for

        Returns:
            Hits ordered by score ascending (best first). Items with equal
            scores keep their insertion order.
        """
        folded = _fold_case(query.strip())
        if len(folded) < self.min_match_length:
            return []

        hits: list[FuzzyHit[T]] = []
        for item, texts in zip(self.items, self._texts):
            weighted_total = 0.0
            weight_sum = 0.0
            best: Optional[tuple[float, str, tuple[int, int]]] = None

            for key, text in zip(self.keys, texts):
                if not text:
                    continue
                scored = self._score_key(folded, text)
                if scored is None:
                    continue
                distance, span = scored
                weighted_total += distance * key.weight
                weight_sum += key.weight
                if best is None or distance < best[0]:
                    best = (distance, key.name, span)

            if best is None:
                continue

            score = weighted_total / weight_sum
            hits.append(FuzzyHit(item=item, score=score, key=best[1], span=best[2]))

        # sorted() is stable, so ties keep insertion order
        return sorted(hits, key=lambda hit: hit.score)

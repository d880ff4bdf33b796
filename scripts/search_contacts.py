"""
Run a full-text search against live Dex data from the command line.

Usage:
    python scripts/search_contacts.py "recruiter screen interview"
    python scripts/search_contacts.py "Anthropic" --min-confidence 30 --type note
"""

import argparse
import asyncio
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from dex_mcp.config.settings import get_settings
from dex_mcp.dex.client import DexClient
from dex_mcp.services.search_index import FullTextSearchIndex


def print_results(results):
    for index, result in enumerate(results, start=1):
        contact = result.contact
        email = contact.emails[0].email if contact.emails else "N/A"
        print(f"{index}. {contact.full_name} ({result.confidence}% confidence)")
        print(f"   Job: {contact.job_title or 'N/A'}")
        print(f"   Email: {email}")
        print("   Matches found in:")
        for match in result.match_context:
            print(f"     - {match.document_type} [{match.field}]:")
            print(f"       \"{match.snippet}\"")
        print()


async def main():
    parser = argparse.ArgumentParser(description="Full-text search over Dex contacts")
    parser.add_argument("query", help="Text to search for")
    parser.add_argument("--max-results", type=int, default=10)
    parser.add_argument("--min-confidence", type=int, default=50)
    parser.add_argument(
        "--type",
        dest="document_types",
        action="append",
        choices=["contact", "note", "reminder"],
        help="Restrict to a document type (repeatable)",
    )
    args = parser.parse_args()

    settings = get_settings()
    search_index = FullTextSearchIndex(settings.dex_search_cache_ttl_minutes)

    async with DexClient() as client:
        print("Loading and indexing all contact data...")
        await search_index.refresh_index(client)

    stats = search_index.get_memory_stats()
    print(
        f"Indexed {stats.contact_count} contacts, {stats.document_count} documents "
        f"(~{stats.estimated_size_mb:.2f} MB)\n"
    )

    print(f"Searching for: \"{args.query}\"\n")
    results = search_index.search(
        args.query,
        max_results=args.max_results,
        min_confidence=args.min_confidence,
        document_types=args.document_types,
    )
    print(f"Found {len(results)} results:\n")

    if results:
        print_results(results)
        return

    # Try the individual words to show which parts of the query match
    words = [w for w in args.query.split() if len(w) > 2]
    if len(words) > 1:
        print("No results found. Trying individual words...\n")
        for word in words:
            word_results = search_index.search(
                word, max_results=3, min_confidence=args.min_confidence
            )
            names = ", ".join(f"{r.contact.full_name} ({r.confidence}%)" for r in word_results)
            print(f"\"{word}\": {len(word_results)} results {names}")


if __name__ == "__main__":
    asyncio.run(main())

"""
Quick script to check Dex API connectivity and count contacts.

This helps verify that DEX_API_KEY and DEX_API_BASE_URL are set correctly.
"""

import asyncio
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from dex_mcp.config.settings import get_settings
from dex_mcp.dex.client import DexAPIError, DexClient, fetch_all_contacts


async def main():
    """Check Dex connectivity and count records."""
    print("=" * 70)
    print("Dex Connectivity Check")
    print("=" * 70)

    settings = get_settings()
    print(f"\nAPI URL: {settings.dex_api_base_url}")
    print(f"API key: {settings.masked_api_key()}")

    try:
        client = DexClient()
    except ValueError as e:
        print(f"   [FAIL] {e}")
        return

    async with client:
        # Check connection
        print("\n1. Checking Dex connection...")
        if await client.check_connection():
            print("   [PASS] Dex API is reachable and the key is accepted")
        else:
            print("   [FAIL] Dex API is not responding or rejected the key")
            return

        # Count records
        print("\n2. Counting records...")
        try:
            contacts = await fetch_all_contacts(client)
            notes = await client.get_notes()
            reminders = await client.get_reminders()
        except DexAPIError as e:
            print(f"   [FAIL] Error loading records: {e}")
            return

        print(f"   Contacts:  {len(contacts)}")
        print(f"   Notes:     {len(notes)}")
        print(f"   Reminders: {len(reminders)}")

    print("\n" + "=" * 70)


if __name__ == "__main__":
    asyncio.run(main())

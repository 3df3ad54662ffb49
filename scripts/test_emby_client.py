#!/usr/bin/env python3
"""Manual test script for EmbyClient.

This script exercises the EmbyClient against a real Emby server.
Set EMBY_SERVER_URL plus either EMBY_API_KEY or EMBY_USERNAME/EMBY_PASSWORD
before running.

Usage:
    export EMBY_SERVER_URL="http://media.local:8096"
    export EMBY_USERNAME="your_username"
    export EMBY_PASSWORD="your_password"
    python scripts/test_emby_client.py
"""

import sys
from pathlib import Path

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from src.emby import EmbyClient, EmbyConfig, ItemsQuery
from src.emby.exceptions import EmbyError
from src.emby.logger import setup_logging


def main():
    """Run manual checks against an Emby server."""
    setup_logging()

    try:
        config = EmbyConfig.from_environment()
    except EmbyError as e:
        print(f"ERROR: {e}")
        return 1

    print(f"Testing Emby client with server: {config.server_url}")
    print("=" * 70)

    with EmbyClient(config) as client:
        print(f"\nEndpoint: {client.session.endpoint}")

        # Test 1: Connectivity
        print("\n1. Testing connectivity...")
        if not client.check_connectivity():
            print("   ✗ Server not reachable")
            return 1
        print("   ✓ Server reachable")

        # Test 2: Item listing (logs in if needed)
        print("\n2. Testing get_items (first 10 movies)...")
        try:
            result = client.get_items(
                ItemsQuery(include_item_types="Movie", recursive=True, limit=10)
            )
        except EmbyError as e:
            print(f"   ✗ get_items failed: {e}")
            return 1
        print(f"   ✓ Retrieved {len(result.items)} of {result.total_record_count} movies")

        if not result.items:
            return 0

        # Test 3: Item detail and derived URLs
        item_id = result.items[0]["Id"]
        print(f"\n3. Testing get_item ({item_id})...")
        try:
            item = client.get_item(item_id)
        except EmbyError as e:
            print(f"   ✗ get_item failed: {e}")
            return 1
        print(f"   ✓ {item.get('Name')}")
        print(f"   - Image:  {client.get_image_url(item_id, max_width=300)}")
        print(f"   - Stream: {client.get_stream_url(item_id)}")
        print(f"   - HLS:    {client.get_stream_url(item_id, direct=False)}")
        for subtitle in client.get_subtitles(item):
            print(f"   - Subtitle [{subtitle.label}]: {subtitle.url}")

    print("\n" + "=" * 70)
    print("All checks passed")
    return 0


if __name__ == "__main__":
    sys.exit(main())

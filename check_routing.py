#!/usr/bin/env python3
"""Script to verify routing provider connectivity and the geometry cache file."""

import asyncio
import sys
from pathlib import Path

# Add src to path
project_root = Path(__file__).parent
sys.path.insert(0, str(project_root / "src"))

from pdptw.config import settings
from pdptw.persistence.filesystem import JsonFileStore
from pdptw.services.geometry import GeometryCache, OSRMClient
from pdptw.services.geometry.osrm_client import check_health


async def main() -> int:
    print("=" * 60)
    print("Routing Provider Check")
    print("=" * 60)
    print()

    print("1. Checking configuration...")
    print(f"   [OK] OSRM Base URL: {settings.osrm_base_url}")
    print(f"   [OK] Profile: {settings.routing_profile}")
    print(f"   [OK] Cache file: {settings.cache_file}")
    print()

    print("2. Testing OSRM health check...")
    if not await check_health():
        print("   [ERROR] OSRM service is not responding")
        return 1
    print("   [OK] OSRM service is healthy and accessible!")
    print()

    print("3. Testing OSRM route request...")
    try:
        client = OSRMClient()
        # Two points in Berlin
        route = await client.route([(52.517037, 13.388860), (52.496891, 13.385983)])
        print(f"   [OK] Received {len(route.coordinates)} geometry points")
        print(f"   [OK] Distance: {route.distance_m:.0f} meters, duration: {route.duration_s:.0f} seconds")
    except Exception as e:
        print(f"   [ERROR] Error during route request: {e}")
        return 1
    print()

    print("4. Reading geometry cache...")
    cache = GeometryCache(JsonFileStore())
    entries = cache.load()
    stats = cache.stats()
    print(f"   [OK] {entries} cached routes ({stats.size_kb} KB)")
    print()

    print("=" * 60)
    print("[SUCCESS] Routing provider is connected and working!")
    print("=" * 60)
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))

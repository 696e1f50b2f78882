#!/usr/bin/env python3
"""
Catalog Refresh Script

Discards the cached catalog, downloads it again from the
Hilfsmittelverzeichnis and prints record counts per product group.

Usage:
    python3 scripts/refresh_catalog.py [--tree] [--verbose]

Environment (or .env):
    HILFSMITTEL_API_BASE   Upstream or relay base URL
    HILFSMITTEL_CACHE_DIR  Cache directory (default ~/.cache/hilfsmittel)

Exit codes:
    0 = catalog refreshed
    1 = upstream unavailable
"""

import argparse
import asyncio
import logging
import os
import sys
from collections import Counter

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from dotenv import load_dotenv

from hilfsmittel.catalog import (
    DEFAULT_API_BASE,
    DEFAULT_CACHE_DIR,
    CategoryRegistry,
    UpstreamUnavailableError,
    create_catalog_client,
)
from hilfsmittel.common import german_sort_key, load_search_settings, setup_logging

logger = logging.getLogger(__name__)


async def refresh(client, with_tree: bool) -> None:
    await client.catalog_cache.invalidate()
    snapshot = await client.fetch_catalog()

    registry = CategoryRegistry()
    counts = Counter(record.group_code for record in snapshot.records)

    print(f"\nFetched {len(snapshot.records)} records ({snapshot.source})\n")
    for code in sorted(counts, key=german_sort_key):
        print(f"  {code:<8} {counts[code]:>7}  {registry.name_for(code)}")

    if with_tree:
        client.metadata_cache.invalidate()
        index = await client.fetch_category_tree()
        print(f"\nCategory index: {len(index)} codes")


def main():
    load_dotenv()

    parser = argparse.ArgumentParser(
        description="Re-download the Hilfsmittelverzeichnis catalog into the local cache"
    )
    parser.add_argument(
        "--api-base",
        default=os.getenv("HILFSMITTEL_API_BASE", DEFAULT_API_BASE),
        help="Upstream or relay base URL",
    )
    parser.add_argument(
        "--cache-dir",
        default=os.getenv("HILFSMITTEL_CACHE_DIR", DEFAULT_CACHE_DIR),
        help="Cache directory",
    )
    parser.add_argument(
        "--tree",
        action="store_true",
        help="Also rebuild the category index",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug output")
    parser.add_argument("-q", "--quiet", action="store_true", help="Warnings only")

    args = parser.parse_args()
    setup_logging(verbose=args.verbose, quiet=args.quiet)

    client = create_catalog_client(args.api_base, args.cache_dir, load_search_settings())
    try:
        asyncio.run(refresh(client, args.tree))
    except UpstreamUnavailableError as e:
        logger.error("%s", e)
        sys.exit(1)
    finally:
        client.transport.close()


if __name__ == "__main__":
    main()

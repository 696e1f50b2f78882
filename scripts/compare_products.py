#!/usr/bin/env python3
"""
Product Comparison Script

Looks up 2-3 catalog products, fetches their technical attributes and
prints a side-by-side comparison table.

Usage:
    python3 scripts/compare_products.py 10.46.04.0002 10.46.04.0003 [--json]

Products are matched by catalog id or by full product code.

Exit codes:
    0 = table printed
    1 = upstream unavailable or unknown product
"""

import argparse
import asyncio
import json
import logging
import os
import sys

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from dotenv import load_dotenv

from hilfsmittel.catalog import (
    DEFAULT_API_BASE,
    DEFAULT_CACHE_DIR,
    UpstreamUnavailableError,
    create_catalog_client,
)
from hilfsmittel.common import load_search_settings, setup_logging
from hilfsmittel.comparison import FieldDiscoveryEngine
from hilfsmittel.search import simplified_name

logger = logging.getLogger(__name__)


async def load_items(client, product_refs):
    snapshot = await client.fetch_catalog()
    by_ref = {}
    for record in snapshot.records:
        by_ref.setdefault(record.id, record)
        by_ref.setdefault(record.code, record)

    missing = [ref for ref in product_refs if ref not in by_ref]
    if missing:
        raise KeyError(", ".join(missing))

    return await client.enrich_with_details([by_ref[ref] for ref in product_refs])


def print_table(table, items) -> None:
    width = 28
    header = " " * 34 + "".join(f"{simplified_name(item.name)[:width - 2]:<{width}}" for item in items)
    print(f"\nComparison ({table.category})\n")
    print(header)
    print("-" * len(header))
    for field in table.fields:
        values = table.column(field.key)
        print(f"{field.icon} {field.label[:30]:<31}" + "".join(f"{v[:width - 2]:<{width}}" for v in values))


def main():
    load_dotenv()

    parser = argparse.ArgumentParser(description="Compare Hilfsmittelverzeichnis products side by side")
    parser.add_argument("products", nargs="+", help="Product ids or codes (2-3)")
    parser.add_argument("--json", action="store_true", help="Print the table as JSON")
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
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug output")
    parser.add_argument("-q", "--quiet", action="store_true", help="Warnings only")

    args = parser.parse_args()
    setup_logging(verbose=args.verbose, quiet=args.quiet)

    if not 2 <= len(args.products) <= 3:
        parser.error("compare 2 or 3 products")

    client = create_catalog_client(args.api_base, args.cache_dir, load_search_settings())
    try:
        items = asyncio.run(load_items(client, args.products))
    except UpstreamUnavailableError as e:
        logger.error("%s", e)
        sys.exit(1)
    except KeyError as e:
        logger.error("Unknown product: %s", e.args[0])
        sys.exit(1)
    finally:
        client.transport.close()

    table = FieldDiscoveryEngine.build_comparison(items)

    if args.json:
        print(json.dumps({
            "category": table.category,
            "fields": [{"key": f.key, "label": f.label} for f in table.fields],
            "rows": table.rows,
        }, ensure_ascii=False, indent=2))
    else:
        print_table(table, items)


if __name__ == "__main__":
    main()

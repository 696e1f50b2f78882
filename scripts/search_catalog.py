#!/usr/bin/env python3
"""
Catalog Search Script

Turns a questionnaire answers file into search criteria and prints one
page of results with category and feature facets.

Usage:
    python3 scripts/search_catalog.py answers.json \\
        [--page 2] [--page-size 20] \\
        [--category 10.46] [--feature foldable --feature brakes]

answers.json maps question ids to the selected option value(s):
    {"_selectedCategory": "mobility",
     "mobility_ability": "limited_walking",
     "mobility_features": ["foldable", "brakes"]}

Exit codes:
    0 = results found
    1 = upstream unavailable
    2 = no results (broaden the answers)
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
from hilfsmittel.criteria import CriteriaBuilder
from hilfsmittel.search import SearchEngine, decode_product, explain

logger = logging.getLogger(__name__)


def print_result(criteria, result) -> None:
    print("\n" + "=" * 80)
    print(f"Product groups: {', '.join(criteria.product_groups) or '-'}")
    print(f"Filters:        {json.dumps(criteria.to_dict()['filters'], ensure_ascii=False)}")
    print("=" * 80)

    print(f"\n{result.total} results, page {result.page}/{result.total_pages}\n")
    for record in result.products:
        print(f"  {record.code:<16} {record.name[:50]:<50} {explain(decode_product(record))}")

    if result.category_facets:
        print("\nCategories:")
        for facet in result.category_facets:
            print(f"  {facet.code:<8} {facet.count:>5}  {facet.label}")

    if result.feature_facets:
        print("\nFeatures:")
        for code, count in result.feature_facets.items():
            print(f"  {code:<12} {count:>5}")


def main():
    load_dotenv()

    parser = argparse.ArgumentParser(description="Search the Hilfsmittelverzeichnis from questionnaire answers")
    parser.add_argument("answers", help="JSON file with questionnaire answers")
    parser.add_argument("--page", type=int, default=1, help="Page number")
    parser.add_argument("--page-size", type=int, help="Results per page")
    parser.add_argument("--category", help="Drill down to a category prefix")
    parser.add_argument(
        "--feature",
        action="append",
        default=[],
        help="Feature filter code (repeatable, all must match)",
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
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug output")
    parser.add_argument("-q", "--quiet", action="store_true", help="Warnings only")

    args = parser.parse_args()
    setup_logging(verbose=args.verbose, quiet=args.quiet)

    with open(args.answers, "r", encoding="utf-8") as f:
        answers = json.load(f)

    criteria = CriteriaBuilder().build(answers)
    settings = load_search_settings()
    client = create_catalog_client(args.api_base, args.cache_dir, settings)
    engine = SearchEngine(client, settings=settings)

    try:
        result = asyncio.run(engine.search(
            criteria,
            page=args.page,
            page_size=args.page_size,
            selected_category=args.category,
            selected_features=args.feature,
        ))
    except UpstreamUnavailableError as e:
        logger.error("%s", e)
        sys.exit(1)
    finally:
        client.transport.close()

    print_result(criteria, result)
    if result.is_empty:
        print("\nKeine Treffer. Bitte Antworten erweitern.")
        sys.exit(2)


if __name__ == "__main__":
    main()

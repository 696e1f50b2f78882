"""
Search Engine

Runs a SearchCriteria against the cached catalog:
1. Resolve category prefixes (productGroups + filter-derived prefixes)
2. Fetch the catalog (cache-first)
3. Keep records under any prefix
4. Pre-rank oversized sets by relevance (top relevance_cap)
5. Drill down to a selected category
6. Apply selected feature filters (AND)
7. Sort by category code
8. Count category and feature facets over the whole filtered set
9. Slice the requested page

Only step 2 can fail; everything else is pure.
"""

import logging
import math
from collections import Counter
from typing import Callable, Dict, List, Optional, Sequence

from ..common.config_loader import SearchSettings
from ..common.text_utils import german_sort_key
from ..catalog.registry import CategoryRegistry
from ..models import CategoryFacet, ProductRecord, SearchCriteria, SearchResult
from .feature_rules import FEATURE_RULES, known_feature_codes, matches_all
from .scoring import RelevanceScorer

logger = logging.getLogger(__name__)

# Filter key (or "key=value" for enumerated filters) -> extra category prefixes
FILTER_GROUP_MAPPING: Dict[str, Sequence[str]] = {
    # Mobility
    'walker_needed': ('10.46',),
    'rollator': ('10.46.04',),
    'device_type=rollator': ('10.46.04',),
    'device_type=gehstock': ('10.50.01',),
    'device_type=gehgestell': ('10.46.01',),
    'wheelchair_needed': ('18.50',),
    'fulltime': ('18.50.02',),
    'stairs': ('18.65',),
    'indoor': ('10.46', '18.50'),
    'outdoor': ('10.46.04', '18.50'),

    # Bathroom
    'shower_chair': ('04.40.04',),
    'bath_lift': ('04.40.05',),
    'toilet_seat': ('33.40',),
    'grab_bars': ('04.40.01',),

    # Hearing
    'hearing_aid': ('13.20',),
    'severity': ('13.20',),

    # Vision
    'magnifier': ('25.50',),
    'lighting': ('25.56',),
    'vision_aids': ('25.21',),
}


def resolve_product_groups(criteria: SearchCriteria) -> List[str]:
    """
    Union of criteria.product_groups and filter-derived prefixes.

    Boolean False and empty lists never contribute. Order is first-seen.
    """
    groups: List[str] = []

    def add(prefixes: Sequence[str]) -> None:
        for prefix in prefixes:
            if prefix and prefix not in groups:
                groups.append(prefix)

    add(criteria.product_groups)

    for key in criteria.filters:
        values = criteria.filter_values(key)
        if not values:
            continue
        add(FILTER_GROUP_MAPPING.get(key, ()))
        for value in values:
            if isinstance(value, str):
                add(FILTER_GROUP_MAPPING.get(f"{key}={value.lower()}", ()))

    return groups


def filter_by_prefixes(records: Sequence[ProductRecord], prefixes: Sequence[str]) -> List[ProductRecord]:
    prefixes = tuple(prefixes)
    return [record for record in records if record.code.startswith(prefixes)]


def sort_by_code(records: Sequence[ProductRecord]) -> List[ProductRecord]:
    """Stable sort by category code, German collation."""
    return sorted(records, key=lambda record: german_sort_key(record.code))


def category_facets(records: Sequence[ProductRecord], registry: CategoryRegistry) -> List[CategoryFacet]:
    """Counts per two-segment category prefix, ordered by code."""
    counts = Counter(record.group_code for record in records)
    return [
        CategoryFacet(code=code, label=registry.name_for(code), count=counts[code])
        for code in sorted(counts, key=german_sort_key)
    ]


def feature_facets(records: Sequence[ProductRecord]) -> Dict[str, int]:
    """Counts per feature code (non-zero only), in rule-table order."""
    facets: Dict[str, int] = {}
    for rule in FEATURE_RULES:
        count = sum(1 for record in records if rule.matches(record.name))
        if count:
            facets[rule.code] = count
    return facets


def paginate(records: Sequence[ProductRecord], page: int, page_size: int):
    """
    Clamp page into [1, total_pages] and return (page, total_pages, slice).
    """
    page_size = max(1, page_size)
    total_pages = max(1, math.ceil(len(records) / page_size))
    page = min(max(1, page), total_pages)
    start = (page - 1) * page_size
    return page, total_pages, list(records[start:start + page_size])


class SearchEngine:
    """
    Orchestrates catalog retrieval, filtering, ranking and faceting.

    Each search() call works on its own copies; the shared catalog
    snapshot is only read.

    Usage:
        engine = SearchEngine(client)
        result = await engine.search(criteria, page=1, page_size=20)
        result = await engine.search(criteria, selected_category='13.20',
                                     selected_features=['R', 'bluetooth'])
    """

    def __init__(
        self,
        client,
        registry: Optional[CategoryRegistry] = None,
        settings: Optional[SearchSettings] = None,
        scorer: Optional[RelevanceScorer] = None,
    ):
        """
        Initialize the engine.

        Args:
            client: CatalogClient (anything with an async fetch_catalog())
            registry: Category names for facets. If None, loads from config.
            settings: Thresholds and page size. Defaults if None.
            scorer: Relevance scorer. Built from settings if None.
        """
        self.client = client
        self.registry = registry if registry is not None else CategoryRegistry()
        self.settings = settings or SearchSettings()
        self.scorer = scorer or RelevanceScorer(self.settings)

    async def search(
        self,
        criteria: SearchCriteria,
        page: int = 1,
        page_size: Optional[int] = None,
        selected_category: Optional[str] = None,
        selected_features: Optional[Sequence[str]] = None,
        alive: Optional[Callable[[], bool]] = None,
    ) -> Optional[SearchResult]:
        """
        Run one search.

        Args:
            criteria: Criteria from CriteriaBuilder
            page: 1-based page number (clamped)
            page_size: Results per page (defaults to settings.default_page_size)
            selected_category: Drill-down category prefix
            selected_features: Feature codes that must all match
            alive: Liveness flag; a cleared flag discards the result

        Returns:
            SearchResult, or None if the caller went away meanwhile

        Raises:
            UpstreamUnavailableError: Catalog could not be fetched and no
                cached copy exists
        """
        page_size = max(1, page_size or self.settings.default_page_size)

        prefixes = resolve_product_groups(criteria)
        if not prefixes:
            logger.info("No category prefixes resolved from criteria")
            return SearchResult.empty(page_size)

        snapshot = await self.client.fetch_catalog()
        if alive is not None and not alive():
            logger.debug("Search cancelled after catalog fetch")
            return None

        matches = filter_by_prefixes(snapshot.records, prefixes)
        logger.debug("%d of %d records under %s (catalog from %s)",
                     len(matches), len(snapshot.records), ', '.join(prefixes), snapshot.source)

        if len(matches) > self.settings.relevance_threshold:
            logger.info("Pre-ranking %d records, keeping top %d",
                        len(matches), self.settings.relevance_cap)
            matches = self.scorer.rank(matches, criteria)

        if selected_category:
            matches = [record for record in matches if record.code.startswith(selected_category)]

        features = known_feature_codes(selected_features or ())
        if features:
            matches = [record for record in matches if matches_all(record.name, features)]

        matches = sort_by_code(matches)

        page, total_pages, products = paginate(matches, page, page_size)

        return SearchResult(
            products=products,
            total=len(matches),
            page=page,
            page_size=page_size,
            total_pages=total_pages,
            category_facets=category_facets(matches, self.registry),
            feature_facets=feature_facets(matches),
        )

"""
Catalog search.

Modules:
    decoder       - product name decoder (shell types, feature tokens)
    feature_rules - keyword predicates behind the feature filters
    scoring       - relevance pre-ranking for oversized categories
    engine        - SearchEngine pipeline, facets and pagination
"""

from .decoder import DecodedProduct, decode_product, explain, simplified_name
from .engine import FILTER_GROUP_MAPPING, SearchEngine, resolve_product_groups
from .feature_rules import FEATURE_RULES, FeatureRule, matches_all, matches_feature
from .scoring import RelevanceScorer

__all__ = [
    'SearchEngine',
    'RelevanceScorer',
    'resolve_product_groups',
    'FILTER_GROUP_MAPPING',
    'FEATURE_RULES',
    'FeatureRule',
    'matches_feature',
    'matches_all',
    'DecodedProduct',
    'decode_product',
    'explain',
    'simplified_name',
]

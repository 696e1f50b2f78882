"""
Data models for catalog search and comparison.

This module contains pure data classes with no business logic.
"""

from .comparison import ComparisonField, ComparisonTable, ExtractedSpec
from .product import (
    AttributeEntry,
    CacheEntry,
    CatalogSnapshot,
    CategoryFacet,
    ProductRecord,
    SearchCriteria,
    SearchResult,
)

__all__ = [
    'AttributeEntry',
    'ProductRecord',
    'SearchCriteria',
    'SearchResult',
    'CategoryFacet',
    'CacheEntry',
    'CatalogSnapshot',
    'ComparisonField',
    'ComparisonTable',
    'ExtractedSpec',
]

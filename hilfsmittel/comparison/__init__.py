"""
Product comparison.

Modules:
    terms         - term extraction, label similarity and preference
    patterns      - static label patterns and value cleaning
    static_fields - curated fields per category / subcategory
    discovery     - FieldDiscoveryEngine and value extraction
"""

from .discovery import FieldDiscoveryEngine, discover_fields, extract_fields
from .patterns import FIELD_PATTERNS, clean_value
from .static_fields import (
    COMPARISON_FIELDS,
    detect_comparison_category,
    detect_subcategory,
    merge_field_definitions,
    static_fields_for,
)
from .terms import better_label, extract_terms, labels_similar

__all__ = [
    'FieldDiscoveryEngine',
    'discover_fields',
    'extract_fields',
    'FIELD_PATTERNS',
    'clean_value',
    'COMPARISON_FIELDS',
    'detect_comparison_category',
    'detect_subcategory',
    'merge_field_definitions',
    'static_fields_for',
    'better_label',
    'extract_terms',
    'labels_similar',
]

"""
Field Discovery Engine

Builds a comparison schema from the raw technical attributes of a few
shortlisted products. Near-duplicate labels are merged into one field
(see terms.labels_similar), the best label is kept for display, and every
raw label is remembered as an alias for value extraction.

Nothing in this module raises on odd input: missing attributes, skipped
labels and empty values simply produce no field or an UNSPECIFIED value.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Sequence

from ..common.constants import UNSPECIFIED
from ..common.text_utils import normalize_key
from ..models import AttributeEntry, ComparisonField, ComparisonTable, ExtractedSpec, ProductRecord
from .patterns import clean_value, lookup_pattern, pattern_key_for_label
from .static_fields import (
    detect_comparison_category,
    detect_subcategory,
    merge_field_definitions,
    static_fields_for,
)
from .terms import better_label, icon_for, is_empty_value, is_skipped_label, labels_similar

logger = logging.getLogger(__name__)


@dataclass
class _FieldDraft:
    label: str
    aliases: List[str] = field(default_factory=list)


class FieldDiscoveryEngine:
    """
    Incremental field discovery.

    Feeding items in several calls yields the same fields as feeding them
    all at once.

    Usage:
        engine = FieldDiscoveryEngine('mobility')
        engine.add_items(first_two)
        engine.add_items([third])
        fields = engine.fields

        table = FieldDiscoveryEngine.build_comparison(items)
    """

    def __init__(self, category: str = 'general'):
        self.category = category
        self._drafts: List[_FieldDraft] = []

    def add_items(self, items: Iterable[ProductRecord]) -> None:
        for item in items:
            for attribute in item.attributes or []:
                self.add_attribute(attribute)

    def add_attribute(self, attribute: AttributeEntry) -> None:
        label = (attribute.label or "").strip()
        if is_skipped_label(label) or is_empty_value(attribute.value):
            return

        draft = self._find_similar(label)
        if draft is None:
            self._drafts.append(_FieldDraft(label=label, aliases=[label]))
            return

        if label not in draft.aliases:
            draft.aliases.append(label)
        draft.label = better_label(draft.label, label)

    def _find_similar(self, label: str) -> Optional[_FieldDraft]:
        for draft in self._drafts:
            if any(labels_similar(alias, label) for alias in draft.aliases):
                return draft
        return None

    @property
    def fields(self) -> List[ComparisonField]:
        """Discovered fields in first-seen order with unique keys."""
        fields = []
        used_keys: Dict[str, int] = {}
        for draft in self._drafts:
            base_key = pattern_key_for_label(draft.label, self.category) or normalize_key(draft.label)
            base_key = base_key or 'field'
            used_keys[base_key] = used_keys.get(base_key, 0) + 1
            key = base_key if used_keys[base_key] == 1 else f"{base_key}_{used_keys[base_key]}"
            fields.append(ComparisonField(
                key=key,
                label=draft.label,
                icon=icon_for(draft.label),
                aliases=list(draft.aliases),
            ))
        return fields

    @staticmethod
    def build_comparison(items: Sequence[ProductRecord], category: Optional[str] = None) -> ComparisonTable:
        """
        Static fields for the items' (sub)category plus discovered fields,
        and one extracted row per item.

        The first item's code decides category and subcategory.
        """
        first_code = items[0].code if items else None
        category = category or detect_comparison_category(first_code)
        static_fields = static_fields_for(category, detect_subcategory(first_code))

        fields = merge_field_definitions(static_fields, discover_fields(items, category))
        rows = [extract_fields(item, fields, category) for item in items]

        logger.debug("Comparison of %d items (%s): %d static + %d discovered fields",
                     len(items), category, len(static_fields), len(fields) - len(static_fields))
        return ComparisonTable(category=category, fields=fields, rows=rows)


def discover_fields(items: Iterable[ProductRecord], category: str = 'general') -> List[ComparisonField]:
    """One-pass discovery over all items."""
    engine = FieldDiscoveryEngine(category)
    engine.add_items(items)
    return engine.fields


def _lookup_alias(attributes: Sequence[AttributeEntry], target: ComparisonField) -> Optional[AttributeEntry]:
    names = {target.label.lower()} | {alias.lower() for alias in target.aliases}
    for attribute in attributes:
        if attribute.label.strip().lower() in names:
            return attribute

    for attribute in attributes:
        if is_skipped_label(attribute.label):
            continue
        if labels_similar(attribute.label, target.label):
            return attribute
    return None


def extract_fields(item: ProductRecord, fields: Sequence[ComparisonField], category: str = 'general') -> ExtractedSpec:
    """
    Read one item's value for every field.

    Static label patterns are tried first, then the field's own label and
    aliases (exact, then fuzzy). Fields without a matching attribute are
    UNSPECIFIED; values are never inferred.
    """
    attributes = item.attributes or []
    extracted: ExtractedSpec = {}

    for target in fields:
        attribute = lookup_pattern(attributes, target.key, category)
        if attribute is None or is_empty_value(attribute.value):
            attribute = _lookup_alias(attributes, target) or attribute
        extracted[target.key] = clean_value(attribute.value if attribute else None, target.key)

    return extracted

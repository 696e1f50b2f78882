"""
Criteria Builder

Turns questionnaire answers into a SearchCriteria:
1. Every answered question is resolved against the static question table
2. Every selected option's api_criteria is merged into one accumulator
3. productGroup entries become category-code prefixes, all other keys filters

Merge policy for filters (values are never silently overwritten):
- boolean True is set once and never downgraded; False is ignored
- arrays are unioned, keeping first-seen order
- a repeated scalar key with a different value becomes an array
"""

import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional

from ..common.config_loader import load_default_product_groups, load_question_flow
from ..models import SearchCriteria

logger = logging.getLogger(__name__)

# Answer keys starting with this marker carry metadata, not answers
METADATA_PREFIX = '_'
SELECTED_CATEGORY_KEY = '_selectedCategory'
# Selecting every questionnaire category at once
COMPREHENSIVE_CATEGORY = 'comprehensive'
PRODUCT_GROUP_KEY = 'productGroup'


class CriteriaBuilder:
    """
    Builds search criteria from questionnaire answers.

    Usage:
        builder = CriteriaBuilder()
        criteria = builder.build({
            'mobility_ability': 'limited_walking',
            'mobility_support_type': 'rollator',
        })
        # criteria.product_groups == ('10.46', '10.46.04')
        # criteria.filters['rollator'] is True
    """

    def __init__(
        self,
        question_flow: Optional[Mapping[str, List[Dict[str, Any]]]] = None,
        default_product_groups: Optional[Mapping[str, str]] = None,
    ):
        """
        Initialize the builder.

        Args:
            question_flow: Questionnaire table. If None, loads from config.
            default_product_groups: Fallback prefix per questionnaire category.
                If None, loads from config.
        """
        if question_flow is None:
            question_flow = load_question_flow()
        if default_product_groups is None:
            default_product_groups = load_default_product_groups()

        self.question_flow = question_flow
        self.default_product_groups = dict(default_product_groups)

        # Flatten for id lookup
        self._questions: Dict[str, Dict[str, Any]] = {}
        for questions in question_flow.values():
            for question in questions:
                self._questions[question['id']] = question

    def find_question(self, question_id: str) -> Optional[Dict[str, Any]]:
        return self._questions.get(question_id)

    def build(self, answers: Mapping[str, Any]) -> SearchCriteria:
        """
        Build criteria from an ordered mapping of question id -> answer.

        Args:
            answers: Answers as produced by the questionnaire. Values are a
                single option value or a list of option values.

        Returns:
            Immutable SearchCriteria
        """
        product_groups: List[str] = []
        filters: Dict[str, Any] = {}

        for question_id, answer in answers.items():
            if question_id.startswith(METADATA_PREFIX):
                continue

            question = self.find_question(question_id)
            if question is None:
                logger.debug("Ignoring answer for unknown question: %s", question_id)
                continue

            selection = answer if isinstance(answer, (list, tuple)) else [answer]
            for selected_value in selection:
                option = _find_option(question, selected_value)
                if option is None or not option.get('api_criteria'):
                    continue

                for key, value in option['api_criteria'].items():
                    if key == PRODUCT_GROUP_KEY:
                        _add_groups(product_groups, value)
                    else:
                        merge_filter_value(filters, key, value)

        if not product_groups:
            for fallback in self.fallback_groups(answers.get(SELECTED_CATEGORY_KEY)):
                logger.debug("No product groups derived; using default %s", fallback)
                _add_groups(product_groups, fallback)

        return SearchCriteria(product_groups=tuple(product_groups), filters=filters)

    def fallback_groups(self, selected: Any) -> List[str]:
        """
        Default prefixes for the top-level category selection.

        The selection may be one category, a list of categories, or
        "comprehensive" (every category). Unknown values are skipped.
        """
        if selected is None:
            return []
        categories = selected if isinstance(selected, (list, tuple)) else [selected]

        groups: List[str] = []
        for category in categories:
            if not isinstance(category, str):
                logger.debug("Ignoring category selection %r", category)
                continue
            if category == COMPREHENSIVE_CATEGORY:
                candidates = list(self.default_product_groups.values())
            else:
                candidates = [self.default_product_groups.get(category)]
            for group in candidates:
                if group and group not in groups:
                    groups.append(group)
        return groups


def _find_option(question: Mapping[str, Any], value: Any) -> Optional[Mapping[str, Any]]:
    for option in question.get('options', []):
        if option.get('value') == value:
            return option
    return None


def _add_groups(product_groups: List[str], value: Any) -> None:
    values: Iterable[Any] = value if isinstance(value, (list, tuple)) else [value]
    for group in values:
        if group and str(group) not in product_groups:
            product_groups.append(str(group))


def merge_filter_value(filters: Dict[str, Any], key: str, value: Any) -> None:
    """
    Merge one filter value into the accumulator in place.

    Example:
        >>> filters = {}
        >>> merge_filter_value(filters, 'severity', 'mild')
        >>> merge_filter_value(filters, 'severity', 'severe')
        >>> filters
        {'severity': ['mild', 'severe']}
    """
    # False never enables or downgrades anything
    if value is None or value is False:
        return

    existing = filters.get(key)

    if isinstance(value, (list, tuple)):
        if existing is None:
            merged: List[Any] = []
        elif isinstance(existing, list):
            merged = list(existing)
        else:
            merged = [existing]
        for entry in value:
            if entry not in merged:
                merged.append(entry)
        filters[key] = merged
        return

    if existing is None:
        filters[key] = value
    elif isinstance(existing, list):
        if value not in existing:
            existing.append(value)
    elif existing != value:
        filters[key] = [existing, value]

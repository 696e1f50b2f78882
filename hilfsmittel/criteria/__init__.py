"""
Questionnaire -> search criteria.

Modules:
    builder - CriteriaBuilder and the filter merge policy
"""

from .builder import CriteriaBuilder, merge_filter_value

__all__ = [
    'CriteriaBuilder',
    'merge_filter_value',
]

"""
Text Utilities

Helper functions for German text normalization, keys and sorting.
"""

import re
import unicodedata

# German special characters that NFKD decomposition does not fold sensibly
GERMAN_FOLD_MAP = {
    'ä': 'a', 'ö': 'o', 'ü': 'u', 'ß': 'ss',
    'Ä': 'A', 'Ö': 'O', 'Ü': 'U',
}


def fold_diacritics(text: str) -> str:
    """
    Fold diacritics to plain ASCII letters.

    Args:
        text: Text that may contain umlauts or accented characters

    Returns:
        Text with diacritics removed

    Example:
        >>> fold_diacritics("Höhe der Unterarmauflage")
        'Hohe der Unterarmauflage'
    """
    if not text:
        return ""
    folded = ''.join(GERMAN_FOLD_MAP.get(char, char) for char in text)
    decomposed = unicodedata.normalize('NFKD', folded)
    return ''.join(char for char in decomposed if not unicodedata.combining(char))


def normalize_key(label: str) -> str:
    """
    Build a stable snake_case key from a free-text label.

    Diacritics are folded and every run of non-alphanumeric characters
    collapses to a single underscore.

    Example:
        >>> normalize_key("Breite (gesamt, cm)")
        'breite_gesamt_cm'
        >>> normalize_key("Max. Belastbarkeit")
        'max_belastbarkeit'
    """
    key = fold_diacritics(label).lower()
    key = re.sub(r'[^a-z0-9]+', '_', key)
    return key.strip('_')


def german_sort_key(text: str) -> tuple:
    """
    Sort key approximating German collation.

    Compares case-insensitively with umlauts folded to their base letter,
    falling back to the raw string so the ordering is total and deterministic.
    """
    text = text or ""
    return (fold_diacritics(text).casefold(), text)

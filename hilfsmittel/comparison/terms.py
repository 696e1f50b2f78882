"""
Label Term Tables

Term extraction and label preference rules used to recognize
near-duplicate attribute labels ("Gesamtbreite" vs "Breite (gesamt, cm)").
Everything here is a pure function of the tables below.
"""

import re
from typing import FrozenSet, Optional

from ..common.text_utils import normalize_key

STOP_WORDS = frozenset({
    'der', 'die', 'das', 'den', 'dem', 'des', 'und', 'oder', 'mit', 'ohne',
    'von', 'bis', 'in', 'im', 'zu', 'zur', 'zum', 'bei', 'für', 'pro', 'zwischen',
    'max', 'min', 'ca', 'cm', 'kg', 'mm', 'the', 'of', 'and',
})

# Canonical term -> label substrings that emit it
CANONICAL_TERMS = {
    'kanäle': ('kanäle', 'kanal', 'channel'),
    'programme': ('programm', 'program'),
    'breite': ('breite', 'width'),
    'höhe': ('höhe', 'height'),
    'länge': ('länge', 'length'),
    'gewicht': ('gewicht', 'weight'),
    'belastbarkeit': ('belastbar', 'belastung', 'benutzergewicht', 'max. load'),
    'sitz': ('sitz', 'seat'),
    'gesamt': ('gesamt', 'total'),
    'batterie': ('batterie', 'akku', 'battery'),
    'telefonspule': ('telefonspule', 't-spule', 'telecoil'),
    'mikrofon': ('mikrofon', 'microphone'),
    'bremse': ('bremse', 'brems', 'brake'),
    'faltbar': ('faltbar', 'klappbar', 'foldable'),
    'wendekreis': ('wendekreis', 'turning'),
    'vergrößerung': ('vergrößerung', 'magnification'),
    'bluetooth': ('bluetooth',),
}

# A single shared term from this list is enough to call two labels similar
SPECIFIC_TERMS = frozenset({
    'kanäle', 'programme', 'telefonspule', 'bluetooth', 'mikrofon',
    'wendekreis', 'vergrößerung', 'bremse', 'batterie', 'belastbarkeit',
})

HEDGING_WORDS = ('ca.', 'circa', 'etwa', 'ungefähr', 'optional', 'ggf.')
STANDARD_PREFIXES = ('max.', 'min.', 'gesamt', 'anzahl', 'empf.')

# Labels that carry free text rather than a comparable property
SKIP_LABEL_WORDS = frozenset({
    'freitext', 'sonstiges', 'sonstige', 'other', 'bemerkung', 'bemerkungen', 'hinweis', 'hinweise',
})

EMPTY_VALUES = frozenset({'', '-', '--', 'k.a.', 'k. a.', 'n/a', 'keine angabe'})

# (label substrings, icon); first hit wins
ICONS = (
    (('sitz',), '💺'),
    (('griff', 'unterarm'), '📐'),
    (('belast', 'gewicht'), '⚖️'),
    (('zuladung', 'korb', 'ablage'), '🧺'),
    (('durchmesser',), '⭕'),
    (('breite',), '↔️'),
    (('höhenverstell',), '↕️'),
    (('höhe', 'länge', 'größe', 'maße'), '📏'),
    (('falt', 'klapp'), '📦'),
    (('wendekreis',), '🔄'),
    (('bereifung', 'reifen'), '🛞'),
    (('räder', 'rad'), '🔘'),
    (('brems',), '🛑'),
    (('material',), '🔩'),
    (('batterie', 'akku'), '🔋'),
    (('bluetooth', 'audio', 'bauform'), '📱'),
    (('telefon',), '📞'),
    (('kanäle', 'kanal'), '🎚️'),
    (('programm',), '⚙️'),
    (('verstärkung', 'leistung'), '🔊'),
    (('vergrößerung',), '🔍'),
    (('beleuchtung', 'licht'), '💡'),
    (('rutsch',), '🛡️'),
    (('montage', 'befestigung'), '🔧'),
)
DEFAULT_ICON = '📋'


def _tokens(label: str):
    return re.findall(r'[^\W_]+', label.lower())


def extract_terms(label: str) -> FrozenSet[str]:
    """
    Significant terms of a label: lower-cased tokens without stop words,
    plus every canonical term whose synonym occurs in the label.

    Example:
        >>> sorted(extract_terms("Breite (gesamt, cm)"))
        ['breite', 'gesamt']
    """
    lower = (label or "").lower()
    terms = {
        token for token in _tokens(lower)
        if len(token) > 1 and not token.isdigit() and token not in STOP_WORDS
    }
    for canonical, synonyms in CANONICAL_TERMS.items():
        if any(synonym in lower for synonym in synonyms):
            terms.add(canonical)
    return frozenset(terms)


def labels_similar(first: str, second: str) -> bool:
    """True if two labels name the same property."""
    if normalize_key(first) == normalize_key(second):
        return True
    shared = extract_terms(first) & extract_terms(second)
    return len(shared) >= 2 or bool(shared & SPECIFIC_TERMS)


def _has_parenthesis(label: str) -> bool:
    return '(' in label


def _has_hedging(label: str) -> bool:
    lower = label.lower()
    return any(word in lower for word in HEDGING_WORDS)


def _has_standard_prefix(label: str) -> bool:
    return label.lower().startswith(STANDARD_PREFIXES)


def better_label(current: str, candidate: str) -> str:
    """
    Pick the better of two labels for the same field.

    Preference order: no parenthetical qualifier, no hedging word, much
    shorter (< 60% length), standard prefix, shorter, first seen.
    """
    for is_bad in (_has_parenthesis, _has_hedging):
        if is_bad(current) != is_bad(candidate):
            return candidate if is_bad(current) else current

    if len(candidate) < 0.6 * len(current):
        return candidate
    if len(current) < 0.6 * len(candidate):
        return current

    if _has_standard_prefix(current) != _has_standard_prefix(candidate):
        return current if _has_standard_prefix(current) else candidate

    if len(candidate) < len(current):
        return candidate
    return current


def icon_for(label: str) -> str:
    lower = label.lower()
    for keywords, icon in ICONS:
        if any(keyword in lower for keyword in keywords):
            return icon
    return DEFAULT_ICON


def is_skipped_label(label: Optional[str]) -> bool:
    if not label or not label.strip():
        return True
    return any(token in SKIP_LABEL_WORDS for token in _tokens(label))


def is_empty_value(value: Optional[str]) -> bool:
    return value is None or value.strip().lower() in EMPTY_VALUES

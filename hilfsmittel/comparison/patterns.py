"""
Static label patterns per comparison category.

Maps comparison field keys to the konstruktionsmerkmale label fragments
known to carry them, plus value cleaning for extracted values.
"""

from typing import Dict, List, Optional, Sequence

from ..common.constants import AFFIRMATIVE, NEGATIVE, UNSPECIFIED
from ..models import AttributeEntry
from .terms import is_empty_value

FIELD_PATTERNS: Dict[str, Dict[str, List[str]]] = {
    'mobility': {
        # All mobility subcategories
        'max_weight': ['Max. Belastbarkeit', 'Maximale Belastbarkeit', 'Max. Benutzergewicht'],
        'weight': ['Eigengewicht', 'Gewicht'],
        'body_height': ['Empf. Körpergröße', 'Körpergröße'],
        'material': ['Material'],
        'foldable': ['Faltbar'],

        # Rollator
        'seat_height': ['Sitzhöhe'],
        'seat_width': ['Sitzbreite'],
        'armrest_height': ['Höhe der Unterarmauflage', 'Verstellbare Höhe der Unterarmauflage'],
        'armrest_width': ['Breite zwischen den Unterarmauflagen'],
        'total_width': ['Gesamtbreite'],
        'total_length': ['Gesamtlänge'],
        'total_height': ['Gesamthöhe'],
        'folded_dimensions': ['Faltmaße'],
        'turning_radius': ['Wendekreis'],
        'tires': ['Bereifung'],
        'basket_capacity': ['Max. Zuladung Korb'],
        'brakes': ['Bremsen', 'Bremse'],
        'wheels': ['Räder', 'Anzahl Räder'],
        'basket': ['Korb', 'Ablage'],

        # Gehstock / Unterarmgehstützen
        'handle_height': ['Handgriffhöhe', 'Griffhöhe'],
        'tube_diameter': ['Rohrdurchmesser'],
        'adjustment_levels': ['höhenverstellbar', 'Höhenverstellung'],
    },
    'hearing': {
        'power_level': ['Verstärkung', 'OSPL90'],
        'device_type': ['Bauform'],
        'battery_type': ['Batterietyp', 'Batterie'],
        'bluetooth': ['Bluetooth', 'Audioeingang'],
        'telecoil': ['Telefonspule'],
        'channels': ['Anzahl der Kanäle', 'Kanäle'],
        'programs': ['Schaltung mehrerer Programme möglich', 'Programme'],
        'microphones': ['Mikrofone'],
        'signal_processing': ['Signalverarbeitung'],
        'agc_systems': ['AGC-Regelsysteme'],
    },
    'vision': {
        'magnification': ['Vergrößerung'],
        'light': ['Beleuchtung'],
        'size': ['Größe', 'Maße'],
        'battery': ['Batterie', 'Stromversorgung'],
    },
    'bathroom': {
        'max_weight': ['Max. Belastbarkeit', 'Maximale Belastung'],
        'dimensions': ['Maße', 'Abmessungen'],
        'material': ['Material'],
        'non_slip': ['Rutschfest', 'rutschsicher'],
        'mounting': ['Montage', 'Befestigung'],
    },
}

BOOLEAN_FIELDS = frozenset({'foldable', 'bluetooth', 'telecoil', 'brakes', 'non_slip', 'basket'})

AFFIRMATIVE_VALUES = ('ja', 'yes', 'vorhanden')
NEGATIVE_VALUES = ('nein', 'no', 'nicht vorhanden')


def pattern_key_for_label(label: str, category: str) -> Optional[str]:
    """
    Static field key whose pattern occurs in the label, if any.

    Fields are tried in table order, so "Max. Benutzergewicht" resolves to
    max_weight rather than weight.
    """
    lower = label.lower()
    for key, patterns in FIELD_PATTERNS.get(category, {}).items():
        if any(pattern.lower() in lower for pattern in patterns):
            return key
    return None


def lookup_pattern(attributes: Sequence[AttributeEntry], key: str, category: str) -> Optional[AttributeEntry]:
    """
    Find the attribute carrying a static field.

    Patterns are tried in priority order, each against every attribute,
    so a specific pattern ("Eigengewicht") beats a generic one ("Gewicht")
    regardless of attribute order.

    A label claimed by an earlier field is never read for this one:
    "Max. Benutzergewicht" is max_weight, not weight, and "Vergrößerung"
    is magnification, not size.
    """
    for pattern in FIELD_PATTERNS.get(category, {}).get(key, []):
        needle = pattern.lower()
        for attribute in attributes:
            if needle not in attribute.label.lower():
                continue
            if pattern_key_for_label(attribute.label, category) == key:
                return attribute
    return None


def clean_value(value: Optional[str], key: str) -> str:
    """
    Normalize an extracted value.

    Boolean fields map ja/vorhanden -> "Ja" and nein/nicht vorhanden -> "Nein";
    longer descriptive values are kept verbatim. Empty-data sentinels
    become the UNSPECIFIED marker.

    Example:
        >>> clean_value(" vorhanden ", "brakes")
        'Ja'
        >>> clean_value("k.A.", "weight")
        'Nicht angegeben'
    """
    if is_empty_value(value):
        return UNSPECIFIED

    trimmed = value.strip()
    if key in BOOLEAN_FIELDS:
        lower = trimmed.lower()
        if lower in AFFIRMATIVE_VALUES:
            return AFFIRMATIVE
        if lower in NEGATIVE_VALUES:
            return NEGATIVE

    return trimmed

"""
Static comparison fields per category and subcategory.

Curated from the konstruktionsmerkmale actually present on walking aids,
hearing aids, vision aids and bathroom aids. Discovered fields are merged
in after these.
"""

from dataclasses import replace
from typing import Dict, List, Optional, Sequence

from ..models import ComparisonField

F = ComparisonField

COMPARISON_FIELDS: Dict[str, Dict[str, List[ComparisonField]]] = {
    'mobility': {
        # Walking sticks: no wheels, brakes or seat
        'Gehstock': [
            F('max_weight', 'Max. Benutzergewicht', '⚖️'),
            F('handle_height', 'Handgriffhöhe', '📐'),
            F('weight', 'Gewicht', '⚖️'),
            F('tube_diameter', 'Rohrdurchmesser', '⭕'),
            F('material', 'Material', '🔩'),
            F('adjustment_levels', 'Höhenverstellung', '↕️'),
            F('foldable', 'Faltbar', '📦'),
        ],
        'Unterarmgehstuetzen': [
            F('max_weight', 'Max. Benutzergewicht', '⚖️'),
            F('handle_height', 'Handgriffhöhe', '📐'),
            F('total_height', 'Gesamthöhe', '📏'),
            F('weight', 'Gewicht', '⚖️'),
            F('tube_diameter', 'Rohrdurchmesser', '⭕'),
            F('material', 'Material', '🔩'),
            F('adjustment_levels', 'Höhenverstellung', '↕️'),
            F('foldable', 'Faltbar', '📦'),
        ],
        'Rollator': [
            F('max_weight', 'Max. Belastbarkeit', '⚖️'),
            F('weight', 'Eigengewicht', '⚖️'),
            F('body_height', 'Empf. Körpergröße', '📏'),
            F('seat_width', 'Sitzbreite', '↔️'),
            F('seat_height', 'Sitzhöhe', '💺'),
            F('armrest_height', 'Höhe Unterarmauflage', '📐'),
            F('armrest_width', 'Breite zwischen Unterarmauflagen', '↔️'),
            F('total_width', 'Gesamtbreite', '↔️'),
            F('total_length', 'Gesamtlänge', '📏'),
            F('total_height', 'Gesamthöhe', '📏'),
            F('folded_dimensions', 'Faltmaße (BxLxH)', '📦'),
            F('turning_radius', 'Wendekreis', '🔄'),
            F('tires', 'Bereifung', '🛞'),
            F('basket_capacity', 'Max. Zuladung Korb', '🧺'),
            F('material', 'Material', '🔩'),
            F('wheels', 'Räder', '🔘'),
            F('brakes', 'Bremsen', '🛑'),
            F('foldable', 'Faltbar', '📦'),
        ],
        # Walking frames: no wheels
        'Gehgestell': [
            F('max_weight', 'Max. Benutzergewicht', '⚖️'),
            F('handle_height', 'Handgriffhöhe', '📐'),
            F('total_height', 'Gesamthöhe', '📏'),
            F('width', 'Breite', '↔️'),
            F('weight', 'Gewicht', '⚖️'),
            F('material', 'Material', '🔩'),
            F('adjustment_levels', 'Höhenverstellung', '↕️'),
            F('foldable', 'Faltbar', '📦'),
        ],
        'Gehwagen': [
            F('max_weight', 'Max. Benutzergewicht', '⚖️'),
            F('seat_height', 'Sitzhöhe', '💺'),
            F('handle_height', 'Handgriffhöhe', '📐'),
            F('total_height', 'Gesamthöhe', '📏'),
            F('width', 'Breite', '↔️'),
            F('weight', 'Gewicht', '⚖️'),
            F('wheels', 'Räder', '🔘'),
            F('brakes', 'Bremsen', '🛑'),
            F('foldable', 'Faltbar', '📦'),
            F('basket', 'Korb/Ablage', '🧺'),
        ],
    },
    'hearing': {
        'default': [
            F('power_level', 'Leistungsstufe', '🔊'),
            F('device_type', 'Bauform', '📱'),
            F('battery_type', 'Batterie/Akku', '🔋'),
            F('bluetooth', 'Bluetooth', '📱'),
            F('telecoil', 'Telefonspule', '📞'),
            F('channels', 'Kanäle', '🎚️'),
            F('programs', 'Programme', '⚙️'),
        ],
    },
    'vision': {
        'default': [
            F('magnification', 'Vergrößerung', '🔍'),
            F('light', 'Beleuchtung', '💡'),
            F('size', 'Größe', '📏'),
            F('battery', 'Batteriebetrieb', '🔋'),
        ],
    },
    'bathroom': {
        'default': [
            F('max_weight', 'Max. Belastung', '⚖️'),
            F('dimensions', 'Maße (BxTxH)', '📏'),
            F('material', 'Material', '🔩'),
            F('non_slip', 'Rutschfest', '🛡️'),
            F('mounting', 'Montage', '🔧'),
        ],
    },
}

# Code prefix -> mobility subcategory, most specific first
SUBCATEGORY_PREFIXES = (
    (('10.50.01',), 'Gehstock'),
    (('10.50.02',), 'Unterarmgehstuetzen'),
    (('10.46.04', '10.46.03'), 'Rollator'),
    (('10.46.01',), 'Gehgestell'),
    (('10.46.02', '10.46.05', '10.46.06'), 'Gehwagen'),
    (('13.20', '07.99', '25.5', '04.4'), 'default'),
)


def detect_comparison_category(code: Optional[str]) -> str:
    """Comparison category of a product code: hearing, mobility, vision, bathroom or general."""
    code = code or ""
    if code.startswith('13.'):
        return 'hearing'
    if code.startswith(('10.', '09.')):
        return 'mobility'
    if code.startswith(('25.', '07.')):
        return 'vision'
    if code.startswith('04.'):
        return 'bathroom'
    return 'general'


def detect_subcategory(code: Optional[str]) -> Optional[str]:
    """Subcategory key into COMPARISON_FIELDS, or None if unknown."""
    if not code:
        return None
    for prefixes, subcategory in SUBCATEGORY_PREFIXES:
        if code.startswith(prefixes):
            return subcategory
    return None


def static_fields_for(category: str, subcategory: Optional[str]) -> List[ComparisonField]:
    """Copies of the static fields for a (sub)category; falls back to 'default'."""
    table = COMPARISON_FIELDS.get(category, {})
    fields = table.get(subcategory) if subcategory else None
    if fields is None:
        fields = table.get('default', [])
    return [replace(f, aliases=list(f.aliases)) for f in fields]


def merge_field_definitions(
    static_fields: Sequence[ComparisonField],
    discovered_fields: Sequence[ComparisonField],
) -> List[ComparisonField]:
    """
    Static fields first, then discovered fields not already covered.

    A discovered field is covered when a static field has the same key or
    the same label (case-insensitive); its raw-label aliases are then added
    to that static field so value lookup still finds them.
    """
    merged = [replace(f, aliases=list(f.aliases)) for f in static_fields]
    by_key = {f.key: f for f in merged}
    by_label = {f.label.lower(): f for f in merged}

    for discovered in discovered_fields:
        covering = by_key.get(discovered.key) or by_label.get(discovered.label.lower())
        if covering is None:
            merged.append(discovered)
            continue
        for alias in discovered.aliases:
            if alias not in covering.aliases:
                covering.aliases.append(alias)

    return merged

"""
Feature Filter Rules

Keyword predicates behind the result-list feature filters. The upstream
catalog has no structured feature flags, so every feature is recognized
from the display name alone.

Each rule matches if ANY of its predicates matches:
- tokens: whole-token test (standalone, before a hyphen, or at the end)
- substrings: plain substring test on the upper-cased name
"""

import logging
from dataclasses import dataclass
from typing import Iterable, List, Sequence, Tuple

from .decoder import token_pattern

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FeatureRule:
    """One feature code and the name predicates that recognize it."""
    code: str
    label: str
    tokens: Tuple[str, ...] = ()
    substrings: Tuple[str, ...] = ()

    def matches(self, name: str) -> bool:
        if not name:
            return False
        upper_name = name.upper()
        if any(needle in upper_name for needle in self.substrings):
            return True
        return any(token_pattern(token).search(name) for token in self.tokens)


# Table order is also the feature-facet order
FEATURE_RULES: Tuple[FeatureRule, ...] = (
    # Hearing aids: power level
    FeatureRule('M', 'Mittlere Leistung', tokens=('M',)),
    FeatureRule('HP', 'Hohe Leistung', tokens=('HP',)),
    FeatureRule('UP', 'Ultra Leistung', tokens=('UP',)),
    FeatureRule('SP', 'Sehr hohe Leistung', tokens=('SP',)),

    # Hearing aids: power source
    FeatureRule('R', 'Wiederaufladbar', tokens=('R',),
                substrings=('AKKU', 'LITHIUM', 'WIEDERAUFLADBAR', 'RECHARGEABLE')),

    # Hearing aids: shell type
    FeatureRule('IIC', 'Unsichtbar im Gehörgang', substrings=('IIC',)),
    FeatureRule('CIC', 'Komplett im Gehörgang', substrings=('CIC',)),
    FeatureRule('ITC', 'Im Gehörgang', substrings=('ITC',)),
    FeatureRule('RIC', 'Lautsprecher im Gehörgang', substrings=('RIC', 'RITE')),
    FeatureRule('BTE', 'Hinter dem Ohr', substrings=('BTE', 'HDO')),

    # Hearing aids: connectivity
    FeatureRule('bluetooth', 'Bluetooth', tokens=('Direct',), substrings=('BLUETOOTH', 'CONNECT')),
    FeatureRule('telecoil', 'Telefonspule', tokens=('T',), substrings=('TELEFONSPULE', 'T-SPULE')),
    FeatureRule('AI', 'Künstliche Intelligenz', tokens=('AI',)),

    # Mobility aids: device type
    FeatureRule('rollator', 'Rollator', substrings=('ROLLATOR',)),
    FeatureRule('gehstock', 'Gehstock', substrings=('GEHSTOCK', 'STOCK')),
    FeatureRule('rollstuhl', 'Rollstuhl', substrings=('ROLLSTUHL',)),
    FeatureRule('gehgestell', 'Gehgestell', substrings=('GEHGESTELL',)),

    # Mobility aids: features
    FeatureRule('foldable', 'Faltbar', substrings=('FALTBAR', 'KLAPPBAR')),
    FeatureRule('adjustable', 'Höhenverstellbar', substrings=('HÖHENVERSTELLBAR', 'VERSTELLBAR')),
    FeatureRule('brakes', 'Bremsen', substrings=('BREMSE',)),
    FeatureRule('seat', 'Sitzfläche', substrings=('SITZ',)),
    FeatureRule('basket', 'Korb / Tasche', substrings=('KORB', 'TASCHE')),

    # Mobility aids: wheel count
    FeatureRule('4_wheels', '4 Räder', substrings=('4 RÄDER', '4-RÄDER', 'VIERRÄD')),
    FeatureRule('3_wheels', '3 Räder', substrings=('3 RÄDER', '3-RÄDER', 'DREIRÄD')),
)

RULES_BY_CODE = {rule.code: rule for rule in FEATURE_RULES}


def matches_feature(name: str, code: str) -> bool:
    """
    Test one feature code against a display name.

    Unknown codes never match.
    """
    rule = RULES_BY_CODE.get(code)
    if rule is None:
        return False
    return rule.matches(name)


def known_feature_codes(codes: Iterable[str]) -> List[str]:
    """Drop (and log) feature codes that have no rule."""
    known = []
    for code in codes:
        if code in RULES_BY_CODE:
            known.append(code)
        else:
            logger.debug("Ignoring unknown feature filter: %s", code)
    return known


def matches_all(name: str, codes: Sequence[str]) -> bool:
    """Logical AND over feature codes; an empty selection matches everything."""
    return all(matches_feature(name, code) for code in codes)

"""
Product Name Decoder

Translates the technical abbreviations in catalog display names into
plain-German descriptions. Hearing aids encode their shell type and
features in the name (e.g. "Audeo L90-R T"); mobility aids are decoded
from their category code and name.
"""

import re
from dataclasses import dataclass, field
from functools import lru_cache
from typing import List, Optional, Tuple

from ..models import ProductRecord

HEARING_AID_TYPES = {
    'IIC': {'full': 'Invisible-In-Canal', 'de': 'Unsichtbar im Gehörgang', 'visibility': 'unsichtbar'},
    'CIC': {'full': 'Completely-In-Canal', 'de': 'Komplett im Gehörgang', 'visibility': 'sehr diskret'},
    'ITC': {'full': 'In-The-Canal', 'de': 'Im Gehörgang', 'visibility': 'diskret'},
    'mRIC': {'full': 'Micro Receiver-In-Canal', 'de': 'Mini-Lautsprecher im Gehörgang', 'visibility': 'sehr dezent'},
    'miniRITE': {'full': 'Mini Receiver-In-The-Ear', 'de': 'Mini-Lautsprecher im Ohr', 'visibility': 'dezent'},
    'RITE': {'full': 'Receiver-In-The-Ear', 'de': 'Lautsprecher im Ohr', 'visibility': 'dezent'},
    'RIC': {'full': 'Receiver-In-Canal', 'de': 'Lautsprecher im Gehörgang', 'visibility': 'dezent'},
    'ITE': {'full': 'In-The-Ear', 'de': 'In der Ohrmuschel', 'visibility': 'teilweise sichtbar'},
    'BTE': {'full': 'Behind-The-Ear', 'de': 'Hinter dem Ohr', 'visibility': 'sichtbar'},
}

HEARING_AID_FEATURES = {
    'T': {'name': 'Telefonspule', 'description': 'Für besseres Telefonieren'},
    'R': {'name': 'Wiederaufladbar', 'description': 'Kein Batteriewechsel nötig'},
    'Direct': {'name': 'Bluetooth', 'description': 'Verbindung mit Smartphone'},
    'AI': {'name': 'Künstliche Intelligenz', 'description': 'Lernt Ihre Vorlieben'},
    'HP': {'name': 'Hohe Leistung', 'description': 'Für starken Hörverlust'},
    'SP': {'name': 'Sehr hohe Leistung', 'description': 'Für sehr starken Hörverlust'},
    'UP': {'name': 'Ultra Leistung', 'description': 'Für an Taubheit grenzenden Hörverlust'},
    'M': {'name': 'Mittlere Leistung', 'description': 'Für mittleren Hörverlust'},
}

MOBILITY_AID_TYPES = {
    'Rollator': {'de': 'Gehhilfe mit Rädern', 'features': ['Sitzfläche', 'Bremsen']},
    'Gehstock': {'de': 'Einfacher Gehstock', 'features': ['Leicht', 'Höhenverstellbar']},
    'Rollstuhl': {'de': 'Rollstuhl', 'features': ['Selbstfahrend', 'Faltbar']},
    'Gehgestell': {'de': 'Gehgestell ohne Räder', 'features': ['Stabil', 'Leicht']},
}

# Category prefix -> mobility device type, most specific first
MOBILITY_CODE_TYPES = (
    ('10.46.04', 'Rollator'),
    ('10.46.01', 'Gehgestell'),
    ('10.50', 'Gehstock'),
    ('18.50', 'Rollstuhl'),
)

# Name substring -> mobility device type, checked when the code is inconclusive
MOBILITY_NAME_TYPES = (
    ('ROLLATOR', 'Rollator'),
    ('ROLLSTUHL', 'Rollstuhl'),
    ('GEHGESTELL', 'Gehgestell'),
    ('STOCK', 'Gehstock'),
)

HEARING_PREFIXES = ('13.20', '07.99')
MOBILITY_PREFIXES = ('09.', '10.46', '10.50', '18.50')


@lru_cache(maxsize=None)
def token_pattern(key: str) -> "re.Pattern":
    """
    Whole-token matcher: standalone, before a hyphen, or at the end,
    never preceded by a letter.

    Single-letter keys (R, T, M) are case-sensitive so the last letter of
    an ordinary word ("Power", "Premium") is not read as a feature tag.
    """
    escaped = re.escape(key)
    flags = 0 if len(key) == 1 else re.IGNORECASE
    return re.compile(rf"(?<![^\W\d_]){escaped}(?:\b|(?=-)|$)", flags)


@dataclass
class DecodedProduct:
    """What could be read out of a product's name and code."""
    category: str
    device_type: Optional[str] = None
    device_description: str = ""
    features: List[str] = field(default_factory=list)
    brand: Optional[str] = None
    model: str = ""

    @property
    def feature_count(self) -> int:
        return len(self.features)

    def has_feature(self, key: str) -> bool:
        return key in self.features


def split_brand_model(name: str) -> Tuple[Optional[str], str]:
    """
    Split "Brand Model 123" into ("Brand", "Model 123").

    Single-word names have no brand.
    """
    parts = [p for p in re.split(r'[\s-]', name) if p]
    if len(parts) >= 2:
        return parts[0], ' '.join(parts[1:])
    return None, name


def _decode_hearing_aid(name: str) -> DecodedProduct:
    upper_name = name.upper()

    device_type = None
    for key in HEARING_AID_TYPES:
        if key.upper() in upper_name:
            device_type = key
            break

    features = [key for key in HEARING_AID_FEATURES if token_pattern(key).search(name)]
    brand, model = split_brand_model(name)

    return DecodedProduct(
        category='Hörgerät',
        device_type=device_type,
        device_description=HEARING_AID_TYPES[device_type]['de'] if device_type else "",
        features=features,
        brand=brand,
        model=model,
    )


def _decode_mobility_aid(name: str, code: str) -> DecodedProduct:
    upper_name = name.upper()

    device_type = None
    for prefix, type_key in MOBILITY_CODE_TYPES:
        if code.startswith(prefix):
            device_type = type_key
            break
    if device_type is None:
        for needle, type_key in MOBILITY_NAME_TYPES:
            if needle in upper_name:
                device_type = type_key
                break

    info = MOBILITY_AID_TYPES.get(device_type, {})
    category = 'Rollstuhl' if device_type == 'Rollstuhl' else 'Gehhilfe' if device_type else 'Mobilitätshilfe'
    brand, model = split_brand_model(name)

    return DecodedProduct(
        category=category,
        device_type=device_type,
        device_description=info.get('de', ""),
        features=list(info.get('features', [])),
        brand=brand,
        model=model,
    )


def decode_product(record: ProductRecord, category_hint: Optional[str] = None) -> DecodedProduct:
    """
    Decode a record's display name.

    Args:
        record: Normalized catalog record
        category_hint: 'hearing' or 'mobility' to force a decoder

    Returns:
        DecodedProduct; unknown categories only get a brand/model split
    """
    code = record.code or ""

    if code.startswith(HEARING_PREFIXES) or category_hint == 'hearing':
        return _decode_hearing_aid(record.name)

    if code.startswith(MOBILITY_PREFIXES) or category_hint == 'mobility':
        return _decode_mobility_aid(record.name, code)

    brand, model = split_brand_model(record.name)
    return DecodedProduct(category='Hilfsmittel', brand=brand, model=model)


def explain(decoded: Optional[DecodedProduct]) -> str:
    """One-line plain German description, e.g. "Hörgerät - Hinter dem Ohr"."""
    if decoded is None:
        return ""
    parts = [decoded.category] if decoded.category else []
    if decoded.device_description:
        parts.append(f"- {decoded.device_description}")
    return ' '.join(parts)


def simplified_name(name: str) -> str:
    """Strip technical suffixes (article numbers, parentheses, SR codes)."""
    if not name:
        return 'Hilfsmittel'

    simplified = re.sub(r'\s+\d{3,}[-/]\d+', '', name)
    simplified = re.sub(r'\s+\([^)]+\)', '', simplified)
    simplified = re.sub(r'\s+SR\d+', '', simplified, flags=re.IGNORECASE)
    simplified = re.sub(r'\s+DVIR', '', simplified, flags=re.IGNORECASE)
    simplified = re.sub(r'\s+[A-Z]{2,}$', '', simplified).strip()

    return simplified or name

"""
Record Normalization

Turns raw upstream product objects into ProductRecord instances.
All alternate-field coalescing lives here; nothing downstream reads
raw upstream field names.
"""

import logging
from typing import Any, Iterable, List, Mapping, Optional, Sequence

from ..models import AttributeEntry, ProductRecord

logger = logging.getLogger(__name__)

# Upstream field names per canonical field, in priority order
FIELD_ALIASES = {
    'id': ('id', 'produktId', 'produktartId', 'guid'),
    'code': ('zehnSteller', 'produktartNummer', 'code', 'xSteller', 'nummer'),
    'name': ('bezeichnung', 'name', 'produktbezeichnung', 'title'),
    'manufacturer': ('hersteller', 'herstellerName', 'manufacturer'),
    'description': ('beschreibung', 'description', 'produktbeschreibung'),
    'price': ('preis', 'price', 'festbetrag'),
}

# Flags marking withdrawn or placeholder entries
REMOVED_FLAGS = ('istGeloescht', 'geloescht', 'isDeleted', 'deleted', 'removed', 'istPlatzhalter')

# Names that mean "no real product here" (compared case-insensitively)
PLACEHOLDER_NAMES = frozenset({
    '', '-', '--', '.', 'k.a.', 'k. a.', 'n/a', 'unbekannt', 'platzhalter', 'gelöscht', 'test',
})

ATTRIBUTE_FIELDS = ('konstruktionsmerkmale', 'merkmale')


def _text(value: Any) -> str:
    """Coerce a raw field to a stripped string (objects use their 'name')."""
    if value is None:
        return ''
    if isinstance(value, Mapping):
        value = value.get('name') or value.get('bezeichnung') or ''
    return str(value).strip()


def coalesce(raw: Mapping[str, Any], aliases: Sequence[str]) -> str:
    """Return the first non-empty value among the alias field names."""
    for name in aliases:
        text = _text(raw.get(name))
        if text:
            return text
    return ''


def is_removed(raw: Mapping[str, Any]) -> bool:
    """True if the raw object is flagged as removed or as a placeholder."""
    return any(bool(raw.get(flag)) for flag in REMOVED_FLAGS)


def is_placeholder_name(name: str) -> bool:
    return name.strip().lower() in PLACEHOLDER_NAMES


def parse_attributes(raw_list: Any) -> Optional[List[AttributeEntry]]:
    """
    Parse a konstruktionsmerkmale list into AttributeEntry pairs.

    Entries without a label are skipped. Returns None when the raw
    value is not a list (attributes not fetched).
    """
    if not isinstance(raw_list, list):
        return None

    entries = []
    for item in raw_list:
        if not isinstance(item, Mapping):
            continue
        label = _text(item.get('label') or item.get('bezeichnung'))
        if not label:
            continue
        entries.append(AttributeEntry(label=label, value=_text(item.get('value') or item.get('wert'))))
    return entries


def normalize_record(raw: Any) -> Optional[ProductRecord]:
    """
    Normalize one raw upstream product.

    Args:
        raw: Raw product object as returned by GET /Produkt

    Returns:
        ProductRecord, or None if the entry is removed, a placeholder,
        or has neither an identifier nor a code
    """
    if not isinstance(raw, Mapping) or is_removed(raw):
        return None

    name = coalesce(raw, FIELD_ALIASES['name'])
    if is_placeholder_name(name):
        return None

    code = coalesce(raw, FIELD_ALIASES['code'])
    record_id = coalesce(raw, FIELD_ALIASES['id']) or code
    if not record_id:
        return None

    attributes = None
    for field_name in ATTRIBUTE_FIELDS:
        attributes = parse_attributes(raw.get(field_name))
        if attributes is not None:
            break

    return ProductRecord(
        id=record_id,
        code=code,
        name=name,
        manufacturer=coalesce(raw, FIELD_ALIASES['manufacturer']),
        description=coalesce(raw, FIELD_ALIASES['description']),
        price=coalesce(raw, FIELD_ALIASES['price']),
        attributes=attributes,
    )


def unwrap_payload(data: Any) -> List[Any]:
    """Accept either a bare JSON array or an OData-style {"value": [...]}."""
    if isinstance(data, list):
        return data
    if isinstance(data, Mapping) and isinstance(data.get('value'), list):
        return data['value']
    return []


def normalize_catalog(raw_products: Iterable[Any]) -> List[ProductRecord]:
    """Normalize a whole catalog, dropping unusable entries."""
    records = []
    dropped = 0
    for raw in raw_products:
        record = normalize_record(raw)
        if record is None:
            dropped += 1
            continue
        records.append(record)

    logger.info("Normalized %d catalog records (%d dropped)", len(records), dropped)
    return records

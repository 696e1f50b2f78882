"""
Text Enrichment

Thin interface to an external text-generation service used for
plain-language product explanations and comparison summaries.

The service is treated as a fallible pure function (prompt -> text).
Every failure is logged and reported as None; callers show the
non-enriched view instead.
"""

import json
import logging
import re
from typing import Any, Dict, Mapping, Optional, Protocol, Sequence

from .models import ProductRecord
from .search.decoder import decode_product, explain

logger = logging.getLogger(__name__)

MAX_ATTRIBUTES_IN_PROMPT = 15


class TextGenerator(Protocol):
    """Anything that turns a prompt into text (raises on failure)."""

    def __call__(self, prompt: str) -> str:
        ...


def _describe_profile(profile: Optional[Mapping[str, Any]]) -> str:
    if not profile:
        return "Keine Angaben zur Person."
    return '\n'.join(f"- {key}: {value}" for key, value in profile.items())


def _describe_product(record: ProductRecord) -> str:
    lines = [
        f"Name: {record.name}",
        f"Produktnummer: {record.code}",
        f"Einordnung: {explain(decode_product(record))}",
    ]
    if record.manufacturer:
        lines.append(f"Hersteller: {record.manufacturer}")
    if record.description:
        lines.append(f"Beschreibung: {record.description}")
    for attribute in (record.attributes or [])[:MAX_ATTRIBUTES_IN_PROMPT]:
        lines.append(f"{attribute.label}: {attribute.value}")
    return '\n'.join(lines)


def build_product_prompt(record: ProductRecord, profile: Optional[Mapping[str, Any]] = None) -> str:
    return (
        "Erkläre dieses Hilfsmittel in einfachem Deutsch (3-4 Sätze) "
        "für eine ältere Person. Nenne nur Eigenschaften, die unten stehen.\n\n"
        f"Produkt:\n{_describe_product(record)}\n\n"
        f"Person:\n{_describe_profile(profile)}"
    )


def build_comparison_prompt(records: Sequence[ProductRecord], profile: Optional[Mapping[str, Any]] = None) -> str:
    products = '\n\n'.join(
        f"Produkt {i}:\n{_describe_product(record)}" for i, record in enumerate(records, 1)
    )
    return (
        "Vergleiche diese Hilfsmittel für die beschriebene Person. Antworte nur mit JSON: "
        '{"summary": "...", "recommendation": "<Produktnummer>", "reasons": ["..."]}\n\n'
        f"{products}\n\nPerson:\n{_describe_profile(profile)}"
    )


def parse_json_reply(text: Optional[str]) -> Optional[Dict[str, Any]]:
    """
    Extract the first {...} object from a model reply.

    Markdown code fences and surrounding prose are tolerated.

    Example:
        >>> parse_json_reply('```json\\n{"price": "89,00 EUR"}\\n```')
        {'price': '89,00 EUR'}
    """
    if not text:
        return None
    match = re.search(r'\{[\s\S]*\}', text)
    if not match:
        return None
    try:
        parsed = json.loads(match.group(0))
    except ValueError:
        return None
    return parsed if isinstance(parsed, dict) else None


def explain_product(
    generator: TextGenerator,
    record: ProductRecord,
    profile: Optional[Mapping[str, Any]] = None,
) -> Optional[str]:
    """Plain-language explanation of one product, or None on failure."""
    try:
        text = generator(build_product_prompt(record, profile))
    except Exception as e:
        logger.warning("Text generation failed for %s: %s", record.code or record.id, e)
        return None
    text = (text or "").strip()
    return text or None


def compare_products(
    generator: TextGenerator,
    records: Sequence[ProductRecord],
    profile: Optional[Mapping[str, Any]] = None,
) -> Optional[Dict[str, Any]]:
    """Structured comparison summary of 2-3 products, or None on failure."""
    if len(records) < 2:
        return None
    try:
        reply = generator(build_comparison_prompt(records, profile))
    except Exception as e:
        logger.warning("Comparison text generation failed: %s", e)
        return None

    parsed = parse_json_reply(reply)
    if parsed is None:
        logger.warning("Comparison reply contained no JSON object")
    return parsed

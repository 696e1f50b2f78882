"""
Relevance Scoring

Additive point heuristic used to pre-rank oversized categories (hearing
aids alone have tens of thousands of model variants) before faceting.

Points per record:
- device type named in the display name: device_type_points (once)
- each requested boolean feature recognized in the name: tier points
- severity-appropriate power/shell token: severity_points (once)
- three or more decoded features: feature_bonus_points
"""

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

from ..common.config_loader import SearchSettings
from ..models import ProductRecord, SearchCriteria
from .decoder import DecodedProduct, decode_product

logger = logging.getLogger(__name__)

HIGH = 'high'
MEDIUM = 'medium'
LOW = 'low'


@dataclass(frozen=True)
class FlagKeywords:
    """How one boolean filter is recognized in a record."""
    tier: str
    keywords: Tuple[str, ...]
    decoded_features: Tuple[str, ...] = ()


FLAG_KEYWORDS: Dict[str, FlagKeywords] = {
    'rechargeable': FlagKeywords(HIGH, ('akku', 'lithium', 'wiederaufladbar', 'rechargeable'), ('R',)),
    'bluetooth': FlagKeywords(HIGH, ('bluetooth', 'direct', 'connect'), ('Direct',)),
    'automatic': FlagKeywords(HIGH, ('automatik', 'automatic', 'autosense'), ('AI',)),
    'foldable': FlagKeywords(HIGH, ('faltbar', 'klappbar', 'fold')),
    'brakes': FlagKeywords(HIGH, ('bremse', 'brake')),
    'noise_reduction': FlagKeywords(MEDIUM, ('störgeräusch', 'noise', 'rauschunterdrück')),
    'phone_compatible': FlagKeywords(MEDIUM, ('telefon', 'phone', 't-spule'), ('T',)),
    'tv_compatible': FlagKeywords(MEDIUM, ('tv', 'fernseh', 'television')),
    'seat': FlagKeywords(MEDIUM, ('sitz', 'seat')),
    'adjustable': FlagKeywords(MEDIUM, ('verstellbar', 'adjustable')),
    'basket': FlagKeywords(LOW, ('korb', 'tasche', 'basket')),
    'indoor': FlagKeywords(LOW, ('indoor', 'innen', 'wohnung', 'zimmer')),
    'outdoor': FlagKeywords(LOW, ('outdoor', 'außen', 'gelände')),
    'robust': FlagKeywords(LOW, ('robust', 'stabil', 'heavy', 'xxl')),
}

# Severity level -> decoded power/shell keys appropriate for it
SEVERITY_KEYS: Dict[str, Tuple[str, ...]] = {
    'mild': ('M', 'IIC', 'CIC'),
    'moderate': ('M', 'HP'),
    'severe': ('HP', 'SP', 'UP'),
}


class RelevanceScorer:
    """
    Scores and ranks records against search criteria.

    Usage:
        scorer = RelevanceScorer(load_search_settings())
        shortlist = scorer.rank(records, criteria)   # top relevance_cap
    """

    def __init__(self, settings: Optional[SearchSettings] = None):
        self.settings = settings or SearchSettings()
        self._tier_points = {
            HIGH: self.settings.high_priority_points,
            MEDIUM: self.settings.medium_priority_points,
            LOW: self.settings.low_priority_points,
        }

    def score(self, record: ProductRecord, criteria: SearchCriteria,
              decoded: Optional[DecodedProduct] = None) -> int:
        """Additive relevance score of one record (never negative)."""
        if decoded is None:
            decoded = decode_product(record)
        name = record.name.lower()
        points = 0

        device_types = [str(v).lower() for v in criteria.filter_values('device_type')]
        if any(device_type in name for device_type in device_types):
            points += self.settings.device_type_points

        for key, flag in FLAG_KEYWORDS.items():
            if not criteria.is_enabled(key):
                continue
            if any(keyword in name for keyword in flag.keywords) or \
                    any(decoded.has_feature(f) for f in flag.decoded_features):
                points += self._tier_points[flag.tier]

        if self._matches_severity(criteria, decoded):
            points += self.settings.severity_points

        if decoded.feature_count >= self.settings.feature_bonus_min_count:
            points += self.settings.feature_bonus_points

        return points

    @staticmethod
    def _matches_severity(criteria: SearchCriteria, decoded: DecodedProduct) -> bool:
        for level in criteria.filter_values('severity'):
            keys = SEVERITY_KEYS.get(str(level), ())
            if decoded.device_type in keys or any(decoded.has_feature(k) for k in keys):
                return True
        return False

    def rank(self, records: Sequence[ProductRecord], criteria: SearchCriteria,
             limit: Optional[int] = None) -> List[ProductRecord]:
        """
        Sort by score descending and keep the top `limit` records.

        Python's sort is stable, so equal scores keep their catalog order.
        """
        limit = self.settings.relevance_cap if limit is None else limit
        scored = [(self.score(record, criteria), record) for record in records]
        scored.sort(key=lambda pair: pair[0], reverse=True)

        if scored:
            logger.debug("Relevance scores: top %d, cut-off %d",
                         scored[0][0], scored[min(limit, len(scored)) - 1][0] if limit else 0)

        return [record for _, record in scored[:limit]]

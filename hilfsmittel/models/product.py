"""
Catalog and search data models.

Pure data classes for catalog records, search requests and results.
No business logic - only data structure definitions and (de)serialization.
"""

from dataclasses import asdict, dataclass, field
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Tuple


@dataclass(frozen=True)
class AttributeEntry:
    """One raw technical attribute (konstruktionsmerkmal) of a product."""
    label: str
    value: str


@dataclass
class ProductRecord:
    """
    Normalized catalog entry.

    Produced only by catalog.normalize.normalize_record(); raw upstream
    objects never reach the search or comparison code.
    """

    id: str
    code: str                   # Hierarchical category code, e.g. "13.20.12.2189"
    name: str                   # Display name (bezeichnung)
    manufacturer: str = ""
    description: str = ""
    price: str = ""

    # Technical attributes, fetched lazily per item (None = not fetched yet)
    attributes: Optional[List[AttributeEntry]] = None

    def __post_init__(self):
        """Validate required fields after initialization."""
        if not self.id:
            raise ValueError("Product id is required")
        if not self.name:
            raise ValueError("Product name is required")

    @property
    def group_code(self) -> str:
        """Two-segment category prefix, e.g. "13.20" for "13.20.12.2189"."""
        return '.'.join(self.code.split('.')[:2])

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ProductRecord":
        """
        Rebuild a record from its to_dict() form.

        Raises:
            KeyError, TypeError, ValueError: If data is not a serialized record
        """
        raw_attributes = data.get('attributes')
        attributes = None
        if raw_attributes is not None:
            attributes = [AttributeEntry(label=a['label'], value=a['value']) for a in raw_attributes]
        return cls(
            id=data['id'],
            code=data['code'],
            name=data['name'],
            manufacturer=data.get('manufacturer', ''),
            description=data.get('description', ''),
            price=data.get('price', ''),
            attributes=attributes,
        )


def _freeze(value: Any) -> Any:
    if isinstance(value, (list, tuple, set)):
        return tuple(value)
    return value


@dataclass(frozen=True)
class SearchCriteria:
    """
    Structured search request built from questionnaire answers.

    product_groups is a union of category-code prefixes (order irrelevant).
    filters maps named filter keys to booleans, scalars or tuples of scalars.
    Both are immutable after construction.
    """

    product_groups: Tuple[str, ...] = ()
    filters: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, 'product_groups', tuple(self.product_groups))
        frozen = {key: _freeze(value) for key, value in dict(self.filters).items()}
        object.__setattr__(self, 'filters', MappingProxyType(frozen))

    def filter_values(self, key: str) -> List[Any]:
        """Return the truthy values recorded for a filter key as a list."""
        value = self.filters.get(key)
        if value is None or value is False:
            return []
        if isinstance(value, tuple):
            return [v for v in value if v]
        return [value]

    def is_enabled(self, key: str) -> bool:
        """True if the filter is set to a truthy value (or a non-empty list)."""
        return bool(self.filter_values(key))

    def to_dict(self) -> Dict[str, Any]:
        return {
            'productGroups': list(self.product_groups),
            'filters': {k: list(v) if isinstance(v, tuple) else v for k, v in self.filters.items()},
        }


@dataclass(frozen=True)
class CategoryFacet:
    """Result count for one two-segment category prefix."""
    code: str
    label: str
    count: int


@dataclass
class SearchResult:
    """
    One page of search results.

    total, category_facets and feature_facets describe the full filtered
    set, not just this page.
    """

    products: List[ProductRecord]
    total: int
    page: int
    page_size: int
    total_pages: int
    category_facets: List[CategoryFacet] = field(default_factory=list)
    feature_facets: Dict[str, int] = field(default_factory=dict)

    @property
    def is_empty(self) -> bool:
        return self.total == 0

    @classmethod
    def empty(cls, page_size: int) -> "SearchResult":
        return cls(products=[], total=0, page=1, page_size=page_size, total_pages=1)


@dataclass
class CacheEntry:
    """Versioned, timestamped cache payload."""
    payload: Any
    fetched_at: float
    schema_version: str

    def age(self, now: float) -> float:
        return now - self.fetched_at

    def is_fresh(self, now: float, ttl_seconds: float) -> bool:
        return self.age(now) < ttl_seconds

    def to_dict(self) -> Dict[str, Any]:
        return {
            'payload': self.payload,
            'fetchedAtTimestamp': self.fetched_at,
            'schemaVersion': self.schema_version,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "CacheEntry":
        return cls(
            payload=data['payload'],
            fetched_at=float(data['fetchedAtTimestamp']),
            schema_version=str(data['schemaVersion']),
        )


@dataclass
class CatalogSnapshot:
    """Catalog records plus where they came from (for logging/UI hints)."""
    records: List[ProductRecord]
    source: str     # "cache", "network" or "stale-cache"

    @property
    def from_cache(self) -> bool:
        return self.source != "network"

"""
Catalog retrieval and caching.

Modules:
    registry  - category code -> display name lookup
    normalize - raw upstream objects -> ProductRecord
    cache     - versioned, TTL-based JSON file caches
    client    - retrying upstream client with stale-cache fallback
    errors    - typed retrieval errors
"""

from .cache import CatalogCache, JsonFileStore, MetadataCache, open_caches
from .client import (
    DEFAULT_API_BASE,
    DEFAULT_CACHE_DIR,
    CatalogClient,
    RequestsTransport,
    build_category_index,
    create_catalog_client,
)
from .errors import CatalogError, TransportError, UpstreamUnavailableError
from .normalize import normalize_catalog, normalize_record
from .registry import CategoryRegistry

__all__ = [
    'CategoryRegistry',
    'CatalogCache',
    'MetadataCache',
    'JsonFileStore',
    'open_caches',
    'CatalogClient',
    'RequestsTransport',
    'DEFAULT_API_BASE',
    'DEFAULT_CACHE_DIR',
    'create_catalog_client',
    'build_category_index',
    'CatalogError',
    'TransportError',
    'UpstreamUnavailableError',
    'normalize_catalog',
    'normalize_record',
]

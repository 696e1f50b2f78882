"""
Catalog Client

Retrieves the product catalog, category tree and per-item details from the
GKV Hilfsmittelverzeichnis (directly or through the pass-through relay).

Handles:
- Cache-first reads through CatalogCache / MetadataCache
- Retries with exponential backoff (1s, 2s, ... between attempts)
- Stale-cache fallback when the upstream stays unavailable
- Batched detail enrichment with bounded concurrency
"""

import asyncio
import logging
from dataclasses import replace
from typing import Any, Awaitable, Callable, Dict, List, Mapping, Optional, Sequence
from urllib.parse import urljoin

import requests

from ..common.config_loader import SearchSettings
from ..common.constants import SECONDS_PER_HOUR
from ..models import AttributeEntry, CatalogSnapshot, ProductRecord
from .cache import CatalogCache, MetadataCache, open_caches
from .errors import TransportError, UpstreamUnavailableError
from .normalize import normalize_catalog, parse_attributes, unwrap_payload

logger = logging.getLogger(__name__)

DEFAULT_API_BASE = "https://hilfsmittel.gkv-spitzenverband.de/api/verzeichnis"
DEFAULT_CACHE_DIR = "~/.cache/hilfsmittel"

CATEGORY_INDEX_KEY = 'category_index'
DETAILS_KEY_PREFIX = 'details_'

Sleep = Callable[[float], Awaitable[None]]


class RequestsTransport:
    """
    Blocking JSON-over-HTTP transport built on a requests Session.

    The relay mirrors the upstream status code and answers failures with
    HTTP 500 and a {"error": ..., "detail": ...} envelope; both surface
    as TransportError.

    Usage:
        transport = RequestsTransport("https://hilfsmittel.gkv-spitzenverband.de/api/verzeichnis")
        products = transport.get_json("Produkt")
    """

    def __init__(self, base_url: str = DEFAULT_API_BASE, timeout: int = 60):
        self.base_url = base_url.rstrip('/') + '/'
        self.timeout = timeout
        self.session = requests.Session()
        self.session.headers.update({
            "Accept": "application/json",
            "Content-Type": "application/json",
        })

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.session.close()

    def close(self):
        self.session.close()

    def get_json(self, path: str) -> Any:
        """
        GET a path below the base URL and decode the JSON body.

        Raises:
            TransportError: On connection errors, timeouts, HTTP >= 400
                or an undecodable body
        """
        url = urljoin(self.base_url, path.lstrip('/'))

        try:
            response = self.session.get(url, timeout=self.timeout)
        except requests.exceptions.Timeout as e:
            raise TransportError(f"Request timeout: {path}") from e
        except requests.exceptions.RequestException as e:
            raise TransportError(f"Request failed: {path}: {e}") from e

        if response.status_code >= 400:
            raise TransportError(
                f"HTTP {response.status_code} on {path}: {_error_detail(response)}",
                status_code=response.status_code,
            )

        try:
            return response.json()
        except ValueError as e:
            raise TransportError(f"Invalid JSON from {path}: {response.text[:200]}") from e


def _error_detail(response: requests.Response) -> str:
    """Extract the relay's {error, detail} envelope, else a body preview."""
    try:
        body = response.json()
    except ValueError:
        return response.text[:200]
    if isinstance(body, Mapping) and 'error' in body:
        detail = body.get('detail')
        return f"{body['error']} ({detail})" if detail else str(body['error'])
    return response.text[:200]


def build_category_index(tree: Any) -> Dict[str, str]:
    """
    Flatten a VerzeichnisTree into {category code: internal id}.

    Nodes look like {"id": ..., "xSteller": "10.46.04", "children": [...]};
    every node carrying both a code and an id is indexed.
    """
    index: Dict[str, str] = {}

    def walk(node: Any) -> None:
        if isinstance(node, list):
            for child in node:
                walk(child)
            return
        if not isinstance(node, Mapping):
            return

        code = node.get('xSteller') or node.get('code')
        node_id = node.get('id')
        if code and node_id is not None:
            index[str(code)] = str(node_id)

        walk(node.get('children') or [])

    walk(unwrap_payload(tree) if isinstance(tree, Mapping) and 'value' in tree else tree)
    return index


class CatalogClient:
    """
    Cache-first access to the upstream catalog.

    Usage:
        catalog_cache, metadata_cache = open_caches(...)
        client = CatalogClient(RequestsTransport(base_url), catalog_cache, metadata_cache)

        snapshot = await client.fetch_catalog()       # CatalogSnapshot
        index = await client.fetch_category_tree()    # {"10.46.04": "123", ...}
        enriched = await client.enrich_with_details(shortlist)
    """

    def __init__(
        self,
        transport,
        catalog_cache: CatalogCache,
        metadata_cache: MetadataCache,
        settings: Optional[SearchSettings] = None,
        sleep: Sleep = asyncio.sleep,
    ):
        """
        Initialize the client.

        Args:
            transport: Object with a blocking get_json(path) method
            catalog_cache: Full-catalog cache
            metadata_cache: Category index / details cache
            settings: Retry and batching constants (defaults if None)
            sleep: Awaitable sleep, injectable for tests
        """
        self.transport = transport
        self.catalog_cache = catalog_cache
        self.metadata_cache = metadata_cache
        self.settings = settings or SearchSettings()
        self.sleep = sleep

    async def _get_with_retry(self, path: str, attempts: Optional[int] = None) -> Any:
        """
        Fetch a path, retrying with exponential backoff.

        Raises:
            UpstreamUnavailableError: After the last attempt failed
        """
        attempts = attempts or self.settings.max_attempts
        last_error: Optional[TransportError] = None

        for attempt in range(attempts):
            try:
                return await asyncio.to_thread(self.transport.get_json, path)
            except TransportError as e:
                last_error = e
                if attempt == attempts - 1:
                    break
                delay = self.settings.base_delay * (2 ** attempt)
                logger.warning("%s, retry %d/%d in %.1fs...", e, attempt + 1, attempts - 1, delay)
                await self.sleep(delay)

        logger.error("Max attempts (%d) exceeded for %s", attempts, path)
        raise UpstreamUnavailableError(path, attempts) from last_error

    async def fetch_catalog(self) -> CatalogSnapshot:
        """
        Return the full normalized catalog.

        Order: fresh cache -> network (normalize + store) -> stale cache.

        Raises:
            UpstreamUnavailableError: Network failed and nothing is cached
        """
        cached = await self.catalog_cache.get()
        if cached is not None:
            records = _records_from_cache(cached)
            if records is not None:
                return CatalogSnapshot(records=records, source="cache")

        try:
            data = await self._get_with_retry("Produkt")
        except UpstreamUnavailableError:
            stale = await self.catalog_cache.get_stale()
            records = _records_from_cache(stale) if stale is not None else None
            if records is not None:
                logger.warning("Upstream unavailable, serving %d records from expired cache", len(records))
                return CatalogSnapshot(records=records, source="stale-cache")
            raise

        records = normalize_catalog(unwrap_payload(data))
        await self.catalog_cache.set([record.to_dict() for record in records])
        return CatalogSnapshot(records=records, source="network")

    async def fetch_category_tree(self, depth: int = 1) -> Dict[str, str]:
        """
        Return the flat {category code: internal id} index.

        Raises:
            UpstreamUnavailableError: Network failed and nothing is cached
        """
        key = f"{CATEGORY_INDEX_KEY}_{depth}"
        cached = self.metadata_cache.get(key)
        if isinstance(cached, dict):
            return cached

        try:
            tree = await self._get_with_retry(f"VerzeichnisTree/{depth}")
        except UpstreamUnavailableError:
            stale = self.metadata_cache.get_stale(key)
            if isinstance(stale, dict):
                logger.warning("Upstream unavailable, serving expired category index")
                return stale
            raise

        index = build_category_index(tree)
        logger.info("Indexed %d category codes", len(index))
        self.metadata_cache.set(key, index)
        return index

    async def fetch_product_details(self, product_id: str) -> List[AttributeEntry]:
        """
        Return the technical attributes (konstruktionsmerkmale) of one product.

        Raises:
            UpstreamUnavailableError: Network failed and nothing is cached
        """
        key = f"{DETAILS_KEY_PREFIX}{product_id}"
        cached = self.metadata_cache.get(key)
        if isinstance(cached, list):
            parsed = parse_attributes(cached)
            if parsed is not None:
                return parsed

        try:
            data = await self._get_with_retry(f"Produkt/{product_id}")
        except UpstreamUnavailableError:
            stale = self.metadata_cache.get_stale(key)
            parsed = parse_attributes(stale) if isinstance(stale, list) else None
            if parsed is not None:
                logger.warning("Upstream unavailable, serving expired details for %s", product_id)
                return parsed
            raise

        raw_attributes = data.get('konstruktionsmerkmale') if isinstance(data, Mapping) else None
        attributes = parse_attributes(raw_attributes) or []

        self.metadata_cache.set(key, [{'label': a.label, 'value': a.value} for a in attributes])
        return attributes

    async def enrich_with_details(
        self,
        records: Sequence[ProductRecord],
        alive: Optional[Callable[[], bool]] = None,
    ) -> Optional[List[ProductRecord]]:
        """
        Attach technical attributes to a shortlist of records.

        Details are fetched in fixed-size batches (all requests of one batch
        in flight together) with a short pause between batches. A record whose
        details cannot be fetched is returned without attributes.

        Args:
            records: Records to enrich (records that already carry
                attributes are kept as they are)
            alive: Liveness flag; when it returns False after the work
                completes, the result is discarded

        Returns:
            Enriched copies in input order, or None if cancelled
        """
        batch_size = max(1, self.settings.detail_batch_size)
        enriched: List[ProductRecord] = []

        for start in range(0, len(records), batch_size):
            batch = records[start:start + batch_size]
            results = await asyncio.gather(
                *(self._enrich_one(record) for record in batch)
            )
            enriched.extend(results)

            if alive is not None and not alive():
                logger.debug("Detail enrichment cancelled after %d records", len(enriched))
                return None

            if start + batch_size < len(records):
                await self.sleep(self.settings.detail_batch_delay)

        return enriched

    async def _enrich_one(self, record: ProductRecord) -> ProductRecord:
        if record.attributes is not None:
            return record
        try:
            attributes = await self.fetch_product_details(record.id)
        except UpstreamUnavailableError as e:
            logger.warning("Failed to fetch details for %s: %s", record.code or record.id, e)
            return record
        return replace(record, attributes=attributes)


def _records_from_cache(payload: List[Any]) -> Optional[List[ProductRecord]]:
    """Rebuild records from cached dicts; any malformed entry voids the payload."""
    try:
        return [ProductRecord.from_dict(item) for item in payload]
    except (KeyError, TypeError, ValueError, AttributeError) as e:
        logger.warning("Discarding malformed catalog cache payload: %s", e)
        return None


def create_catalog_client(
    api_base: str = DEFAULT_API_BASE,
    cache_dir: str = DEFAULT_CACHE_DIR,
    settings: Optional[SearchSettings] = None,
) -> CatalogClient:
    """
    Wire transport, caches and client together from settings.

    Usage:
        client = create_catalog_client(os.getenv("HILFSMITTEL_API_BASE", DEFAULT_API_BASE))
    """
    settings = settings or SearchSettings()
    catalog_cache, metadata_cache = open_caches(
        cache_dir,
        catalog_ttl_seconds=settings.catalog_ttl_hours * SECONDS_PER_HOUR,
        metadata_ttl_seconds=settings.metadata_ttl_hours * SECONDS_PER_HOUR,
    )
    transport = RequestsTransport(api_base, timeout=settings.request_timeout)
    return CatalogClient(transport, catalog_cache, metadata_cache, settings)

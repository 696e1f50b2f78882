"""
Catalog Cache

Durable, versioned, TTL-based local storage for catalog data.

Two domains with different volatility:
- CatalogCache: the full normalized catalog (multi-megabyte), async access
- MetadataCache: category index, per-item details and other small slices,
  synchronous access; wiped completely on schema-version mismatch

Every entry is stored as {payload, fetchedAtTimestamp, schemaVersion}.
Reads never raise: missing, corrupt, expired or wrong-version entries
all read as a miss.
"""

import asyncio
import json
import logging
import os
import re
import time
from pathlib import Path
from typing import Any, Callable, List, Optional, Tuple, Union

from ..common.constants import CACHE_SCHEMA_VERSION
from ..models import CacheEntry

logger = logging.getLogger(__name__)

Clock = Callable[[], float]


class JsonFileStore:
    """
    Key-value store keeping one JSON file per key in a directory.

    Writes go through a temporary file and os.replace() so a crash
    never leaves a half-written entry behind.
    """

    SUFFIX = '.json'

    def __init__(self, directory: Union[str, Path]):
        self.directory = Path(directory)
        self.directory.mkdir(parents=True, exist_ok=True)

    def _path(self, key: str) -> Path:
        safe = re.sub(r'[^A-Za-z0-9_.-]+', '_', key)
        return self.directory / f"{safe}{self.SUFFIX}"

    def read(self, key: str) -> Optional[str]:
        path = self._path(key)
        try:
            return path.read_text(encoding='utf-8')
        except FileNotFoundError:
            return None
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("Could not read cache file %s: %s", path, e)
            return None

    def write(self, key: str, text: str) -> None:
        path = self._path(key)
        tmp_path = path.with_suffix(path.suffix + '.tmp')
        with open(tmp_path, 'w', encoding='utf-8') as f:
            f.write(text)
        os.replace(tmp_path, path)

    def delete(self, key: str) -> None:
        try:
            self._path(key).unlink()
        except FileNotFoundError:
            pass

    def keys(self) -> List[str]:
        return sorted(p.name[:-len(self.SUFFIX)] for p in self.directory.glob(f"*{self.SUFFIX}"))

    def clear(self) -> None:
        for key in self.keys():
            self.delete(key)


def _decode_entry(text: Optional[str], label: str) -> Optional[CacheEntry]:
    """Parse a stored entry; corrupt data is logged and treated as a miss."""
    if text is None:
        return None
    try:
        return CacheEntry.from_dict(json.loads(text))
    except (ValueError, KeyError, TypeError) as e:
        logger.warning("Discarding corrupt cache entry %s: %s", label, e)
        return None


def _encode_entry(entry: CacheEntry) -> str:
    return json.dumps(entry.to_dict(), ensure_ascii=False)


class CatalogCache:
    """
    Keyed singleton holding the full normalized catalog.

    Usage:
        cache = CatalogCache(JsonFileStore("~/.cache/hilfsmittel/catalog"),
                             ttl_seconds=24 * 3600)
        records = await cache.get()        # list of dicts or None
        await cache.set(records)
        stale = await cache.get_stale()    # ignores TTL, still checks version
    """

    KEY = 'catalog'

    def __init__(
        self,
        store: JsonFileStore,
        ttl_seconds: float,
        schema_version: str = CACHE_SCHEMA_VERSION,
        clock: Clock = time.time,
    ):
        self.store = store
        self.ttl_seconds = ttl_seconds
        self.schema_version = schema_version
        self.clock = clock

    def _load_entry(self) -> Optional[CacheEntry]:
        entry = _decode_entry(self.store.read(self.KEY), self.KEY)
        if entry is None:
            return None

        if entry.schema_version != self.schema_version:
            logger.info("Catalog cache schema %s != %s, discarding",
                        entry.schema_version, self.schema_version)
            self.store.delete(self.KEY)
            return None

        if not isinstance(entry.payload, list):
            logger.warning("Discarding catalog cache with unexpected payload type %s",
                           type(entry.payload).__name__)
            return None

        return entry

    async def get(self) -> Optional[List[Any]]:
        """Return the cached catalog if present, current-version and fresh."""
        entry = await asyncio.to_thread(self._load_entry)
        if entry is None:
            logger.debug("Catalog cache miss")
            return None

        if not entry.is_fresh(self.clock(), self.ttl_seconds):
            logger.debug("Catalog cache expired (age %.0fs)", entry.age(self.clock()))
            return None

        logger.debug("Catalog cache hit (%d records)", len(entry.payload))
        return entry.payload

    async def get_stale(self) -> Optional[List[Any]]:
        """Return the cached catalog regardless of age (last-resort fallback)."""
        entry = await asyncio.to_thread(self._load_entry)
        return entry.payload if entry is not None else None

    async def set(self, payload: List[Any]) -> None:
        """Overwrite the cached catalog, stamping the current time."""
        entry = CacheEntry(payload=payload, fetched_at=self.clock(), schema_version=self.schema_version)
        try:
            await asyncio.to_thread(self.store.write, self.KEY, _encode_entry(entry))
        except OSError as e:
            logger.warning("Could not persist catalog cache: %s", e)

    async def invalidate(self) -> None:
        await asyncio.to_thread(self.store.delete, self.KEY)


class MetadataCache:
    """
    Small synchronous cache for category index, details and result slices.

    On construction the stored schema version is compared with the running
    one; on mismatch every entry is wiped and the new version recorded.
    """

    VERSION_KEY = '_schema_version'

    def __init__(
        self,
        store: JsonFileStore,
        ttl_seconds: float,
        schema_version: str = CACHE_SCHEMA_VERSION,
        clock: Clock = time.time,
    ):
        self.store = store
        self.ttl_seconds = ttl_seconds
        self.schema_version = schema_version
        self.clock = clock
        self._check_schema_version()

    def _check_schema_version(self) -> None:
        stored = self.store.read(self.VERSION_KEY)
        if stored == self.schema_version:
            return

        if stored is not None:
            logger.info("Metadata cache schema changed (%s -> %s), wiping",
                        stored, self.schema_version)
        try:
            self.store.clear()
            self.store.write(self.VERSION_KEY, self.schema_version)
        except OSError as e:
            logger.warning("Could not reset metadata cache: %s", e)

    def get(self, key: str) -> Optional[Any]:
        entry = _decode_entry(self.store.read(key), key)
        if entry is None:
            return None
        if entry.schema_version != self.schema_version:
            self.store.delete(key)
            return None
        if not entry.is_fresh(self.clock(), self.ttl_seconds):
            return None
        return entry.payload

    def get_stale(self, key: str) -> Optional[Any]:
        entry = _decode_entry(self.store.read(key), key)
        if entry is None or entry.schema_version != self.schema_version:
            return None
        return entry.payload

    def set(self, key: str, payload: Any) -> None:
        if key == self.VERSION_KEY:
            raise ValueError(f"Reserved cache key: {key}")
        entry = CacheEntry(payload=payload, fetched_at=self.clock(), schema_version=self.schema_version)
        try:
            self.store.write(key, _encode_entry(entry))
        except OSError as e:
            logger.warning("Could not persist metadata cache entry %s: %s", key, e)

    def invalidate(self, key: Optional[str] = None) -> None:
        """Drop one entry, or every entry when key is None."""
        if key is not None:
            self.store.delete(key)
            return
        self.store.clear()
        self.store.write(self.VERSION_KEY, self.schema_version)


def open_caches(
    cache_dir: Union[str, Path],
    catalog_ttl_seconds: float,
    metadata_ttl_seconds: float,
    schema_version: str = CACHE_SCHEMA_VERSION,
    clock: Clock = time.time,
) -> Tuple[CatalogCache, MetadataCache]:
    """Create both caches below one directory."""
    root = Path(cache_dir).expanduser()
    catalog = CatalogCache(JsonFileStore(root / 'catalog'), catalog_ttl_seconds, schema_version, clock)
    metadata = MetadataCache(JsonFileStore(root / 'metadata'), metadata_ttl_seconds, schema_version, clock)
    return catalog, metadata

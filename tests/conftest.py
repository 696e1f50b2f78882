"""Shared test fixtures."""

import pytest

from hilfsmittel.catalog import CatalogClient, CategoryRegistry, TransportError, open_caches
from hilfsmittel.common import SearchSettings
from hilfsmittel.models import AttributeEntry, ProductRecord


class FakeClock:
    """Settable time source for TTL tests."""

    def __init__(self, now: float = 1_700_000_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeTransport:
    """
    Transport stand-in: path -> response.

    A response may be a value, an exception instance (raised), or a
    ResponseSequence consumed one element per call.
    """

    def __init__(self, responses=None):
        self.responses = dict(responses or {})
        self.calls = []

    def get_json(self, path):
        self.calls.append(path)
        if path not in self.responses:
            raise TransportError(f"HTTP 404 on {path}", status_code=404)
        response = self.responses[path]
        if isinstance(response, ResponseSequence):
            response = response.next()
        if isinstance(response, Exception):
            raise response
        return response

    def close(self):
        pass


class ResponseSequence:
    """Successive responses for one path; the last one repeats."""

    def __init__(self, *items):
        self.items = list(items)

    def next(self):
        return self.items.pop(0) if len(self.items) > 1 else self.items[0]


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def settings():
    """Default tuning constants with all waiting disabled."""
    return SearchSettings(base_delay=0, detail_batch_delay=0)


@pytest.fixture
def caches(tmp_path, clock):
    return open_caches(tmp_path / "cache", catalog_ttl_seconds=3600, metadata_ttl_seconds=7200, clock=clock)


@pytest.fixture
def transport():
    return FakeTransport()


@pytest.fixture
def sequence():
    """Build a ResponseSequence for FakeTransport."""
    return ResponseSequence


@pytest.fixture
def client(transport, caches, settings):
    catalog_cache, metadata_cache = caches
    return CatalogClient(transport, catalog_cache, metadata_cache, settings)


@pytest.fixture
def registry():
    return CategoryRegistry({
        "10": "Gehhilfen",
        "10.46": "Gehgestelle und Rollatoren",
        "10.46.04": "Rollatoren",
        "10.50": "Gehstöcke und Unterarmgehstützen",
        "13.20": "Hörgeräte",
        "18.50": "Rollstühle",
    })


@pytest.fixture
def make_record():
    """Factory for ProductRecord with sensible defaults."""
    counter = {"n": 0}

    def _make(code, name, attributes=None, **kwargs):
        counter["n"] += 1
        record_id = kwargs.pop("id", f"p{counter['n']}")
        if attributes is not None:
            attributes = [AttributeEntry(label, value) for label, value in attributes]
        return ProductRecord(id=record_id, code=code, name=name, attributes=attributes, **kwargs)

    return _make


@pytest.fixture
def raw_products():
    """Raw upstream product objects with the usual inconsistencies."""
    return [
        {"id": "a1", "zehnSteller": "10.46.04.0002", "bezeichnung": "Topro Troja 2G Rollator",
         "hersteller": {"name": "Topro"}, "beschreibung": "Leichtgewicht-Rollator"},
        {"produktId": "a2", "produktartNummer": "10.46.04.0003", "name": "Dietz Taima M",
         "herstellerName": "Dietz"},
        {"id": "a3", "code": "13.20.12.2189", "produktbezeichnung": "Phonak Audeo L90-R T", "preis": "784,94"},
        {"id": "a4", "zehnSteller": "10.50.01.0001", "bezeichnung": "Gehstock faltbar", "istGeloescht": True},
        {"id": "a5", "zehnSteller": "10.50.01.0002", "bezeichnung": "k.A."},
        {"zehnSteller": "18.50.02.0001", "bezeichnung": "Standardrollstuhl Basic"},
        "not an object",
    ]

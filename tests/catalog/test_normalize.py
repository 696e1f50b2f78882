"""Tests for hilfsmittel/catalog/normalize.py"""

import logging

from hilfsmittel.catalog.normalize import (
    coalesce,
    is_placeholder_name,
    normalize_catalog,
    normalize_record,
    parse_attributes,
    unwrap_payload,
)
from hilfsmittel.models import AttributeEntry


class TestNormalizeRecord:
    def test_primary_field_names(self):
        record = normalize_record({
            "id": "a1", "zehnSteller": "10.46.04.0002", "bezeichnung": " Topro Troja ",
            "hersteller": {"name": "Topro"}, "beschreibung": "Leicht",
        })
        assert record.id == "a1"
        assert record.code == "10.46.04.0002"
        assert record.name == "Topro Troja"
        assert record.manufacturer == "Topro"
        assert record.description == "Leicht"
        assert record.attributes is None

    def test_alternate_field_names(self):
        record = normalize_record({
            "produktId": "a2", "produktartNummer": "10.46.04.0003", "name": "Dietz Taima M",
            "herstellerName": "Dietz", "preis": "89,00",
        })
        assert (record.id, record.code, record.name) == ("a2", "10.46.04.0003", "Dietz Taima M")
        assert record.manufacturer == "Dietz"
        assert record.price == "89,00"

    def test_id_falls_back_to_code(self):
        record = normalize_record({"zehnSteller": "18.50.02.0001", "bezeichnung": "Rollstuhl"})
        assert record.id == "18.50.02.0001"

    def test_removed_entries_dropped(self):
        assert normalize_record({"id": "1", "bezeichnung": "x", "istGeloescht": True}) is None

    def test_placeholder_names_dropped(self):
        assert normalize_record({"id": "1", "bezeichnung": "k.A."}) is None
        assert normalize_record({"id": "1", "bezeichnung": "  "}) is None

    def test_no_identifier_dropped(self):
        assert normalize_record({"bezeichnung": "Rollator"}) is None

    def test_non_mapping_dropped(self):
        assert normalize_record("Rollator") is None

    def test_inline_attributes(self):
        record = normalize_record({
            "id": "1", "bezeichnung": "Rollator",
            "konstruktionsmerkmale": [{"label": "Gesamtbreite", "value": "65 cm"}],
        })
        assert record.attributes == [AttributeEntry("Gesamtbreite", "65 cm")]


class TestHelpers:
    def test_coalesce_skips_blank(self):
        assert coalesce({"a": "", "b": None, "c": "x"}, ("a", "b", "c")) == "x"
        assert coalesce({}, ("a",)) == ""

    def test_is_placeholder_name(self):
        assert is_placeholder_name("Platzhalter")
        assert not is_placeholder_name("Rollator")

    def test_parse_attributes(self):
        parsed = parse_attributes([
            {"label": "Gewicht", "value": "7 kg"},
            {"bezeichnung": "Material", "wert": "Aluminium"},
            {"label": "", "value": "ignored"},
            "junk",
        ])
        assert parsed == [AttributeEntry("Gewicht", "7 kg"), AttributeEntry("Material", "Aluminium")]

    def test_parse_attributes_not_a_list(self):
        assert parse_attributes(None) is None
        assert parse_attributes({"label": "x"}) is None

    def test_unwrap_payload(self):
        assert unwrap_payload([1, 2]) == [1, 2]
        assert unwrap_payload({"value": [3]}) == [3]
        assert unwrap_payload({"error": "x"}) == []
        assert unwrap_payload(None) == []


class TestNormalizeCatalog:
    def test_drops_unusable_entries(self, raw_products):
        records = normalize_catalog(raw_products)
        assert [r.id for r in records] == ["a1", "a2", "a3", "18.50.02.0001"]

    def test_logs_counts(self, raw_products, caplog):
        with caplog.at_level(logging.INFO, logger="hilfsmittel"):
            normalize_catalog(raw_products)
        assert "Normalized 4 catalog records (3 dropped)" in caplog.text

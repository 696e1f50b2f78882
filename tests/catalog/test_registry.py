"""Tests for hilfsmittel/catalog/registry.py"""

from hilfsmittel.catalog import CategoryRegistry


class TestLookup:
    def test_exact_match(self, registry):
        assert registry.lookup("13.20") == "Hörgeräte"

    def test_longest_prefix_wins(self, registry):
        assert registry.name_for("10.46.04.0002") == "Rollatoren"
        assert registry.name_for("10.46.01.0001") == "Gehgestelle und Rollatoren"

    def test_falls_back_to_top_level(self, registry):
        assert registry.name_for("10.99") == "Gehhilfen"

    def test_unknown_code_fallback(self, registry):
        assert registry.lookup("77.01") is None
        assert registry.name_for("77.01") == "Category 77.01"

    def test_empty_code(self, registry):
        assert registry.lookup("") is None

    def test_segment_boundaries_respected(self):
        registry = CategoryRegistry({"10.4": "wrong"})
        assert registry.lookup("10.46") is None


class TestConfiguredTable:
    def test_loads_from_config(self):
        registry = CategoryRegistry()
        assert len(registry) >= 60
        assert "13.20" in registry
        assert registry.name_for("13.20.12.2189") == "Hörgeräte mit externem Hörer"

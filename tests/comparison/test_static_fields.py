"""Tests for hilfsmittel/comparison/static_fields.py and patterns.py"""

import pytest

from hilfsmittel.common.constants import UNSPECIFIED
from hilfsmittel.comparison.patterns import clean_value, lookup_pattern, pattern_key_for_label
from hilfsmittel.comparison.static_fields import (
    COMPARISON_FIELDS,
    detect_comparison_category,
    detect_subcategory,
    merge_field_definitions,
    static_fields_for,
)
from hilfsmittel.models import AttributeEntry, ComparisonField


class TestDetectCategory:
    @pytest.mark.parametrize("code,category", [
        ("13.20.12.2189", "hearing"),
        ("10.46.04.0002", "mobility"),
        ("09.12.01.0001", "mobility"),
        ("25.50.01.0001", "vision"),
        ("04.40.04.0001", "bathroom"),
        ("33.40.01.0001", "general"),
        (None, "general"),
    ])
    def test_category(self, code, category):
        assert detect_comparison_category(code) == category

    @pytest.mark.parametrize("code,subcategory", [
        ("10.50.01.0001", "Gehstock"),
        ("10.50.02.0001", "Unterarmgehstuetzen"),
        ("10.46.04.0002", "Rollator"),
        ("10.46.03.0001", "Rollator"),
        ("10.46.01.0001", "Gehgestell"),
        ("10.46.05.0001", "Gehwagen"),
        ("13.20.12.2189", "default"),
        ("18.50.02.0001", None),
        ("", None),
    ])
    def test_subcategory(self, code, subcategory):
        assert detect_subcategory(code) == subcategory


class TestStaticFields:
    def test_subcategory_fields(self):
        fields = static_fields_for("mobility", "Rollator")
        assert fields[0].key == "max_weight"
        assert "brakes" in [f.key for f in fields]

    def test_walking_stick_has_no_wheels(self):
        keys = [f.key for f in static_fields_for("mobility", "Gehstock")]
        assert "wheels" not in keys and "brakes" not in keys

    def test_default_fallback(self):
        assert [f.key for f in static_fields_for("hearing", None)][:2] == ["power_level", "device_type"]

    def test_unknown(self):
        assert static_fields_for("mobility", "Rollstuhl") == []
        assert static_fields_for("general", None) == []

    def test_returns_copies(self):
        static_fields_for("mobility", "Rollator")[0].aliases.append("x")
        assert COMPARISON_FIELDS["mobility"]["Rollator"][0].aliases == []


class TestMergeFieldDefinitions:
    def test_static_first_then_new(self):
        static = [ComparisonField("weight", "Gewicht")]
        discovered = [ComparisonField("farbe", "Farbe", aliases=["Farbe"])]
        assert [f.key for f in merge_field_definitions(static, discovered)] == ["weight", "farbe"]

    def test_same_key_adds_aliases(self):
        static = [ComparisonField("total_width", "Gesamtbreite")]
        discovered = [ComparisonField("total_width", "Gesamtbreite",
                                      aliases=["Gesamtbreite", "Breite (gesamt, cm)"])]
        merged = merge_field_definitions(static, discovered)
        assert len(merged) == 1
        assert merged[0].aliases == ["Gesamtbreite", "Breite (gesamt, cm)"]
        assert static[0].aliases == []

    def test_same_label_case_insensitive(self):
        static = [ComparisonField("weight", "Gewicht")]
        discovered = [ComparisonField("gewicht", "gewicht", aliases=["gewicht"])]
        merged = merge_field_definitions(static, discovered)
        assert [f.key for f in merged] == ["weight"]


class TestPatterns:
    @pytest.mark.parametrize("label,key", [
        ("Max. Benutzergewicht", "max_weight"),
        ("Eigengewicht", "weight"),
        ("Gesamtbreite", "total_width"),
        ("Sitzhöhe von-bis", "seat_height"),
        ("Farbe", None),
    ])
    def test_key_for_mobility_label(self, label, key):
        assert pattern_key_for_label(label, "mobility") == key

    def test_unknown_category(self):
        assert pattern_key_for_label("Gewicht", "general") is None

    def test_specific_pattern_beats_attribute_order(self):
        attributes = [AttributeEntry("Gewicht", "12 kg"), AttributeEntry("Eigengewicht", "7 kg")]
        assert lookup_pattern(attributes, "weight", "mobility").value == "7 kg"

    def test_no_match(self):
        assert lookup_pattern([AttributeEntry("Farbe", "rot")], "weight", "mobility") is None

    def test_label_claimed_by_more_specific_field(self):
        attributes = [AttributeEntry("Max. Benutzergewicht", "150 kg")]
        assert lookup_pattern(attributes, "weight", "mobility") is None
        assert lookup_pattern(attributes, "max_weight", "mobility").value == "150 kg"

    def test_magnification_is_not_size(self):
        attributes = [AttributeEntry("Vergrößerung", "3-fach"), AttributeEntry("Größe", "10 x 5 cm")]
        assert lookup_pattern(attributes, "size", "vision").value == "10 x 5 cm"
        assert lookup_pattern(attributes[:1], "size", "vision") is None


class TestCleanValue:
    @pytest.mark.parametrize("value,expected", [
        (" vorhanden ", "Ja"),
        ("JA", "Ja"),
        ("nicht vorhanden", "Nein"),
        ("no", "Nein"),
        ("vorhanden, mit Feststellfunktion", "vorhanden, mit Feststellfunktion"),
    ])
    def test_boolean_field(self, value, expected):
        assert clean_value(value, "brakes") == expected

    def test_non_boolean_kept(self):
        assert clean_value(" 7,5 kg ", "weight") == "7,5 kg"
        assert clean_value("ja", "weight") == "ja"

    @pytest.mark.parametrize("value", [None, "", "k.A.", "-"])
    def test_empty(self, value):
        assert clean_value(value, "weight") == UNSPECIFIED

"""Tests for hilfsmittel/comparison/terms.py"""

import pytest

from hilfsmittel.comparison.terms import (
    DEFAULT_ICON,
    better_label,
    extract_terms,
    icon_for,
    is_empty_value,
    is_skipped_label,
    labels_similar,
)


class TestExtractTerms:
    def test_stop_words_dropped(self):
        assert extract_terms("Breite (gesamt, cm)") == {"breite", "gesamt"}

    def test_compound_word_yields_canonical_terms(self):
        assert {"breite", "gesamt"} <= extract_terms("Gesamtbreite")

    def test_synonyms_map_to_canonical(self):
        assert "batterie" in extract_terms("Akku-Laufzeit")
        assert "belastbarkeit" in extract_terms("Max. Benutzergewicht")

    def test_digits_and_single_letters_dropped(self):
        assert extract_terms("Stufe 3 x") == {"stufe"}

    def test_empty(self):
        assert extract_terms("") == frozenset()


class TestLabelsSimilar:
    @pytest.mark.parametrize("first,second", [
        ("Gesamtbreite", "Breite (gesamt, cm)"),
        ("Anzahl der Kanäle", "Kanäle"),
        ("Bremse", "Feststellbremsen"),
        ("Gewicht", "gewicht"),
        ("Max. Belastbarkeit", "Maximale Belastung"),
    ])
    def test_similar(self, first, second):
        assert labels_similar(first, second)
        assert labels_similar(second, first)

    @pytest.mark.parametrize("first,second", [
        ("Sitzhöhe", "Sitzbreite"),
        ("Gesamthöhe", "Gesamtbreite"),
        ("Material", "Farbe"),
    ])
    def test_not_similar(self, first, second):
        assert not labels_similar(first, second)


class TestBetterLabel:
    def test_prefers_label_without_parenthesis(self):
        assert better_label("Breite (gesamt, cm)", "Gesamtbreite") == "Gesamtbreite"
        assert better_label("Gesamtbreite", "Breite (gesamt, cm)") == "Gesamtbreite"

    def test_prefers_label_without_hedging(self):
        assert better_label("ca. Gewicht", "Gewicht") == "Gewicht"
        assert better_label("Gewicht", "Gewicht optional") == "Gewicht"

    def test_prefers_much_shorter_label(self):
        assert better_label("Maximale Belastbarkeit des Benutzers", "Belastbarkeit") == "Belastbarkeit"

    def test_prefers_standard_prefix(self):
        assert better_label("Höchstgewicht", "Max. Gewicht") == "Max. Gewicht"
        assert better_label("Max. Gewicht", "Höchstgewicht") == "Max. Gewicht"

    def test_prefers_shorter_then_first_seen(self):
        assert better_label("Sitzhöhen", "Sitzhöhe") == "Sitzhöhe"
        assert better_label("Kanäle", "Kanäle") == "Kanäle"


class TestIcons:
    def test_known_label(self):
        assert icon_for("Sitzhöhe") == "💺"
        assert icon_for("Bereifung vorne") == "🛞"

    def test_default(self):
        assert icon_for("Farbe") == DEFAULT_ICON


class TestSkipAndEmpty:
    @pytest.mark.parametrize("label", ["", "   ", None, "Sonstiges", "Bemerkung zur Montage", "Freitext"])
    def test_skipped_labels(self, label):
        assert is_skipped_label(label)

    def test_regular_label_not_skipped(self):
        assert not is_skipped_label("Sitzhöhe")

    @pytest.mark.parametrize("value", [None, "", " - ", "k.A.", "K. A.", "n/a", "Keine Angabe"])
    def test_empty_values(self, value):
        assert is_empty_value(value)

    @pytest.mark.parametrize("value", ["0", "nein", "65 cm"])
    def test_real_values(self, value):
        assert not is_empty_value(value)

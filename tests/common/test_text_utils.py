"""Tests for hilfsmittel/common/text_utils.py"""

from hilfsmittel.common.text_utils import fold_diacritics, german_sort_key, normalize_key


class TestFoldDiacritics:
    def test_umlauts(self):
        assert fold_diacritics("Höhe Größe Rückenlehne") == "Hohe Grosse Ruckenlehne"

    def test_uppercase_umlauts(self):
        assert fold_diacritics("ÄÖÜ") == "AOU"

    def test_accents(self):
        assert fold_diacritics("Café") == "Cafe"

    def test_empty(self):
        assert fold_diacritics("") == ""


class TestNormalizeKey:
    def test_collapses_punctuation(self):
        assert normalize_key("Breite (gesamt, cm)") == "breite_gesamt_cm"

    def test_folds_diacritics(self):
        assert normalize_key("Empf. Körpergröße") == "empf_korpergrosse"

    def test_strips_edges(self):
        assert normalize_key("  -Max. Belastbarkeit- ") == "max_belastbarkeit"

    def test_only_punctuation(self):
        assert normalize_key("---") == ""


class TestGermanSortKey:
    def test_umlaut_sorts_with_base_letter(self):
        words = ["Zange", "Öse", "Ofen", "Apfel"]
        assert sorted(words, key=german_sort_key) == ["Apfel", "Ofen", "Öse", "Zange"]

    def test_case_insensitive(self):
        assert sorted(["b", "A", "a"], key=german_sort_key) == ["A", "a", "b"]

    def test_codes_sort_numerically_by_segment_text(self):
        codes = ["13.20.12", "10.46.04", "10.46.01"]
        assert sorted(codes, key=german_sort_key) == ["10.46.01", "10.46.04", "13.20.12"]

    def test_none_is_empty(self):
        assert german_sort_key(None) == ("", "")

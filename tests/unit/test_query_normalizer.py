"""Unit tests for query normalization and term preparation."""

from docvault.application.services.query_normalizer import (
    exact_terms,
    normalize_query,
    prefix_terms,
)


class TestNormalizeQuery:
    def test_empty_and_none(self) -> None:
        assert normalize_query(None).is_empty
        assert normalize_query("   ").is_empty

    def test_lowercases_and_splits(self) -> None:
        assert normalize_query("Quarterly Invoice").tokens == ("quarterly", "invoice")

    def test_camel_case_split(self) -> None:
        assert normalize_query("invoiceMarch2024").tokens == ("invoice", "march2024")

    def test_separators_become_spaces(self) -> None:
        assert normalize_query("tax_return-2023.final").tokens == ("tax", "return", "2023", "final")

    def test_short_tokens_dropped(self) -> None:
        assert normalize_query("a b cd").tokens == ("cd",)

    def test_punctuation_removed_apostrophe_kept_inside(self) -> None:
        assert normalize_query("o'brien's (draft)!").tokens == ("o'brien's", "draft")

    def test_quoted_query_is_phrase(self) -> None:
        query = normalize_query('"annual report"')
        assert query.is_phrase is True
        assert query.text == "annual report"

    def test_unquoted_is_not_phrase(self) -> None:
        assert normalize_query("annual report").is_phrase is False


class TestExactTerms:
    def test_stop_words_and_numbers_dropped(self) -> None:
        assert exact_terms(("the", "invoice", "2024", "and", "march"), 10) == ["invoice", "march"]

    def test_apostrophes_stripped_from_lexemes(self) -> None:
        assert exact_terms(("o'brien",), 10) == ["obrien"]

    def test_deduplicated_and_capped(self) -> None:
        tokens = ("alpha", "beta", "alpha", "gamma", "delta")
        assert exact_terms(tokens, 3) == ["alpha", "beta", "gamma"]

    def test_only_stop_words_yields_nothing(self) -> None:
        assert exact_terms(("the", "and"), 10) == []


class TestPrefixTerms:
    def test_min_length(self) -> None:
        assert prefix_terms(("in", "invoic", "ma")) == ["invoic"]

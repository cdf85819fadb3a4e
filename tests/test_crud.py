"""Tests for the service operations used by the HTTP layer."""

import pytest

from string_analyzer import crud
from string_analyzer.errors import (
    ConflictError,
    InvalidQueryError,
    InvalidTypeError,
    NotFoundError,
    ValidationError,
)
from string_analyzer.schemas import FilterCriteria
from string_analyzer.utils import analyze_string


class TestCreate:
    def test_create_and_get(self, store):
        record = crud.create_string_analysis(store, "level")
        assert crud.get_string_by_value(store, "level") == record
        assert record.properties == analyze_string("level").properties

    def test_duplicate(self, store):
        crud.create_string_analysis(store, "level")
        with pytest.raises(ConflictError):
            crud.create_string_analysis(store, "level")
        assert len(store) == 1

    @pytest.mark.parametrize("value", [None, "", "   ", "\n\t"])
    def test_missing_or_blank(self, store, value):
        with pytest.raises(ValidationError) as exc_info:
            crud.create_string_analysis(store, value)
        assert not isinstance(exc_info.value, InvalidTypeError)
        assert len(store) == 0

    @pytest.mark.parametrize("value", [123, 1.5, True, ["a"], {"a": 1}])
    def test_wrong_type(self, store, value):
        with pytest.raises(InvalidTypeError):
            crud.create_string_analysis(store, value)
        assert len(store) == 0

    def test_surrounding_whitespace_is_kept(self, store):
        record = crud.create_string_analysis(store, "  padded  ")
        assert record.value == "  padded  "
        assert crud.get_string_by_value(store, "  padded  ") == record


class TestRead:
    def test_get_missing(self, store):
        with pytest.raises(NotFoundError):
            crud.get_string_by_value(store, "missing")

    def test_get_all_without_criteria(self, seeded_store):
        assert crud.get_all_strings(seeded_store) == seeded_store.all()

    def test_get_all_with_criteria(self, seeded_store):
        result = crud.get_all_strings(seeded_store, FilterCriteria(is_palindrome=True, min_length=5))
        assert [r.value for r in result] == ["level", "Racecar"]

    def test_natural_language(self, seeded_store):
        records, filters = crud.filter_by_natural_language(seeded_store, "single word palindromes")
        assert filters == {"is_palindrome": True, "word_count": 1}
        assert [r.value for r in records] == ["level", "Racecar", "noon", "z"]

    def test_natural_language_empty_store(self, store):
        records, filters = crud.filter_by_natural_language(store, "palindrome")
        assert records == []
        assert filters == {"is_palindrome": True}

    def test_natural_language_invalid(self, seeded_store):
        with pytest.raises(InvalidQueryError):
            crud.filter_by_natural_language(seeded_store, "")

    def test_natural_language_whitespace(self, seeded_store):
        records, filters = crud.filter_by_natural_language(seeded_store, "  ")
        assert filters == {}
        assert records == seeded_store.all()


class TestDelete:
    def test_end_to_end(self, store):
        record = crud.create_string_analysis(store, "level")
        assert record.properties.length == 5
        assert record.properties.is_palindrome is True
        assert record.properties.word_count == 1
        assert record.properties.unique_characters == 3

        records, _ = crud.filter_by_natural_language(store, "palindrome")
        assert "level" in [r.value for r in records]

        crud.delete_string(store, "level")
        with pytest.raises(NotFoundError):
            crud.get_string_by_value(store, "level")

    def test_delete_missing(self, seeded_store):
        before = len(seeded_store)
        with pytest.raises(NotFoundError):
            crud.delete_string(seeded_store, "missing")
        assert len(seeded_store) == before

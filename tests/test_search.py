import unicodedata

import pytest

from libsearch.errors import ValidationFailure
from libsearch.models import Record
from libsearch.search import SearchPolicy, filter_records, paginate, validate_query


def _books(*titles):
    return [Record(id=str(i), fields={"서명": t, "저자": ""}) for i, t in enumerate(titles)]


def test_base_match_is_case_and_whitespace_insensitive():
    records = _books("FOO BAR", "something else")
    assert [r.id for r in filter_records(records, "서명", " foo   bar ")] == ["0"]


def test_no_space_variant_only_in_lenient_mode():
    records = _books("foo bar")
    assert filter_records(records, "서명", "foobar") == []
    assert [r.id for r in filter_records(records, "서명", "foobar", whitespace_insensitive=True)] == ["0"]


def test_lenient_mode_keeps_base_matches():
    records = _books("foo  bar baz")
    assert filter_records(records, "서명", "bar b", whitespace_insensitive=True) == records


def test_results_keep_input_order():
    records = _books("b 해리", "a", "해리 포터", "c 해리")
    assert [r.id for r in filter_records(records, "서명", "해리")] == ["0", "2", "3"]


def test_absent_field_never_matches():
    records = _books("해리 포터")
    assert filter_records(records, "출판사", "해리") == []


def test_empty_query_matches_nothing():
    assert filter_records(_books("anything"), "서명", "   ") == []


def test_pagination_bounds():
    results = _books(*[f"t{i}" for i in range(23)])

    page = paginate(results, 1, 10)
    assert page.total_pages == 3
    assert page.total_results == 23
    assert [r.id for r in page.items] == [str(i) for i in range(10)]

    assert paginate(results, 0, 10).page == 1
    last = paginate(results, 99, 10)
    assert last.page == 3
    assert [r.id for r in last.items] == ["20", "21", "22"]


def test_pagination_of_empty_results():
    page = paginate([], 5)
    assert page.page == 1
    assert page.total_pages == 1
    assert page.items == []


def test_filter_and_paginate_are_idempotent():
    records = _books(*[f"book {i}" for i in range(15)])
    snapshot = [r.model_dump() for r in records]

    first = paginate(filter_records(records, "서명", "BOOK"), 2)
    second = paginate(filter_records(records, "서명", "BOOK"), 2)

    assert first == second
    assert [r.model_dump() for r in records] == snapshot


def test_validate_query_trims():
    assert validate_query("  데미안 ") == "데미안"


@pytest.mark.parametrize("query", ["", "   ", "a", " 한 "])
def test_strict_minimum_rejects(query):
    with pytest.raises(ValidationFailure):
        validate_query(query, min_length=2)


def test_lenient_minimum_accepts_one_character():
    assert validate_query(" a ", min_length=1) == "a"
    with pytest.raises(ValidationFailure):
        validate_query("  ", min_length=1)


def test_strict_minimum_counts_graphemes_not_code_points():
    two_glyphs = unicodedata.normalize("NFD", "한글")
    assert validate_query(two_glyphs, min_length=2) == two_glyphs

    one_glyph = unicodedata.normalize("NFD", "한")
    assert len(one_glyph) >= 2
    with pytest.raises(ValidationFailure):
        validate_query(one_glyph, min_length=2)


def test_policy_for_mode():
    assert SearchPolicy.for_mode("strict") == SearchPolicy(min_length=2, whitespace_insensitive=False)
    assert SearchPolicy.for_mode("lenient") == SearchPolicy(min_length=1, whitespace_insensitive=True)

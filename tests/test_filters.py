import pytest

from string_analyzer.errors import ConflictingFilters, InvalidInput
from string_analyzer.filters import apply_filters, check_conflicts, parse_filter_params


def values(result):
    return [r.value for r in result.data]


def test_no_predicates_returns_input_unchanged(records):
    result = apply_filters(records, {})
    assert result.data == records
    assert result.applied == {}


def test_length_bounds_are_inclusive_and_conjunctive(records):
    result = apply_filters(records, {"min_length": 5, "max_length": 5})
    assert values(result) == ["level", "zebra"]
    assert all(r.properties.length == 5 for r in result.data)


def test_palindrome_and_word_count(records):
    result = apply_filters(records, {"is_palindrome": True, "word_count": 1})
    assert values(result) == ["racecar", "level"]


def test_palindrome_false(records):
    result = apply_filters(records, {"is_palindrome": False})
    assert values(result) == ["hello world", "zebra", "noon at noon"]


def test_contains_character_is_case_insensitive(records):
    assert values(apply_filters(records, {"contains_character": "P"})) == ["A man a plan a canal Panama"]
    assert values(apply_filters(records, {"contains_character": "z"})) == ["zebra"]


def test_applied_echo_is_canonical_and_ordered(records):
    result = apply_filters(records, {
        "contains_character": "A",
        "word_count": "1",
        "min_length": "3",
        "is_palindrome": "TRUE",
    })
    assert result.applied == {
        "is_palindrome": True,
        "min_length": 3,
        "word_count": 1,
        "contains_character": "a",
    }
    assert list(result.applied) == ["is_palindrome", "min_length", "word_count", "contains_character"]
    assert values(result) == ["racecar"]


def test_filter_preserves_relative_order(records):
    reversed_records = list(reversed(records))
    result = apply_filters(reversed_records, {"word_count": 1})
    assert values(result) == ["zebra", "level", "racecar"]


@pytest.mark.parametrize("params", [
    {"colour": "red"},
    {"is_palindrome": "yes"},
    {"min_length": "-1"},
    {"max_length": "ten"},
    {"word_count": "1.5"},
    {"word_count": True},
    {"contains_character": "ab"},
    {"contains_character": ""},
])
def test_invalid_params_are_rejected(params):
    with pytest.raises(InvalidInput):
        parse_filter_params(params)


def test_unknown_param_is_named_in_error():
    with pytest.raises(InvalidInput) as excinfo:
        parse_filter_params({"min_length": "2", "sort": "asc"})
    assert "sort" in excinfo.value.message


def test_check_conflicts():
    check_conflicts({"min_length": 3, "max_length": 3})
    check_conflicts({"min_length": 30})
    with pytest.raises(ConflictingFilters):
        check_conflicts({"min_length": 11, "max_length": 4})

"""
Structured filter engine.

Every filter is one row of ``FILTERS``: its name, a coercer that turns a raw
query-string value (or an already typed value from the interpreter) into the
canonical type, and a predicate over a ``StringRecord``. Filters compose with
AND and are evaluated in table order; the order only shows up in the
``applied`` echo.
"""
from typing import Any, Callable, Dict, List, Mapping, NamedTuple, Sequence

from string_analyzer.errors import ConflictingFilters, InvalidInput
from string_analyzer.schemas import StringRecord


def _to_bool(name: str, value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.lower() in ("true", "false"):
        return value.lower() == "true"
    raise InvalidInput(f"Invalid value for {name} (must be true or false)")


def _to_uint(name: str, value: Any) -> int:
    if isinstance(value, int) and not isinstance(value, bool) and value >= 0:
        return value
    if isinstance(value, str) and value.isascii() and value.isdigit():
        return int(value)
    raise InvalidInput(f"Invalid value for {name} (must be a non-negative integer)")


def _to_char(name: str, value: Any) -> str:
    if isinstance(value, str) and len(value) == 1:
        return value.lower()
    raise InvalidInput(f"Invalid value for {name} (must be a single character)")


class Filter(NamedTuple):
    name: str
    coerce: Callable[[str, Any], Any]
    matches: Callable[[StringRecord, Any], bool]


FILTERS: List[Filter] = [
    Filter("is_palindrome", _to_bool, lambda r, v: r.properties.is_palindrome == v),
    Filter("min_length", _to_uint, lambda r, v: r.properties.length >= v),
    Filter("max_length", _to_uint, lambda r, v: r.properties.length <= v),
    Filter("word_count", _to_uint, lambda r, v: r.properties.word_count == v),
    Filter("contains_character", _to_char, lambda r, v: v in r.value.lower()),
]

FILTER_NAMES = tuple(f.name for f in FILTERS)


class FilterResult(NamedTuple):
    data: List[StringRecord]
    applied: Dict[str, Any]


def parse_filter_params(params: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Validate a predicate set and coerce it to canonical types.

    Unknown names and malformed values raise ``InvalidInput``. The result is
    ordered by evaluation order, not by the order of ``params``.
    """
    unknown = [name for name in params if name not in FILTER_NAMES]
    if unknown:
        raise InvalidInput(f"Unknown filter parameter(s): {', '.join(sorted(unknown))}")

    return {
        f.name: f.coerce(f.name, params[f.name])
        for f in FILTERS
        if f.name in params
    }


def check_conflicts(predicates: Mapping[str, Any]) -> None:
    """Raise ConflictingFilters when the length bounds cannot both hold."""
    min_length = predicates.get("min_length")
    max_length = predicates.get("max_length")
    if min_length is not None and max_length is not None and min_length > max_length:
        raise ConflictingFilters(
            f"Conflicting filters: min_length ({min_length}) is greater than max_length ({max_length})"
        )


def apply_filters(records: Sequence[StringRecord], predicates: Mapping[str, Any]) -> FilterResult:
    """Keep the records satisfying every predicate, preserving input order"""
    applied = parse_filter_params(predicates)
    active = [(f.matches, applied[f.name]) for f in FILTERS if f.name in applied]

    data = [
        record for record in records
        if all(matches(record, value) for matches, value in active)
    ]
    return FilterResult(data=data, applied=applied)

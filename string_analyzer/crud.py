from datetime import datetime, timezone
from typing import Any, Dict, Mapping, Tuple
import logging

from string_analyzer.errors import InvalidInput, InvalidValueType, StringAlreadyExists, StringNotFound
from string_analyzer.filters import FilterResult, apply_filters, parse_filter_params
from string_analyzer.interpreter import interpret_or_raise
from string_analyzer.schemas import StringProperties, StringRecord
from string_analyzer.store import RecordStore
from string_analyzer.utils import analyze_string, compute_sha256

logger = logging.getLogger(__name__)


def normalize_value(value: Any) -> str:
    """Validate a submitted value and trim it; the trimmed form is what gets hashed"""
    if value is None:
        raise InvalidInput("Invalid request body or missing 'value' field")
    if not isinstance(value, str):
        raise InvalidValueType()
    value = value.strip()
    if not value:
        raise InvalidInput("Empty string not allowed")
    return value


def create_string(store: RecordStore, value: Any) -> StringRecord:
    """Analyze and store a string. Raises StringAlreadyExists on duplicates."""
    value = normalize_value(value)
    properties = StringProperties(**analyze_string(value))
    string_id = properties.sha256_hash

    if store.get(string_id) is not None:
        raise StringAlreadyExists()

    record = StringRecord(
        id=string_id,
        value=value,
        properties=properties,
        created_at=datetime.now(timezone.utc),
    )
    store.put(string_id, record)
    logger.info(f"Stored string {string_id}")
    return record


def get_string(store: RecordStore, value: str) -> StringRecord:
    """Get a stored string by its value"""
    record = store.get(compute_sha256(value.strip()))
    if record is None:
        raise StringNotFound()
    return record


def delete_string(store: RecordStore, value: str) -> None:
    """Delete a stored string by its value"""
    string_id = compute_sha256(value.strip())
    if store.get(string_id) is None:
        raise StringNotFound()
    store.delete(string_id)
    logger.info(f"Deleted string {string_id}")


def list_strings(store: RecordStore, params: Mapping[str, Any]) -> FilterResult:
    """Get all strings matching the structured filters in params"""
    # validate before paying for the full scan
    predicates = parse_filter_params(params)
    return apply_filters(store.list_all(), predicates)


def filter_by_natural_language(store: RecordStore, query: str) -> Tuple[FilterResult, Dict[str, Any]]:
    """Interpret query and apply the resulting filters; returns (result, parsed filters)"""
    if query is None or not query.strip():
        raise InvalidInput("Missing 'query' parameter")
    parsed = interpret_or_raise(query)
    return apply_filters(store.list_all(), parsed), parsed

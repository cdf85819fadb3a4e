import logging
from typing import Any, Dict, List, Tuple

from string_analyzer.database import StringStore
from string_analyzer.errors import InvalidTypeError, NotFoundError, ValidationError
from string_analyzer.filters import Criteria, apply_filters
from string_analyzer.models import AnalysisRecord
from string_analyzer.natural_language import parse_natural_language_query
from string_analyzer.utils import analyze_string

logger = logging.getLogger(__name__)


def create_string_analysis(store: StringStore, value: Any) -> AnalysisRecord:
    """Validate, analyze and store a new string"""
    if value is None:
        raise ValidationError("Invalid request body or missing 'value' field")

    if not isinstance(value, str):
        raise InvalidTypeError("Invalid data type for \"value\" (must be string)")

    if not value.strip():
        raise ValidationError("Value must be a non-empty string")

    return store.insert(analyze_string(value))


def get_string_by_value(store: StringStore, value: str) -> AnalysisRecord:
    """Get string analysis by value"""
    record = store.find_by_value(value)
    if record is None:
        raise NotFoundError("String does not exist in the system")
    return record


def get_all_strings(store: StringStore, criteria: Criteria = None) -> List[AnalysisRecord]:
    """Get all strings with optional filters"""
    return apply_filters(store.all(), criteria)


def filter_by_natural_language(store: StringStore, query: Any) -> Tuple[List[AnalysisRecord], Dict[str, Any]]:
    """
    Filter strings using a natural language query.

    Returns the matching records together with the parsed filters. An empty
    result is a valid outcome, not an error.
    """
    filters = parse_natural_language_query(query)
    records = apply_filters(store.all(), filters)
    logger.info(f"Natural language query {query!r} matched {len(records)} strings")
    return records, filters


def delete_string(store: StringStore, value: str) -> None:
    """Delete string analysis by value"""
    store.delete_by_value(value)

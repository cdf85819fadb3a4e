from typing import Any, Iterable, List, Mapping, Union

from string_analyzer.models import AnalysisRecord
from string_analyzer.schemas import FilterCriteria

Criteria = Union[FilterCriteria, Mapping[str, Any], None]


def to_criteria(criteria: Criteria) -> FilterCriteria:
    """Coerce a mapping (unknown keys dropped) or None into FilterCriteria"""
    if criteria is None:
        return FilterCriteria()
    if isinstance(criteria, FilterCriteria):
        return criteria
    return FilterCriteria.model_validate(dict(criteria))


def matches(record: AnalysisRecord, criteria: FilterCriteria) -> bool:
    """True if the record satisfies every supplied predicate"""
    props = record.properties

    if criteria.is_palindrome is not None and props.is_palindrome != criteria.is_palindrome:
        return False

    if criteria.min_length is not None and props.length < criteria.min_length:
        return False

    if criteria.max_length is not None and props.length > criteria.max_length:
        return False

    if criteria.word_count is not None and props.word_count != criteria.word_count:
        return False

    if criteria.contains_character is not None:
        # Substring test, not restricted to a single character
        if criteria.contains_character.lower() not in record.value.lower():
            return False

    return True


def apply_filters(records: Iterable[AnalysisRecord], criteria: Criteria = None) -> List[AnalysisRecord]:
    """Return the records satisfying all supplied criteria, preserving order"""
    criteria = to_criteria(criteria)
    return [record for record in records if matches(record, criteria)]

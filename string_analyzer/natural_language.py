"""
Heuristic natural language filtering.

A query is lowercased and run through a fixed, ordered list of rules. Each
rule is a (pattern, builder) pair: when the pattern matches, the builder
turns the match into one or more filter criteria. Rules are independent, so
a query may trigger any subset of them, and a rule that does not match adds
no constraint.

Examples:
- "all single word palindromic strings" -> {word_count: 1, is_palindrome: true}
- "strings longer than 10 characters" -> {min_length: 11}
- "strings containing the letter z" -> {contains_character: "z"}
"""
import logging
import re
from typing import Any, Callable, Dict, Iterable, List, Tuple

from string_analyzer.errors import InvalidQueryError
from string_analyzer.filters import apply_filters
from string_analyzer.models import AnalysisRecord

logger = logging.getLogger(__name__)

NUMBER_WORDS = {
    "single": 1,
    "one": 1,
    "two": 2,
    "three": 3,
    "four": 4,
    "five": 5,
    "six": 6,
    "seven": 7,
    "eight": 8,
    "nine": 9,
    "ten": 10,
}

_COUNT = r"(\d+|" + "|".join(NUMBER_WORDS) + r")"


def _to_int(token: str) -> int:
    if token.isdigit():
        return int(token)
    return NUMBER_WORDS[token]


def _palindrome(match: re.Match) -> Dict[str, Any]:
    return {"is_palindrome": True}


def _longer_than(match: re.Match) -> Dict[str, Any]:
    # "longer than N" is strict: length > N
    return {"min_length": int(match.group(1)) + 1}


def _shorter_than(match: re.Match) -> Dict[str, Any]:
    # "shorter than N" is strict: length < N
    return {"max_length": int(match.group(1)) - 1}


def _word_count(match: re.Match) -> Dict[str, Any]:
    return {"word_count": _to_int(match.group(1))}


def _contains(match: re.Match) -> Dict[str, Any]:
    token = next(group for group in match.groups() if group is not None)
    return {"contains_character": token}


Rule = Tuple[re.Pattern, Callable[[re.Match], Dict[str, Any]]]

RULES: List[Rule] = [
    (re.compile(r"palindrom"), _palindrome),
    (re.compile(r"longer than (\d+)"), _longer_than),
    (re.compile(r"shorter than (\d+)"), _shorter_than),
    (re.compile(r"\b" + _COUNT + r"[\s-]+words?\b"), _word_count),
    (
        re.compile(
            r"\bcontain(?:s|ing)?\s+"
            r"(?:the\s+)?"
            r"(?:(?:word|letter|character|substring)\s+)?"
            r"(?:\"([^\"]+)\"|'([^']+)'|([a-z0-9]+))"
        ),
        _contains,
    ),
]


def parse_natural_language_query(query: Any) -> Dict[str, Any]:
    """
    Parse natural language query into filter criteria.

    Returns an empty dict when nothing matched. Raises InvalidQueryError when
    the query is not a string or is empty. A whitespace-only query matches
    no rule and so adds no constraint.
    """
    if not isinstance(query, str) or not query:
        raise InvalidQueryError("Query must be a non-empty string")

    text = query.lower()
    filters: Dict[str, Any] = {}

    for pattern, build in RULES:
        match = pattern.search(text)
        if match:
            filters.update(build(match))

    logger.debug(f"Parsed query {query!r} into {filters}")
    return filters


def interpret(records: Iterable[AnalysisRecord], query: Any) -> List[AnalysisRecord]:
    """Filter records with the criteria implied by a natural language query"""
    return apply_filters(records, parse_natural_language_query(query))

import hashlib
from collections import Counter
from datetime import datetime, timezone
from typing import Dict

from string_analyzer.models import AnalysisRecord, StringProperties


def compute_sha256(text: str) -> str:
    """Compute SHA-256 hash of a string"""
    return hashlib.sha256(text.encode("utf-8", "surrogatepass")).hexdigest()


def count_code_units(text: str) -> int:
    """Length in UTF-16 code units, so astral characters such as emoji count as 2"""
    return len(text.encode("utf-16-le", "surrogatepass")) // 2


def is_palindrome(text: str) -> bool:
    """Check if string is palindrome (case-insensitive, spaces and punctuation kept)"""
    lowered = text.lower()
    return lowered == lowered[::-1]


def count_unique_characters(text: str) -> int:
    """Count distinct characters in string"""
    return len(set(text))


def count_words(text: str) -> int:
    """Count words separated by runs of whitespace"""
    trimmed = text.strip()
    if not trimmed:
        return 0
    return len(trimmed.split())


def get_character_frequency(text: str) -> Dict[str, int]:
    """Get frequency map of each character"""
    return dict(Counter(text))


def utc_timestamp() -> str:
    """Current UTC instant as a sortable ISO 8601 string, e.g. 2025-10-20T12:00:00.000Z"""
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def analyze_string(value: str) -> AnalysisRecord:
    """Analyze a string and return a record with all computed properties"""
    sha256_hash = compute_sha256(value)

    return AnalysisRecord(
        id=sha256_hash,
        value=value,
        properties=StringProperties(
            length=count_code_units(value),
            is_palindrome=is_palindrome(value),
            unique_characters=count_unique_characters(value),
            word_count=count_words(value),
            sha256_hash=sha256_hash,
            character_frequency_map=get_character_frequency(value),
        ),
        created_at=utc_timestamp(),
    )

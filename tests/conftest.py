"""
Shared pytest fixtures for string analyzer tests.

Every store is backed by a file in pytest's tmp_path, so tests never touch
the DATA_FILE configured for the service.
"""

import pytest
from fastapi.testclient import TestClient

from string_analyzer.database import StringStore, get_store
from string_analyzer.main import app
from string_analyzer.utils import analyze_string

SAMPLE_VALUES = [
    "level",
    "Hello",
    "Racecar",
    "a man a plan",
    "noon",
    "the quick brown fox",
    "Was it a cat I saw",
    "z",
]


@pytest.fixture
def data_file(tmp_path):
    """Path of a not-yet-existing data file."""
    return tmp_path / "data.json"


@pytest.fixture
def store(data_file):
    """Empty store backed by a temp file."""
    return StringStore(str(data_file))


@pytest.fixture
def records():
    """Analyzed sample records, not stored anywhere."""
    return [analyze_string(value) for value in SAMPLE_VALUES]


@pytest.fixture
def seeded_store(store, records):
    """Store containing every sample record, in SAMPLE_VALUES order."""
    for record in records:
        store.insert(record)
    return store


@pytest.fixture
def client(store):
    """TestClient whose endpoints use the temp-file store."""
    app.dependency_overrides[get_store] = lambda: store
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()

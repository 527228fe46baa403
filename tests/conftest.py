from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient

from string_analyzer.main import app
from string_analyzer.schemas import StringProperties, StringRecord
from string_analyzer.store import InMemoryKeyValueStore, RecordStore, get_store
from string_analyzer.utils import analyze_string


def make_record(value: str) -> StringRecord:
    properties = StringProperties(**analyze_string(value))
    return StringRecord(
        id=properties.sha256_hash,
        value=value,
        properties=properties,
        created_at=datetime(2025, 10, 20, tzinfo=timezone.utc),
    )


@pytest.fixture
def store():
    return RecordStore(InMemoryKeyValueStore())


@pytest.fixture
def client(store):
    app.dependency_overrides[get_store] = lambda: store
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def records():
    values = ["racecar", "hello world", "A man a plan a canal Panama", "level", "zebra", "noon at noon"]
    return [make_record(v) for v in values]

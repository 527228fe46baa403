import json

import pytest
from pydantic import ValidationError
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from string_analyzer.database import init_db
from string_analyzer.errors import CorruptRecord
from string_analyzer.store import (
    InMemoryKeyValueStore,
    RecordStore,
    SQLKeyValueStore,
    build_record_store,
)


@pytest.fixture
def sql_kv():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(bind=engine)
    return SQLKeyValueStore(sessionmaker(autocommit=False, autoflush=False, bind=engine))


@pytest.fixture(params=["memory", "sql"])
def kv(request, sql_kv):
    if request.param == "memory":
        return InMemoryKeyValueStore()
    return sql_kv


def test_kv_contract(kv):
    assert kv.get("missing") is None
    kv.put("a", "1")
    kv.put("b", "2")
    assert kv.get("a") == "1"
    assert sorted(k["name"] for k in kv.list()["keys"]) == ["a", "b"]
    kv.put("a", "3")
    assert kv.get("a") == "3"
    kv.delete("a")
    kv.delete("a")
    assert kv.get("a") is None
    assert kv.list() == {"keys": [{"name": "b"}]}


def test_record_store_round_trip(kv, records):
    store = RecordStore(kv)
    for record in records:
        store.put(record.id, record)

    assert store.get(records[0].id) == records[0]
    assert sorted(r.value for r in store.list_all()) == sorted(r.value for r in records)

    store.delete(records[0].id)
    assert store.get(records[0].id) is None
    assert len(store.list_all()) == len(records) - 1


def test_stored_id_matches_digest_of_value(kv, records):
    store = RecordStore(kv)
    store.put(records[0].id, records[0])
    loaded = store.get(records[0].id)
    assert loaded.id == loaded.properties.sha256_hash


def test_malformed_payload_fails_closed(records):
    kv = InMemoryKeyValueStore()
    kv.put("bad", "{not json")
    with pytest.raises(CorruptRecord):
        RecordStore(kv).get("bad")


def test_tampered_value_fails_closed(records):
    kv = InMemoryKeyValueStore()
    payload = json.loads(records[0].model_dump_json())
    payload["value"] = "something else"
    kv.put(records[0].id, json.dumps(payload))
    with pytest.raises(CorruptRecord):
        RecordStore(kv).get(records[0].id)


def test_record_under_wrong_key_fails_closed(records):
    kv = InMemoryKeyValueStore()
    kv.put(records[1].id, records[0].model_dump_json())
    with pytest.raises(CorruptRecord):
        RecordStore(kv).list_all()


def test_listing_skips_keys_that_disappear(records):
    class VanishingStore(InMemoryKeyValueStore):
        def get(self, key):
            if key == records[0].id:
                return None
            return super().get(key)

    store = RecordStore(VanishingStore())
    store.put(records[0].id, records[0])
    store.put(records[1].id, records[1])
    assert [r.value for r in store.list_all()] == [records[1].value]


def test_build_record_store_memory_backend():
    store = build_record_store("memory")
    assert isinstance(store.kv, InMemoryKeyValueStore)


def test_build_record_store_rejects_unknown_backend():
    with pytest.raises(ValueError):
        build_record_store("redis")


def test_records_are_immutable(records):
    with pytest.raises(ValidationError):
        records[0].value = "changed"
    with pytest.raises(ValidationError):
        records[0].properties.length = 0

"""
Persistence for analyzed strings.

Records live in a plain key-value collaborator (``KeyValueStore``) as JSON
strings keyed by their SHA-256 hash. ``RecordStore`` is the typed adapter
the rest of the service talks to: it serializes on the way in and
deserializes-and-validates on the way out, failing closed with
``CorruptRecord`` when a stored payload does not match the schema.

No transactions or locking are layered on top of the collaborator; a
get-then-put race between two concurrent creates of the same value is
possible and accepted.
"""
from abc import ABC, abstractmethod
from typing import Callable, Dict, List, Optional
import logging

from pydantic import ValidationError
from sqlalchemy.orm import Session

from string_analyzer.config import STORE_BACKEND
from string_analyzer.errors import CorruptRecord
from string_analyzer.models import KeyValueEntry
from string_analyzer.schemas import StringRecord

logger = logging.getLogger(__name__)


class KeyValueStore(ABC):
    """String-to-string store: get/put/delete by key plus a key listing"""

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        ...

    @abstractmethod
    def put(self, key: str, value: str) -> None:
        ...

    @abstractmethod
    def delete(self, key: str) -> None:
        ...

    @abstractmethod
    def list(self) -> Dict[str, List[Dict[str, str]]]:
        """Return ``{"keys": [{"name": key}, ...]}``"""


class InMemoryKeyValueStore(KeyValueStore):
    def __init__(self):
        self._data: Dict[str, str] = {}

    def get(self, key):
        return self._data.get(key)

    def put(self, key, value):
        self._data[key] = value

    def delete(self, key):
        self._data.pop(key, None)

    def list(self):
        return {"keys": [{"name": key} for key in self._data]}


class SQLKeyValueStore(KeyValueStore):
    """Key-value collaborator backed by a single SQLAlchemy table"""

    def __init__(self, session_factory: Callable[[], Session]):
        self.session_factory = session_factory

    def get(self, key):
        db = self.session_factory()
        try:
            entry = db.get(KeyValueEntry, key)
            return entry.value if entry else None
        finally:
            db.close()

    def put(self, key, value):
        db = self.session_factory()
        try:
            db.merge(KeyValueEntry(key=key, value=value))
            db.commit()
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

    def delete(self, key):
        db = self.session_factory()
        try:
            db.query(KeyValueEntry).filter(KeyValueEntry.key == key).delete()
            db.commit()
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

    def list(self):
        db = self.session_factory()
        try:
            rows = db.query(KeyValueEntry.key).all()
            return {"keys": [{"name": key} for (key,) in rows]}
        finally:
            db.close()


class RecordStore:
    """Typed adapter over a KeyValueStore, keyed by SHA-256 hash"""

    def __init__(self, kv: KeyValueStore):
        self.kv = kv

    def get(self, hash_key: str) -> Optional[StringRecord]:
        raw = self.kv.get(hash_key)
        if raw is None:
            return None
        return self._load(hash_key, raw)

    def put(self, hash_key: str, record: StringRecord) -> None:
        self.kv.put(hash_key, record.model_dump_json())

    def delete(self, hash_key: str) -> None:
        self.kv.delete(hash_key)

    def list_all(self) -> List[StringRecord]:
        """Materialize every stored record (full scan, unordered)"""
        records = []
        for key in self.kv.list()["keys"]:
            raw = self.kv.get(key["name"])
            # deleted between list() and get()
            if raw is None:
                continue
            records.append(self._load(key["name"], raw))
        return records

    @staticmethod
    def _load(hash_key: str, raw: str) -> StringRecord:
        try:
            record = StringRecord.model_validate_json(raw)
        except ValidationError as e:
            logger.error(f"Stored record {hash_key} failed validation: {e}")
            raise CorruptRecord(f"Stored record {hash_key} failed validation")
        if record.id != hash_key:
            logger.error(f"Stored record under {hash_key} carries id {record.id}")
            raise CorruptRecord(f"Stored record {hash_key} is filed under the wrong key")
        return record


def build_record_store(backend: str = STORE_BACKEND) -> RecordStore:
    if backend == "memory":
        logger.info("Using in-memory record store")
        return RecordStore(InMemoryKeyValueStore())
    if backend == "sql":
        from string_analyzer.database import SessionLocal, init_db
        init_db()
        logger.info("Using SQL record store")
        return RecordStore(SQLKeyValueStore(SessionLocal))
    raise ValueError(f"Unknown STORE_BACKEND '{backend}' (expected 'sql' or 'memory')")


_record_store: Optional[RecordStore] = None


def get_store() -> RecordStore:
    """Dependency to provide the record store."""
    global _record_store
    if _record_store is None:
        _record_store = build_record_store()
    return _record_store

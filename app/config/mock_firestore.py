"""
In-process stand-in for the Firestore client, used when USE_MOCK_DB=true.

Covers the part of the client API the services rely on:
- db.collection(name).document(id).set/get/update/delete
- collection.where(field, "==" | "in", value).limit(n).stream()
- firestore.SERVER_TIMESTAMP sentinels (resolved to the current UTC time)

Data lives in memory and, when a path is given, is mirrored to a JSON file
after every write so a local dev server keeps its data between restarts.
"""

import copy
import json
import logging
import os
import threading
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, Iterator, List, Optional

from firebase_admin import firestore
from google.api_core.exceptions import NotFound

logger = logging.getLogger(__name__)


def _resolve_sentinels(data: Dict[str, Any]) -> Dict[str, Any]:
    resolved = {}
    for key, value in data.items():
        if value is firestore.SERVER_TIMESTAMP:
            value = datetime.now(timezone.utc)
        resolved[key] = copy.deepcopy(value)
    return resolved


def _json_default(value: Any):
    if isinstance(value, datetime):
        return value.isoformat()
    return str(value)


class MockDocumentSnapshot:
    def __init__(self, reference: "MockDocumentReference", data: Optional[Dict[str, Any]]):
        self.reference = reference
        self.id = reference.id
        self._data = data

    @property
    def exists(self) -> bool:
        return self._data is not None

    def to_dict(self) -> Optional[Dict[str, Any]]:
        return copy.deepcopy(self._data)


class MockDocumentReference:
    def __init__(self, db: "MockFirestore", collection: str, doc_id: str):
        self._db = db
        self._collection = collection
        self.id = doc_id

    @property
    def path(self) -> str:
        return f"{self._collection}/{self.id}"

    def get(self) -> MockDocumentSnapshot:
        with self._db._lock:
            data = self._db._data.get(self._collection, {}).get(self.id)
            return MockDocumentSnapshot(self, copy.deepcopy(data))

    def set(self, data: Dict[str, Any]) -> None:
        with self._db._lock:
            self._db._data.setdefault(self._collection, {})[self.id] = _resolve_sentinels(data)
            self._db._persist()

    def update(self, data: Dict[str, Any]) -> None:
        with self._db._lock:
            docs = self._db._data.get(self._collection, {})
            if self.id not in docs:
                raise NotFound(f"No document to update: {self.path}")
            docs[self.id].update(_resolve_sentinels(data))
            self._db._persist()

    def delete(self) -> None:
        with self._db._lock:
            self._db._data.get(self._collection, {}).pop(self.id, None)
            self._db._persist()


class MockQuery:
    def __init__(self, db: "MockFirestore", collection: str, filters=None, limit: Optional[int] = None):
        self._db = db
        self._collection = collection
        self._filters = list(filters or [])
        self._limit = limit

    def where(self, field_path: str, op_string: str, value: Any) -> "MockQuery":
        if op_string not in ("==", "in"):
            raise ValueError(f"MockFirestore does not support operator {op_string!r}")
        return MockQuery(self._db, self._collection, self._filters + [(field_path, op_string, value)], self._limit)

    def limit(self, count: int) -> "MockQuery":
        return MockQuery(self._db, self._collection, self._filters, count)

    def _matches(self, data: Dict[str, Any]) -> bool:
        for field_path, op_string, value in self._filters:
            if field_path not in data:
                return False
            if op_string == "==" and data[field_path] != value:
                return False
            if op_string == "in" and data[field_path] not in value:
                return False
        return True

    def stream(self) -> Iterator[MockDocumentSnapshot]:
        with self._db._lock:
            docs = list(self._db._data.get(self._collection, {}).items())
        results = []
        for doc_id, data in docs:
            if self._matches(data):
                ref = MockDocumentReference(self._db, self._collection, doc_id)
                results.append(MockDocumentSnapshot(ref, copy.deepcopy(data)))
            if self._limit is not None and len(results) >= self._limit:
                break
        return iter(results)

    def get(self) -> List[MockDocumentSnapshot]:
        return list(self.stream())


class MockCollectionReference(MockQuery):
    def __init__(self, db: "MockFirestore", name: str):
        super().__init__(db, name)
        self.id = name

    def document(self, document_id: Optional[str] = None) -> MockDocumentReference:
        return MockDocumentReference(self._db, self._collection, document_id or uuid.uuid4().hex[:20])


class MockFirestore:
    def __init__(self, path: Optional[str] = None):
        self._path = path
        self._lock = threading.RLock()
        self._data: Dict[str, Dict[str, Dict[str, Any]]] = {}
        if path and os.path.exists(path):
            with open(path, "r", encoding="utf-8") as f:
                self._data = json.load(f)
            logger.info(f"[MOCK DB] Loaded {sum(len(d) for d in self._data.values())} documents from {path}")

    def collection(self, name: str) -> MockCollectionReference:
        return MockCollectionReference(self, name)

    def clear(self) -> None:
        with self._lock:
            self._data = {}
            self._persist()

    def _persist(self) -> None:
        if not self._path:
            return
        with open(self._path, "w", encoding="utf-8") as f:
            json.dump(self._data, f, default=_json_default, indent=2)


_mock_db: Optional[MockFirestore] = None


def get_mock_db(path: Optional[str] = None) -> MockFirestore:
    """Get or create the process-wide mock database."""
    global _mock_db
    if _mock_db is None:
        _mock_db = MockFirestore(path)
    return _mock_db

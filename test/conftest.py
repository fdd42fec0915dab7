# test/conftest.py

"""
Shared fixtures.

We never talk to a real MongoDB here. FakeMongoClient mimics the tiny
slice of pymongo the app uses (client[db][collection], create_index,
find_one, insert_one, close) and is patched into data.mongo_connection.
"""

from typing import Any, Dict, List, Optional

import pytest
from bson import ObjectId
from pymongo.errors import DuplicateKeyError

import data.mongo_connection as mongo_connection


class FakeInsertResult:
    def __init__(self, inserted_id: ObjectId):
        self.inserted_id = inserted_id


class FakeCollection:
    def __init__(self) -> None:
        self.docs: List[Dict[str, Any]] = []
        self.unique_fields: List[str] = []
        self.insert_error: Optional[Exception] = None
        self.find_error: Optional[Exception] = None

    def create_index(self, keys, unique: bool = False, name: Optional[str] = None) -> str:
        if unique:
            for field, _direction in keys:
                self.unique_fields.append(field)
        return name or "idx"

    def find_one(self, query: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        if self.find_error is not None:
            raise self.find_error
        for doc in self.docs:
            if all(doc.get(k) == v for k, v in query.items()):
                return dict(doc)
        return None

    def insert_one(self, doc: Dict[str, Any]) -> FakeInsertResult:
        if self.insert_error is not None:
            raise self.insert_error
        for field in self.unique_fields:
            if any(d.get(field) == doc.get(field) for d in self.docs):
                raise DuplicateKeyError(f"E11000 duplicate key error dup key: {{ {field}: {doc.get(field)!r} }}", 11000)
        stored = dict(doc)
        stored["_id"] = ObjectId()
        self.docs.append(stored)
        return FakeInsertResult(stored["_id"])


class FakeDatabase:
    def __init__(self, name: str) -> None:
        self.name = name
        self.collections: Dict[str, FakeCollection] = {}

    def __getitem__(self, name: str) -> FakeCollection:
        if name not in self.collections:
            self.collections[name] = FakeCollection()
        return self.collections[name]


class FakeMongoClient:
    instances: List["FakeMongoClient"] = []

    def __init__(self, uri: str, **kwargs: Any) -> None:
        self.uri = uri
        self.kwargs = kwargs
        self.closed = False
        self.databases: Dict[str, FakeDatabase] = {}
        FakeMongoClient.instances.append(self)

    def __getitem__(self, name: str) -> FakeDatabase:
        if name not in self.databases:
            self.databases[name] = FakeDatabase(name)
        return self.databases[name]

    def close(self) -> None:
        self.closed = True


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch):
    for name in ("MONGODB_URI", "MONGODB_DB", "WAITLIST_COLLECTION", "MONGODB_TIMEOUT_MS", "CORS_ALLOWED_ORIGINS"):
        monkeypatch.delenv(name, raising=False)
    mongo_connection.reset_connection()
    yield
    mongo_connection.reset_connection()


@pytest.fixture
def fake_mongo(monkeypatch: pytest.MonkeyPatch):
    """Patch MongoClient and set MONGODB_URI. Returns the FakeMongoClient class."""
    FakeMongoClient.instances = []
    monkeypatch.setenv("MONGODB_URI", "mongodb://fake-host:27017")
    monkeypatch.setattr(mongo_connection, "MongoClient", FakeMongoClient)
    return FakeMongoClient


@pytest.fixture
def submissions(fake_mongo) -> FakeCollection:
    """The submissions collection, opened through the real connection cache."""
    db = mongo_connection.get_connection()
    return db["submissions"]

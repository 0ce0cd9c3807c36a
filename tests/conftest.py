"""
Shared fixtures.

FakeMongoCollection mimics the slice of pymongo's AsyncCollection that
MongoStore uses (equality filters, $set updates, unique indexes), so the
collection layer can be exercised without a MongoDB server.
"""

import copy
from types import SimpleNamespace

import pytest
from pymongo.errors import DuplicateKeyError, OperationFailure

from schemadb.database.collection import Collection
from schemadb.database.store import MongoStore
from schemadb.schema.validator import SchemaValidator

_MISSING = object()


def _get_path(doc, dot_path):
    value = doc
    for part in dot_path.split("."):
        if not isinstance(value, dict) or part not in value:
            return _MISSING
        value = value[part]
    return value


def _matches(doc, filter_dict):
    for key, expected in filter_dict.items():
        actual = _get_path(doc, key)
        if expected is None:
            if actual is not _MISSING and actual is not None:
                return False
        elif actual is _MISSING or actual != expected or type(actual) is not type(expected):
            return False
    return True


class FakeCursor:
    def __init__(self, docs):
        self._docs = docs

    async def to_list(self, length=None):
        return self._docs if length is None else self._docs[:length]


class FakeMongoCollection:
    """In-memory stand-in for a pymongo AsyncCollection."""

    def __init__(self, name, fail_index=None):
        self.name = name
        self.docs = []
        self.indexes = []
        self.fail_index = fail_index

    def _check_unique(self, candidate, ignore=None):
        for keys, options in self.indexes:
            if not options.get("unique"):
                continue
            path = keys[0][0]
            value = _get_path(candidate, path)
            if value is _MISSING:
                continue
            for doc in self.docs:
                if doc is not ignore and _get_path(doc, path) == value:
                    raise DuplicateKeyError(f"E11000 duplicate key error collection: {self.name} index: {path}_1")

    async def insert_one(self, doc):
        self._check_unique(doc)
        self.docs.append(copy.deepcopy(doc))
        return SimpleNamespace(acknowledged=True, inserted_id=doc["_id"])

    async def update_one(self, filter_dict, update):
        for doc in self.docs:
            if _matches(doc, filter_dict):
                fields = update["$set"]
                changed = any(doc.get(k, _MISSING) != v for k, v in fields.items())
                self._check_unique({**doc, **fields}, ignore=doc)
                doc.update(copy.deepcopy(fields))
                return SimpleNamespace(matched_count=1, modified_count=1 if changed else 0)
        return SimpleNamespace(matched_count=0, modified_count=0)

    def find(self, filter_dict, limit=0, skip=0):
        found = [copy.deepcopy(d) for d in self.docs if _matches(d, filter_dict)]
        found = found[skip:]
        if limit:
            found = found[:limit]
        return FakeCursor(found)

    async def find_one(self, filter_dict):
        for doc in self.docs:
            if _matches(doc, filter_dict):
                return copy.deepcopy(doc)
        return None

    async def count_documents(self, filter_dict):
        return sum(1 for d in self.docs if _matches(d, filter_dict))

    async def create_index(self, keys, **options):
        path = keys[0][0]
        if self.fail_index == path:
            raise OperationFailure(f"cannot create index on {path}")
        self.indexes.append((keys, options))
        return f"{path}_1"


class FakeMongoClient:
    """In-memory stand-in for pymongo's AsyncMongoClient."""

    instances = []

    def __init__(self, uri, fail_index=None, **options):
        self.uri = uri
        self.options = options
        self.fail_index = fail_index
        self.collections = {}
        self.default_database = None
        self.closed = False
        FakeMongoClient.instances.append(self)

    def get_default_database(self, default=None):
        self.default_database = default
        return self

    def __getitem__(self, name):
        if name not in self.collections:
            self.collections[name] = FakeMongoCollection(name, fail_index=self.fail_index)
        return self.collections[name]

    async def close(self):
        self.closed = True


class TickingClock:
    """Deterministic epoch-millis clock advancing one second per call."""

    def __init__(self, start=1_700_000_000_000):
        self.now = start

    def __call__(self):
        self.now += 1000
        return self.now


USER_SCHEMA = {
    "type": "object",
    "required": ["name"],
    "properties": {
        "name": {"type": "string"},
        "email": {"type": "string", "index": {"unique": True}},
        "age": {"type": "integer", "minimum": 0},
        "address": {
            "type": "object",
            "properties": {
                "street": {"type": "string"},
                "city": {"type": "string"},
            },
        },
        "tags": {"type": "array", "items": {"type": "string"}},
    },
}


@pytest.fixture
def user_schema():
    return copy.deepcopy(USER_SCHEMA)


@pytest.fixture
def validator(user_schema):
    validator = SchemaValidator()
    validator.add_schema("user", user_schema)
    return validator


@pytest.fixture
def mongo_collection():
    return FakeMongoCollection("user")


@pytest.fixture
def store(mongo_collection):
    return MongoStore(mongo_collection)


@pytest.fixture
def clock():
    return TickingClock()


@pytest.fixture
def users(store, validator, clock):
    return Collection("user", store, validator, clock=clock)


@pytest.fixture(autouse=True)
def reset_fake_clients():
    FakeMongoClient.instances.clear()
    yield
    FakeMongoClient.instances.clear()

import copy
from datetime import datetime, timezone
from types import SimpleNamespace

import pytest
from bson import ObjectId
from fastapi.testclient import TestClient

from catalog.config import Settings
from catalog.main import create_app

ADMIN_USERNAME = "admin"
ADMIN_PASSWORD = "s3cret-pass"

WIDGET = {
    "title": "Widget",
    "price": 9.99,
    "imageUrl": "https://a.co/i.png",
    "amazonUrl": "https://a.co/p",
}


class FakeCursor:
    def __init__(self, docs):
        self.docs = docs

    def sort(self, key, direction=1):
        self.docs = sorted(self.docs, key=lambda d: d[key], reverse=direction == -1)
        return self

    async def to_list(self, length=None):
        docs = self.docs if length is None else self.docs[:length]
        return [copy.deepcopy(d) for d in docs]


class FakeCollection:
    """In-memory stand-in for the async products collection, keyed on _id."""

    def __init__(self):
        self.docs = {}

    def find(self, filter=None):
        return FakeCursor(list(self.docs.values()))

    async def find_one(self, filter):
        doc = self.docs.get(filter["_id"])
        return copy.deepcopy(doc) if doc else None

    async def insert_one(self, doc):
        doc = copy.deepcopy(doc)
        doc.setdefault("_id", ObjectId())
        self.docs[doc["_id"]] = doc
        return SimpleNamespace(inserted_id=doc["_id"], acknowledged=True)

    async def update_one(self, filter, update):
        doc = self.docs.get(filter["_id"])
        if doc is None:
            return SimpleNamespace(matched_count=0, modified_count=0)
        changes = update["$set"]
        modified = any(k not in doc or doc[k] != v for k, v in changes.items())
        doc.update(copy.deepcopy(changes))
        return SimpleNamespace(matched_count=1, modified_count=int(modified))

    async def delete_one(self, filter):
        removed = self.docs.pop(filter["_id"], None)
        return SimpleNamespace(deleted_count=0 if removed is None else 1)

    def add(self, **fields):
        """Seed a document directly, bypassing the API."""
        now = datetime.now(timezone.utc)
        doc = {"_id": ObjectId(), **WIDGET, "createdAt": now, "updatedAt": now, **fields}
        self.docs[doc["_id"]] = doc
        return doc


class BrokenCollection:
    """Every operation fails the way an unreachable server would."""

    def _fail(self, *args, **kwargs):
        raise ConnectionError("connection refused by mongo-internal:27017")

    find = _fail

    async def find_one(self, *args, **kwargs):
        self._fail()

    async def insert_one(self, *args, **kwargs):
        self._fail()

    async def update_one(self, *args, **kwargs):
        self._fail()

    async def delete_one(self, *args, **kwargs):
        self._fail()


def make_settings(**overrides) -> Settings:
    values = {
        "JWT_SECRET": "test-signing-secret-that-is-long-enough-for-hs256",
        "ADMIN_USERNAME": ADMIN_USERNAME,
        "ADMIN_PASSWORD": ADMIN_PASSWORD,
        "MONGO_URI": "mongodb://localhost:27017",
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


@pytest.fixture
def settings():
    return make_settings()


@pytest.fixture
def collection():
    return FakeCollection()


@pytest.fixture
def client(settings, collection):
    with TestClient(create_app(settings, collection)) as c:
        yield c


@pytest.fixture
def auth_headers(client):
    response = client.post("/api/auth/login", json={"username": ADMIN_USERNAME, "password": ADMIN_PASSWORD})
    assert response.status_code == 200
    return {"Authorization": f"Bearer {response.json()['token']}"}

"""
Shared fixtures.

Firestore is replaced by a small in-memory fake that understands the calls the
repositories make: documents and sub-collections, equality filters, ordering,
write batches and the SERVER_TIMESTAMP / DELETE_FIELD / ArrayUnion transforms.
"""

import copy
import uuid
from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient
from google.api_core.exceptions import AlreadyExists, InvalidArgument, NotFound, ServiceUnavailable
from google.cloud import firestore

from clientdesk import email_service
from clientdesk.auth import get_current_identity
from clientdesk.database import get_db
from clientdesk.domain.settings.schemas import Identity
from clientdesk.main import app


class FakeSnapshot:
    def __init__(self, reference, data):
        self.reference = reference
        self.id = reference.id
        self._data = data

    @property
    def exists(self):
        return self._data is not None

    def to_dict(self):
        return copy.deepcopy(self._data) if self._data is not None else None

    def get(self, field):
        return (self._data or {}).get(field)


class FakeFirestore:
    """In-memory stand-in for google.cloud.firestore.Client"""

    def __init__(self):
        self.docs = {}
        self.unavailable = False
        self.reject_writes_to = set()
        self._clock = datetime.now(timezone.utc) - timedelta(minutes=5)

    # Client API
    def collection(self, name):
        return FakeCollection(self, (name,))

    def batch(self):
        return FakeBatch(self)

    # Helpers used by the fake and by tests
    def now(self):
        self._clock += timedelta(seconds=1)
        return self._clock

    def check_read(self):
        if self.unavailable:
            raise ServiceUnavailable("Firestore is unavailable")

    def check_write(self, path):
        self.check_read()
        if path[0] in self.reject_writes_to:
            raise ServiceUnavailable(f"Writes to {path[0]} are failing")

    def data(self, *path):
        return copy.deepcopy(self.docs.get(tuple(path)))

    def children(self, *collection_path):
        collection_path = tuple(collection_path)
        return {
            path[-1]: data
            for path, data in self.docs.items()
            if len(path) == len(collection_path) + 1 and path[:-1] == collection_path
        }

    def seed(self, *path, **data):
        self.docs[tuple(path)] = data

    def resolve(self, data, existing=None):
        result = copy.deepcopy(existing) if existing else {}
        for key, value in data.items():
            if value is firestore.SERVER_TIMESTAMP:
                result[key] = self.now()
            elif value is firestore.DELETE_FIELD:
                result.pop(key, None)
            elif isinstance(value, firestore.ArrayUnion):
                current = list(result.get(key) or [])
                current.extend(v for v in value.values if v not in current)
                result[key] = current
            elif isinstance(value, firestore.ArrayRemove):
                result[key] = [v for v in result.get(key) or [] if v not in value.values]
            else:
                result[key] = copy.deepcopy(value)
        return result


class FakeQuery:
    def __init__(self, db, path, filters=(), orders=(), limit_to=None):
        self._db = db
        self._path = path
        self._filters = list(filters)
        self._orders = list(orders)
        self._limit = limit_to

    def _copy(self, **changes):
        kwargs = {
            "filters": self._filters,
            "orders": self._orders,
            "limit_to": self._limit,
            **changes,
        }
        return FakeQuery(self._db, self._path, **kwargs)

    def where(self, filter=None):
        return self._copy(filters=self._filters + [filter])

    def order_by(self, field, direction="ASCENDING"):
        return self._copy(orders=self._orders + [(field, direction)])

    def limit(self, count):
        return self._copy(limit_to=count)

    def stream(self):
        self._db.check_read()
        rows = list(self._db.children(*self._path).items())

        for field_filter in self._filters:
            assert field_filter.op_string == "==", "only equality filters are supported"
            rows = [
                (doc_id, data)
                for doc_id, data in rows
                if data.get(field_filter.field_path) == field_filter.value
            ]

        for field, direction in reversed(self._orders):
            rows = [row for row in rows if field in row[1]]
            rows.sort(key=lambda row: row[1][field], reverse=direction == firestore.Query.DESCENDING)

        if self._limit is not None:
            rows = rows[: self._limit]

        for doc_id, data in rows:
            ref = FakeDocument(self._db, self._path + (doc_id,))
            yield FakeSnapshot(ref, copy.deepcopy(data))


class FakeCollection(FakeQuery):
    def __init__(self, db, path):
        super().__init__(db, path)

    def document(self, doc_id=None):
        return FakeDocument(self._db, self._path + (doc_id or uuid.uuid4().hex[:20],))

    def add(self, data):
        ref = self.document()
        ref.set(data)
        return self._db._clock, ref


class FakeDocument:
    def __init__(self, db, path):
        self._db = db
        self._path = path
        self.id = path[-1]

    @property
    def path(self):
        return "/".join(self._path)

    def collection(self, name):
        return FakeCollection(self._db, self._path + (name,))

    def get(self):
        self._db.check_read()
        return FakeSnapshot(self, copy.deepcopy(self._db.docs.get(self._path)))

    def set(self, data, merge=False):
        self._db.check_write(self._path)
        existing = self._db.docs.get(self._path) if merge else None
        self._db.docs[self._path] = self._db.resolve(data, existing)

    def create(self, data):
        self._db.check_write(self._path)
        if self._path in self._db.docs:
            raise AlreadyExists(f"Document already exists: {self.path}")
        self._db.docs[self._path] = self._db.resolve(data)

    def update(self, data):
        self._db.check_write(self._path)
        if self._path not in self._db.docs:
            raise NotFound(f"No document to update: {self.path}")
        self._db.docs[self._path] = self._db.resolve(data, self._db.docs[self._path])

    def delete(self):
        self._db.check_write(self._path)
        self._db.docs.pop(self._path, None)


class FakeBatch:
    """Applies staged writes all-or-nothing on commit"""

    max_writes = 500

    def __init__(self, db):
        self._db = db
        self._ops = []

    def set(self, ref, data, merge=False):
        self._ops.append(lambda: ref.set(data, merge=merge))

    def create(self, ref, data):
        self._ops.append(lambda: ref.create(data))

    def update(self, ref, data):
        self._ops.append(lambda: ref.update(data))

    def delete(self, ref):
        self._ops.append(ref.delete)

    def commit(self):
        if len(self._ops) > self.max_writes:
            raise InvalidArgument(f"maximum {self.max_writes} writes allowed per request")
        saved = copy.deepcopy(self._db.docs)
        try:
            for op in self._ops:
                op()
        except Exception:
            self._db.docs = saved
            raise
        return []


@pytest.fixture
def db():
    return FakeFirestore()


@pytest.fixture(autouse=True)
def plain_email_html(monkeypatch):
    """Queue the raw MJML markup so tests don't depend on the compiler output"""
    monkeypatch.setattr(email_service, "compile_mjml_to_html", lambda mjml_content: mjml_content)


@pytest.fixture
def identity():
    return Identity(uid="owner-uid", email="owner@example.com", name="Olivia Owner")


@pytest.fixture
def api(db, identity):
    """Test client signed in as ``identity``; reassign ``api.identity`` to switch users"""
    client = TestClient(app)
    client.identity = identity

    app.dependency_overrides[get_db] = lambda: db
    app.dependency_overrides[get_current_identity] = lambda: client.identity
    yield client
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(db):
    """Create the settings document a signed-in user would have"""

    def _make_user(uid, email, name, **settings):
        db.seed("userSettings", uid, userId=uid, email=email, name=name, **settings)
        return Identity(uid=uid, email=email, name=name)

    return _make_user

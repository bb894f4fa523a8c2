import copy
import uuid
from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient

from portal.config import settings
from portal.core.dependencies import get_current_user
from portal.database.local_store import LocalStore, get_local_store
from portal.database.supabase_client import get_supabase
from portal.main import app

CURRENT_USER = {
    "id": "auth-user-1",
    "email": "hong@example.com",
    "user_metadata": {"full_name": "Hong Gildong"},
    "app_metadata": {},
    "created_at": "2026-01-01T00:00:00+00:00",
    "updated_at": None,
}


class FakeResponse:
    def __init__(self, data):
        self.data = data


class FakeQuery:
    """Subset of the postgrest query builder the services use."""

    def __init__(self, db, table):
        self.db = db
        self.table = table
        self.op = "select"
        self.columns = "*"
        self.payload = None
        self.filters = []
        self.order_by = None
        self.max_rows = None
        self.single = False

    def select(self, columns="*"):
        self.op = "select"
        self.columns = columns
        return self

    def insert(self, payload):
        self.op = "insert"
        self.payload = payload
        return self

    def update(self, payload):
        self.op = "update"
        self.payload = payload
        return self

    def delete(self):
        self.op = "delete"
        return self

    def eq(self, column, value):
        if (self.table, column) in self.db.stale_reads:
            self.filters.append(lambda row: False)
        else:
            self.filters.append(lambda row: row.get(column) == value)
        return self

    def in_(self, column, values):
        values = list(values)
        self.filters.append(lambda row: row.get(column) in values)
        return self

    def order(self, column, desc=False):
        self.order_by = (column, desc)
        return self

    def limit(self, count):
        self.max_rows = count
        return self

    def maybe_single(self):
        self.single = True
        return self

    def _matching(self):
        return [row for row in self.db.rows(self.table) if all(f(row) for f in self.filters)]

    def _project(self, row):
        if self.columns == "*":
            return copy.deepcopy(row)
        names = [c.strip() for c in self.columns.split(",")]
        return {name: copy.deepcopy(row.get(name)) for name in names}

    def execute(self):
        self.db.calls.append((self.table, self.op))
        if (self.table, self.op) in self.db.failures:
            raise Exception(f"simulated {self.op} failure on {self.table}")

        if self.op == "insert":
            payload = self.payload if isinstance(self.payload, list) else [self.payload]
            inserted = []
            for item in payload:
                row = copy.deepcopy(item)
                row.setdefault("id", str(uuid.uuid4()))
                for column in self.db.unique.get(self.table, ()):
                    if any(r.get(column) == row.get(column) for r in self.db.rows(self.table)):
                        raise Exception(f"duplicate key value violates unique constraint on {self.table}.{column}")
                row.setdefault("created_at", self.db.next_timestamp())
                self.db.rows(self.table).append(row)
                inserted.append(copy.deepcopy(row))
            return FakeResponse(inserted)

        matched = self._matching()
        if self.op == "update":
            for row in matched:
                row.update(copy.deepcopy(self.payload))
            return FakeResponse([copy.deepcopy(row) for row in matched])
        if self.op == "delete":
            table_rows = self.db.rows(self.table)
            for row in matched:
                table_rows.remove(row)
            return FakeResponse([copy.deepcopy(row) for row in matched])

        if self.order_by:
            column, desc = self.order_by
            matched = sorted(matched, key=lambda row: row.get(column) or "", reverse=desc)
        if self.max_rows is not None:
            matched = matched[:self.max_rows]
        data = [self._project(row) for row in matched]
        if self.single:
            return FakeResponse(data[0] if data else None)
        return FakeResponse(data)


class FakeBucket:
    def __init__(self, storage, name):
        self.storage = storage
        self.name = name

    def upload(self, key, content, file_options=None):
        if self.storage.fail_uploads:
            raise Exception("simulated storage failure")
        self.storage.objects[(self.name, key)] = content
        return {"Key": key}

    def remove(self, keys):
        for key in keys:
            self.storage.objects.pop((self.name, key), None)
        return []


class FakeStorage:
    def __init__(self):
        self.objects = {}
        self.fail_uploads = False

    def from_(self, bucket):
        return FakeBucket(self, bucket)


def fake_user(user_id="auth-user-1", email="hong@example.com", full_name="Hong Gildong"):
    return SimpleNamespace(
        id=user_id,
        email=email,
        user_metadata={"full_name": full_name} if full_name else {},
        app_metadata={},
        created_at="2026-01-01T00:00:00+00:00",
        updated_at=None,
    )


def fake_session(user):
    return SimpleNamespace(
        access_token="access-token",
        refresh_token="refresh-token",
        expires_in=3600,
        user=user,
    )


class FakeAuth:
    def __init__(self):
        self.calls = []
        self.error = None
        self.confirm_email = True
        self.listeners = []

    def _record(self, name, *args):
        self.calls.append((name,) + args)
        if self.error:
            raise self.error

    def sign_up(self, credentials):
        self._record("sign_up", credentials)
        user = fake_user(
            email=credentials["email"],
            full_name=credentials["options"]["data"]["full_name"],
        )
        session = None if self.confirm_email else fake_session(user)
        return SimpleNamespace(user=user, session=session)

    def sign_in_with_password(self, credentials):
        self._record("sign_in_with_password", credentials)
        user = fake_user(email=credentials["email"])
        return SimpleNamespace(user=user, session=fake_session(user))

    def refresh_session(self, refresh_token):
        self._record("refresh_session", refresh_token)
        user = fake_user()
        return SimpleNamespace(user=user, session=fake_session(user))

    def get_user(self, jwt=None):
        self._record("get_user", jwt)
        return SimpleNamespace(user=fake_user())

    def sign_out(self):
        self._record("sign_out")

    def reset_password_for_email(self, email, options=None):
        self._record("reset_password_for_email", email, options)

    def on_auth_state_change(self, callback):
        self.listeners.append(callback)
        return SimpleNamespace(unsubscribe=lambda: self.listeners.remove(callback))


class FakeSupabase:
    """In-memory stand-in for the supabase Client: tables, auth and storage."""

    def __init__(self):
        self.tables = {}
        self.failures = set()
        self.unique = {}
        self.stale_reads = set()
        self.calls = []
        self.auth = FakeAuth()
        self.storage = FakeStorage()
        self._clock = datetime(2026, 1, 1, tzinfo=timezone.utc)

    def next_timestamp(self):
        self._clock += timedelta(seconds=1)
        return self._clock.isoformat()

    def rows(self, table):
        return self.tables.setdefault(table, [])

    def seed(self, table, rows):
        for row in rows:
            row = dict(row)
            row.setdefault("id", str(uuid.uuid4()))
            row.setdefault("created_at", self.next_timestamp())
            self.rows(table).append(row)

    def fail(self, table, op):
        self.failures.add((table, op))

    def add_unique(self, table, column):
        self.unique.setdefault(table, []).append(column)

    def hide_rows_by(self, table, column):
        """Selects filtered on `column` find nothing, like a read that misses a fresh insert."""
        self.stale_reads.add((table, column))

    def table(self, name):
        return FakeQuery(self, name)


@pytest.fixture(autouse=True)
def no_verify_delay(monkeypatch):
    monkeypatch.setattr(settings, "user_verify_delay_seconds", 0.0)


@pytest.fixture
def fake_supabase():
    return FakeSupabase()


@pytest.fixture
def store(tmp_path):
    return LocalStore(str(tmp_path / "local_store.json"))


@pytest.fixture
def client(fake_supabase, store):
    app.dependency_overrides[get_supabase] = lambda: fake_supabase
    app.dependency_overrides[get_local_store] = lambda: store
    app.dependency_overrides[get_current_user] = lambda: dict(CURRENT_USER)
    yield TestClient(app)
    app.dependency_overrides.clear()

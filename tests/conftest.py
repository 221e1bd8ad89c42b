# =============================================================================
# tests/conftest.py - Pytest Configuration
# =============================================================================
# This module provides pytest fixtures and configuration for all tests.
#
# Key features:
# - Sets up mock environment variables before any imports
# - An in-memory stand-in for the Supabase table query builder, installed as
#   the SupabaseClient singleton so services run unchanged
# - Fixtures for users, request contexts, workspaces, pets and an API client
# =============================================================================

import os
import tempfile

# =============================================================================
# Set up test environment BEFORE any imports
# =============================================================================
# This must happen before importing app.config which loads settings immediately

os.environ.setdefault("SUPABASE_URL", "https://test-project.supabase.co")
os.environ.setdefault("SUPABASE_ANON_KEY", "test-anon-key")
os.environ.setdefault("SUPABASE_SERVICE_KEY", "test-service-key")
os.environ.setdefault("SUPABASE_JWT_SECRET", "test-jwt-secret")
os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("DEBUG", "true")
os.environ.setdefault("UPLOAD_DIR", tempfile.mkdtemp(prefix="pawsync-uploads-"))

import copy
from datetime import timedelta
from typing import Any, Callable
from uuid import UUID, uuid4

import pytest

from core.models.context import RequestContext
from core.models.user import UserRecord
from lib.supabase_client import SupabaseClient
from lib.utils import utc_now


# =============================================================================
# In-memory Supabase
# =============================================================================

# Column defaults the real schema fills in on insert
TABLE_DEFAULTS: dict[str, dict[str, Any]] = {
    "users": {
        "email": None,
        "first_name": None,
        "last_name": None,
        "profile_image_url": None,
        "role": None,
        "onboarding_complete": False,
    },
    "workspaces": {"business_name": None, "bio": None},
    "pets": {
        "species": None,
        "breed": None,
        "age": None,
        "owner_phone": None,
        "image_url": None,
        "trainer_id": None,
        "workspace_id": None,
    },
    "homework_tasks": {
        "expected_duration_mins": None,
        "is_active": True,
        "preferred_days": None,
    },
    "homework_submissions": {"note": None, "status": "COMPLETED"},
    "task_media": {"file_name": None},
    "submission_media": {"file_name": None},
    "comment_media": {"file_name": None},
}

# Unique indexes, as column tuples
UNIQUE_KEYS: dict[str, list[tuple[str, ...]]] = {
    "users": [("id",), ("email",)],
    "workspaces": [("id",), ("invite_token",)],
    "workspace_members": [("id",), ("workspace_id", "user_id")],
}

# Timestamp columns defaulting to now()
TIMESTAMP_DEFAULTS: dict[str, tuple[str, ...]] = {
    "users": ("created_at", "updated_at"),
    "homework_submissions": ("submitted_at", "created_at"),
}


class FakeResponse:
    def __init__(self, data: list[dict]):
        self.data = data


class FakeQuery:
    """Chainable subset of the postgrest query builder."""

    def __init__(self, db: "FakeSupabase", table: str):
        self.db = db
        self.table_name = table
        self._op = "select"
        self._payload: Any = None
        self._filters: list[Callable[[dict], bool]] = []
        self._order: tuple[str, bool] | None = None
        self._limit: int | None = None

    def select(self, columns: str = "*"):
        self._op = "select"
        return self

    def insert(self, data: dict):
        self._op = "insert"
        self._payload = data
        return self

    def update(self, data: dict):
        self._op = "update"
        self._payload = data
        return self

    def delete(self):
        self._op = "delete"
        return self

    def eq(self, column: str, value: Any):
        self._filters.append(lambda row: row.get(column) == value)
        return self

    def in_(self, column: str, values: list):
        allowed = list(values)
        self._filters.append(lambda row: row.get(column) in allowed)
        return self

    def order(self, column: str, desc: bool = False):
        self._order = (column, desc)
        return self

    def limit(self, count: int):
        self._limit = count
        return self

    def execute(self) -> FakeResponse:
        self.db.calls.append((self.table_name, self._op))
        rows = self.db.tables.setdefault(self.table_name, [])

        if self._op == "insert":
            return FakeResponse([copy.deepcopy(self.db.insert(self.table_name, self._payload))])

        matched = [row for row in rows if all(f(row) for f in self._filters)]

        if self._op == "update":
            for row in matched:
                row.update(copy.deepcopy(self._payload))
            return FakeResponse(copy.deepcopy(matched))

        if self._op == "delete":
            for row in matched:
                rows.remove(row)
            return FakeResponse(copy.deepcopy(matched))

        if self._order:
            column, desc = self._order
            matched = sorted(
                matched,
                key=lambda row: (row.get(column) is not None, row.get(column) or ""),
                reverse=desc,
            )
        if self._limit is not None:
            matched = matched[: self._limit]
        return FakeResponse(copy.deepcopy(matched))


class FakeSupabase:
    """
    Dict-of-lists database behind a supabase-like client.

    Generates ids and timestamps, applies column defaults and enforces the
    unique indexes with a duplicate-key error carrying code 23505.
    """

    def __init__(self):
        self.tables: dict[str, list[dict]] = {}
        self.calls: list[tuple[str, str]] = []
        self._seq = 0
        # Fail the Nth insert into a table: {table: remaining successful inserts}
        self.fail_inserts_after: dict[str, int] = {}

    def table(self, name: str) -> FakeQuery:
        return FakeQuery(self, name)

    def _now_iso(self) -> str:
        # Strictly increasing so ordering by created_at follows insert order
        self._seq += 1
        return (utc_now() + timedelta(microseconds=self._seq)).isoformat()

    def insert(self, table: str, data: dict) -> dict:
        remaining = self.fail_inserts_after.get(table)
        if remaining is not None:
            if remaining <= 0:
                raise RuntimeError(f"simulated insert failure on {table}")
            self.fail_inserts_after[table] = remaining - 1

        row = dict(TABLE_DEFAULTS.get(table, {}))
        row.update(copy.deepcopy(data))
        row.setdefault("id", str(uuid4()))
        now = self._now_iso()
        row.setdefault("created_at", now)
        for column in TIMESTAMP_DEFAULTS.get(table, ()):
            row.setdefault(column, now)

        rows = self.tables.setdefault(table, [])
        for key in UNIQUE_KEYS.get(table, []):
            value = tuple(row.get(column) for column in key)
            if None in value:
                continue
            if any(tuple(other.get(column) for column in key) == value for other in rows):
                raise RuntimeError(
                    "{'code': '23505', 'message': 'duplicate key value violates unique constraint'}"
                )

        rows.append(row)
        return row

    def rows(self, table: str, **filters: Any) -> list[dict]:
        """Test helper: rows matching all equality filters."""
        return [
            row for row in self.tables.get(table, [])
            if all(row.get(k) == v for k, v in filters.items())
        ]


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def fake_db(monkeypatch):
    """Install an empty in-memory database as the Supabase client."""
    db = FakeSupabase()
    monkeypatch.setattr(SupabaseClient, "_instance", db)
    return db


@pytest.fixture
def make_user(fake_db):
    """Factory inserting a users row and returning the UserRecord."""

    def _make_user(
        role: str | None = None,
        first_name: str | None = None,
        last_name: str | None = None,
        email: str | None = None,
        onboarding_complete: bool | None = None,
    ) -> UserRecord:
        row = fake_db.insert(
            "users",
            {
                "email": email or f"{uuid4().hex[:8]}@pawsync.test",
                "first_name": first_name,
                "last_name": last_name,
                "role": role,
                "onboarding_complete": (
                    onboarding_complete if onboarding_complete is not None else role is not None
                ),
            },
        )
        return UserRecord(**row)

    return _make_user


@pytest.fixture
def ctx_for(fake_db):
    """Build a RequestContext from the user's current row."""

    def _ctx_for(user: UserRecord) -> RequestContext:
        row = fake_db.rows("users", id=user.id)[0]
        return RequestContext(user=UserRecord(**row))

    return _ctx_for


@pytest.fixture
def trainer(make_user):
    return make_user(role="TRAINER", first_name="Sarah", last_name="Johnson",
                     email="sarah.trainer@pawsync.demo")


@pytest.fixture
def owner(make_user):
    return make_user(role="OWNER", first_name="Emily", last_name="Parker",
                     email="emily.owner@pawsync.demo")


@pytest.fixture
def admin(make_user):
    return make_user(role="ADMIN", first_name="Ada", last_name="Admin")


@pytest.fixture
def workspace(fake_db, trainer):
    """A workspace for the trainer fixture, with its TRAINER membership."""
    row = fake_db.insert(
        "workspaces",
        {
            "trainer_user_id": trainer.id,
            "invite_token": "tok_" + uuid4().hex + uuid4().hex[:8],
            "business_name": "Good Dog Academy",
        },
    )
    fake_db.insert(
        "workspace_members",
        {"workspace_id": row["id"], "user_id": trainer.id, "role": "TRAINER"},
    )
    return row


@pytest.fixture
def pet(fake_db, owner, trainer):
    """Buddy, owned by the owner fixture and assigned to the trainer fixture."""
    return fake_db.insert(
        "pets",
        {"name": "Buddy", "species": "Golden Retriever", "owner_id": owner.id, "trainer_id": trainer.id},
    )


@pytest.fixture
def task(fake_db, pet, trainer):
    """An active daily task for the pet fixture."""
    return fake_db.insert(
        "homework_tasks",
        {
            "pet_id": pet["id"],
            "created_by_trainer_id": trainer.id,
            "title": "Practice 'Sit' Command",
            "instructions": "10 repetitions per session",
            "frequency": "daily",
        },
    )


@pytest.fixture
def api(fake_db):
    """
    TestClient factory authenticated as a given user.

    Usage:
        client = api(owner)
        client.get("/api/pets")
    """
    from fastapi.testclient import TestClient

    from app.auth.dependencies import get_current_user
    from app.auth.models import AuthUser
    from app.main import app

    def _client(user: UserRecord | None = None) -> TestClient:
        app.dependency_overrides.clear()
        if user is not None:
            identity = AuthUser(id=UUID(user.id), email=user.email)
            app.dependency_overrides[get_current_user] = lambda: identity
        return TestClient(app)

    yield _client
    app.dependency_overrides.clear()

# =============================================================================
# tests/conftest.py - Pytest Configuration
# =============================================================================
# This module provides pytest fixtures and configuration for all tests.
#
# Key features:
# - Sets up test environment variables before any imports
# - Replaces the SupabaseClient CRUD methods with an in-memory store
# - Provides TestClient fixtures, anonymous and signed in
# =============================================================================

import copy
import os
import tempfile
import uuid
from datetime import datetime, timedelta, timezone

# =============================================================================
# Set up test environment BEFORE any imports
# =============================================================================
# This must happen before importing app.config which loads settings immediately

os.environ.setdefault("SUPABASE_URL", "https://test-project.supabase.co")
os.environ.setdefault("SUPABASE_SERVICE_KEY", "test-service-key")
os.environ.setdefault("SECRET_KEY", "test-secret-key-for-session-signing")
os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("DEBUG", "true")
os.environ.setdefault("UPLOAD_DIR", tempfile.mkdtemp(prefix="yelpcamp-uploads-"))

import pytest
from fastapi.testclient import TestClient

from lib.supabase_client import SupabaseClient, DuplicateRecordError

TEST_USERNAME = "camper"
TEST_PASSWORD = "s3cret-pass"

# Tables with a unique constraint on one column
UNIQUE_COLUMNS = {"users": "username"}


# =============================================================================
# In-Memory Store
# =============================================================================

class InMemoryStore:
    """
    Stand-in for the Supabase tables, keyed by table name.

    Mirrors the SupabaseClient CRUD class methods so services run unchanged.
    Rows are deep-copied in and out, like a real round trip to the database.
    created_at values increase by one second per insert so ordering is
    deterministic.
    """

    BASE_TIME = datetime(2024, 1, 15, 10, 0, tzinfo=timezone.utc)

    def __init__(self):
        self.tables: dict[str, list[dict]] = {}
        self._seq = 0

    def rows(self, table: str) -> list[dict]:
        return self.tables.setdefault(table, [])

    def _find(self, table: str, record_id) -> dict | None:
        for row in self.rows(table):
            if str(row.get("id")) == str(record_id):
                return row
        return None

    def fetch_by_id(self, table, record_id):
        row = self._find(table, record_id)
        return copy.deepcopy(row) if row else None

    def fetch_one_where(self, table, column, value):
        for row in self.rows(table):
            if row.get(column) == value:
                return copy.deepcopy(row)
        return None

    def fetch_many(self, table, filters=None, order_by="created_at", desc=False):
        matches = [
            row for row in self.rows(table)
            if all(str(row.get(col)) == str(val) for col, val in (filters or {}).items())
        ]
        matches.sort(key=lambda r: r.get(order_by) or "", reverse=desc)
        return copy.deepcopy(matches)

    def insert(self, table, data):
        unique = UNIQUE_COLUMNS.get(table)
        if unique and self.fetch_one_where(table, unique, data.get(unique)):
            raise DuplicateRecordError(table, "duplicate key value violates unique constraint (23505)")

        self._seq += 1
        row = copy.deepcopy(data)
        row.setdefault("id", str(uuid.uuid4()))
        row.setdefault("created_at", (self.BASE_TIME + timedelta(seconds=self._seq)).isoformat())
        self.rows(table).append(row)
        return copy.deepcopy(row)

    def update_by_id(self, table, record_id, data):
        row = self._find(table, record_id)
        if row is None:
            return None
        row.update(copy.deepcopy(data))
        return copy.deepcopy(row)

    def delete_by_id(self, table, record_id):
        row = self._find(table, record_id)
        if row is None:
            return None
        self.rows(table).remove(row)
        return row

    def delete_where(self, table, column, value):
        keep = [row for row in self.rows(table) if str(row.get(column)) != str(value)]
        removed = len(self.rows(table)) - len(keep)
        self.tables[table] = keep
        return removed


STORE_METHODS = (
    "fetch_by_id",
    "fetch_one_where",
    "fetch_many",
    "insert",
    "update_by_id",
    "delete_by_id",
    "delete_where",
)


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def store(monkeypatch):
    """In-memory store patched over every SupabaseClient CRUD method."""
    memory = InMemoryStore()
    for name in STORE_METHODS:
        monkeypatch.setattr(SupabaseClient, name, staticmethod(getattr(memory, name)))
    return memory


@pytest.fixture
def app(store):
    """Fresh application wired to the in-memory store."""
    from app.main import create_app

    return create_app()


@pytest.fixture
def client(app):
    """Anonymous browser: cookies persist between requests."""
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def user(store):
    """A registered user with TEST_USERNAME / TEST_PASSWORD."""
    from core.models.user import UserCreate
    from core.services.user_service import UserService

    return UserService.register(UserCreate(username=TEST_USERNAME, password=TEST_PASSWORD))


@pytest.fixture
def auth_client(client, user):
    """Browser that has signed in as the test user."""
    response = client.post(
        "/login",
        data={"username": TEST_USERNAME, "password": TEST_PASSWORD},
        follow_redirects=False,
    )
    assert response.status_code == 303
    return client


@pytest.fixture
def campground_form():
    """A complete campground form in the nested layout the templates submit."""
    return {
        "campground[title]": "Riverside",
        "campground[location]": "Yosemite, CA",
        "campground[price]": "5",
        "campground[description]": "Shaded sites next to the river",
        "campground[image]": "https://images.unsplash.com/photo-123",
    }


@pytest.fixture
def make_campground(store):
    """Factory that stores a campground directly through the service layer."""
    from core.models.campground import CampgroundInput
    from core.services.campground_service import CampgroundService

    def _make(**overrides):
        fields = {
            "title": "Lakeside",
            "location": "Tahoe, CA",
            "price": 30,
            "description": "Quiet sites by the lake",
            "image": "https://images.unsplash.com/photo-456",
        }
        fields.update(overrides)
        return CampgroundService.create_campground(CampgroundInput(**fields))

    return _make

"""Journey session tests: the DB-backed store and its in-memory stand-in.

MemorySessionStore replaces SessionStore in the route tests.  It keeps
data as JSON text so anything that would not survive the JSONB column
fails here too.
"""

import json
import uuid
from contextlib import asynccontextmanager
from datetime import datetime, timedelta, timezone
from types import SimpleNamespace
from unittest.mock import AsyncMock

import pytest

from formflow_db.engine import pool_options
from formflow_server.cleanup import run_cleanup
from formflow_server.sessions import SessionStore


# =====================================================================
# Mock infrastructure
# =====================================================================


class MemorySessionStore(SessionStore):
    """In-process SessionStore; rows are JSON strings keyed by session id."""

    def __init__(self):
        super().__init__(max_age=3600)
        self.rows: dict[str, str] = {}
        self.saves = 0

    async def load(self, session_id):
        raw = self.rows.get(str(session_id))
        return json.loads(raw) if raw is not None else {}

    async def save(self, session_id, data):
        self.rows[str(session_id)] = json.dumps(data)
        self.saves += 1

    async def purge_expired(self):
        return 0


class FakeSessionRepository:
    """Records calls made by SessionStore against the repository."""

    def __init__(self, row=None, removed=0):
        self.row = row
        self.removed = removed
        self.upserts = []

    async def get_live(self, db, session_id, now):
        return self.row

    async def upsert(self, db, session_id, data, expires_at):
        self.upserts.append((session_id, data, expires_at))

    async def delete_expired(self, db, now):
        return self.removed


@pytest.fixture
def mock_db():
    return AsyncMock()


@pytest.fixture
def factory(mock_db):
    @asynccontextmanager
    async def _session():
        yield mock_db

    return _session


# =====================================================================
# SessionStore
# =====================================================================


@pytest.mark.asyncio
async def test_load_unknown_id_is_empty(factory):
    store = SessionStore(max_age=60, session_factory=factory)
    store._repo = FakeSessionRepository(row=None)
    assert await store.load(str(uuid.uuid4())) == {}
    assert await store.load("not-a-uuid") == {}


@pytest.mark.asyncio
async def test_load_returns_copy_of_row_data(factory):
    row = SimpleNamespace(data={"journeys": {"feedback": {"fullName": "Ada"}}})
    store = SessionStore(max_age=60, session_factory=factory)
    store._repo = FakeSessionRepository(row=row)

    data = await store.load(str(uuid.uuid4()))
    assert data == row.data
    data["submission"] = {}
    assert "submission" not in row.data


@pytest.mark.asyncio
async def test_save_upserts_with_expiry_and_commits(factory, mock_db):
    store = SessionStore(max_age=600, session_factory=factory)
    repo = store._repo = FakeSessionRepository()
    sid = uuid.uuid4()

    before = datetime.now(timezone.utc)
    await store.save(str(sid), {"journeys": {}})

    (saved_id, data, expires_at), = repo.upserts
    assert saved_id == sid
    assert data == {"journeys": {}}
    assert expires_at >= before + timedelta(seconds=600)
    mock_db.commit.assert_awaited_once()


@pytest.mark.asyncio
async def test_save_rejects_malformed_id(factory):
    store = SessionStore(max_age=60, session_factory=factory)
    with pytest.raises(ValueError):
        await store.save("abc", {})


@pytest.mark.asyncio
async def test_cleanup_purges_expired(factory, mock_db, monkeypatch):
    store = SessionStore(max_age=60, session_factory=factory)
    store._repo = FakeSessionRepository(removed=3)
    monkeypatch.setattr("formflow_server.cleanup.dispose_engine", AsyncMock())

    assert await run_cleanup(store) == 3
    mock_db.commit.assert_awaited_once()


# =====================================================================
# Engine pool options
# =====================================================================


def test_pool_options_defaults(monkeypatch):
    for name in ("PG_POOL_SIZE", "PG_MAX_OVERFLOW", "PG_POOL_TIMEOUT", "PG_POOL_RECYCLE", "PG_ECHO"):
        monkeypatch.delenv(name, raising=False)
    options = pool_options()
    assert options["pool_size"] == 5
    assert options["max_overflow"] == 10
    assert options["pool_timeout"] == 30.0
    assert options["pool_recycle"] == -1
    assert options["pool_pre_ping"] is True
    assert options["echo"] is False


def test_pool_options_from_environment(monkeypatch):
    monkeypatch.setenv("PG_POOL_SIZE", "20")
    monkeypatch.setenv("PG_MAX_OVERFLOW", "0")
    monkeypatch.setenv("PG_POOL_RECYCLE", "1800")
    monkeypatch.setenv("PG_ECHO", "TRUE")
    options = pool_options()
    assert options["pool_size"] == 20
    assert options["max_overflow"] == 0
    assert options["pool_recycle"] == 1800
    assert options["echo"] is True

"""Global test fixtures and utilities for rewards-engine tests"""
import pytest
from unittest.mock import AsyncMock, MagicMock
from datetime import datetime, timezone

from fakes import FakeDatabase, FrozenClock, InMemoryRewardsStore, patch_queries
from rewards_engine.services.container import ServiceContainer


# ============================================================================
# Database Fixtures
# ============================================================================

@pytest.fixture
def mock_db_cursor():
    """Mock psycopg cursor with empty results"""
    cursor = AsyncMock()
    cursor.fetchone = AsyncMock(return_value=None)
    cursor.fetchall = AsyncMock(return_value=[])
    cursor.execute = AsyncMock()
    cursor.rowcount = 0
    return cursor


@pytest.fixture
def mock_db_connection(mock_db_cursor):
    """Mock psycopg connection whose cursor() context yields mock_db_cursor"""
    conn = MagicMock()
    conn.cursor.return_value.__aenter__ = AsyncMock(return_value=mock_db_cursor)
    conn.cursor.return_value.__aexit__ = AsyncMock(return_value=False)
    return conn


@pytest.fixture
def store(monkeypatch):
    """In-memory rewards tables patched over rewards_engine.db.queries"""
    store = InMemoryRewardsStore()
    patch_queries(monkeypatch, store)
    return store


@pytest.fixture
def fake_db(store):
    """Database double bound to the in-memory store"""
    return FakeDatabase(store)


# ============================================================================
# Clock Fixtures
# ============================================================================

@pytest.fixture
def clock():
    """Clock frozen at 2025-03-01 12:00 UTC"""
    return FrozenClock(datetime(2025, 3, 1, 12, 0, tzinfo=timezone.utc))


# ============================================================================
# Service Fixtures
# ============================================================================

@pytest.fixture
def container(fake_db, clock):
    """Fully wired services over the in-memory store"""
    return ServiceContainer(db=fake_db, clock=clock)


@pytest.fixture
def test_user_id():
    """Standard test user ID"""
    return "user-123"

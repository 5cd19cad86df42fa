# -*- coding: utf-8 -*-
"""
Shared fixtures: a fresh SQLite database per test, in-memory remote
stores and a session wired to them.
"""
import os
import sys
import tempfile
from pathlib import Path

# Must be set before app.config is imported
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")
os.environ.setdefault("REGISTRY_LOGS_DIR", tempfile.mkdtemp(prefix="registry-logs-"))

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

import pytest

from repositories.database import Database
from repositories.local_stores import create_local_stores
from repositories.settings_repository import SettingsRepository
from services.sync_session import SyncSession

from fakes import (
    FakeApiClient, FakeConnectivity, FakeMediaStore,
    create_memory_remote_stores, seed_hierarchy
)


@pytest.fixture
def db(tmp_path):
    """Initialized local database in a temp directory."""
    database = Database(tmp_path / "registry.db")
    database.initialize()
    yield database
    database.close()


@pytest.fixture
def fresh_db(tmp_path):
    """Second, empty local database (another device)."""
    database = Database(tmp_path / "fresh.db")
    database.initialize()
    yield database
    database.close()


@pytest.fixture
def local_stores(db):
    return create_local_stores(db)


@pytest.fixture
def settings(db):
    return SettingsRepository(db)


@pytest.fixture
def remote_stores():
    return create_memory_remote_stores()


@pytest.fixture
def media_store():
    return FakeMediaStore()


@pytest.fixture
def api_client():
    return FakeApiClient()


@pytest.fixture
def connectivity():
    return FakeConnectivity()


@pytest.fixture
def session(local_stores, remote_stores, media_store, api_client, connectivity, settings):
    return SyncSession(
        local_stores=local_stores,
        remote_stores=remote_stores,
        media_store=media_store,
        api_client=api_client,
        connectivity=connectivity,
        settings=settings,
    )


@pytest.fixture
def seeded(local_stores):
    """W01 / V01 / H001 / Jane Doe in the local store."""
    return seed_hierarchy(local_stores)

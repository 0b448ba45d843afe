"""
Pytest configuration and shared fixtures.

Repository and API tests run against a throwaway SQLite file per test.
Tests marked ``db`` need a real PostgreSQL at DATABASE_URL.
"""

import asyncio
import os

# Must be set before candidate_tracker.core.config is imported
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///./test.db")

import pytest
from fastapi.testclient import TestClient

from candidate_tracker.core.config import Settings
from candidate_tracker.db.session import Database
from candidate_tracker.main import create_app


def pytest_configure(config):
    config.addinivalue_line("markers", "unit: fast tests, no external deps")
    config.addinivalue_line("markers", "db: requires a PostgreSQL database")
    config.addinivalue_line("markers", "server: requires running HTTP server")


def pytest_collection_modifyitems(config, items):
    run_db = os.environ.get("RUN_DB_TESTS") == "1"
    run_server = os.environ.get("RUN_SERVER_TESTS") == "1"

    skip_db = pytest.mark.skip(reason="db tests skipped by default; set RUN_DB_TESTS=1 to enable")
    skip_server = pytest.mark.skip(reason="server tests skipped by default; set RUN_SERVER_TESTS=1 to enable")

    for item in items:
        if "db" in item.keywords and not run_db:
            item.add_marker(skip_db)
        if "server" in item.keywords and not run_server:
            item.add_marker(skip_server)


@pytest.fixture
def database_url(tmp_path):
    return f"sqlite+aiosqlite:///{tmp_path / 'candidates.db'}"


@pytest.fixture
def make_client(database_url):
    """Build a TestClient for an app backed by the per-test SQLite file."""
    clients = []

    def _make(**overrides):
        settings = Settings(**{"DATABASE_URL": database_url, "ENVIRONMENT": "test", **overrides})
        app = create_app(settings=settings, database=Database(database_url))
        client = TestClient(app, raise_server_exceptions=False)
        client.__enter__()
        clients.append(client)
        return client

    yield _make

    for client in clients:
        client.__exit__(None, None, None)


@pytest.fixture
def client(make_client):
    return make_client()


@pytest.fixture
def run_in_session(database_url):
    """
    Run ``fn(session)`` inside a fresh schema and return its result.

    Each call gets its own event loop through asyncio.run, like the
    standalone async tests in this suite.
    """

    def _run(fn):
        async def main():
            database = Database(database_url)
            await database.connect()
            await database.create_schema()
            try:
                async with database.session() as session:
                    return await fn(session)
            finally:
                await database.disconnect()

        return asyncio.run(main())

    return _run

"""Pytest configuration and fixtures."""

import sqlite3

import pytest

from config import GatewayConfig
from db.base import Backend
from db.registry import DatabaseRegistry
from db.sqlite_client import SqliteBackend
from main import create_app
from models import BackendResult

TOKEN = "s3cret-token"


class RecordingBackend(Backend):
    """Backend double that remembers every statement it was asked to run."""

    def __init__(self, rows=None, meta=None, error=None):
        self.calls = []
        self.rows = rows or []
        self.meta = meta if meta is not None else {"changes": 1}
        self.error = error

    def execute(self, sql, params=()):
        self.calls.append((sql, tuple(params)))
        if self.error is not None:
            raise self.error
        return BackendResult(rows=list(self.rows), meta=dict(self.meta))


@pytest.fixture
def users_db(tmp_path):
    """SQLite file with a small users table."""
    path = tmp_path / "users.db"
    conn = sqlite3.connect(path)
    conn.executescript("""
        CREATE TABLE users (id INTEGER PRIMARY KEY, name TEXT, age INTEGER);
        INSERT INTO users (id, name, age) VALUES (1, 'alice', 25);
        INSERT INTO users (id, name, age) VALUES (2, 'bob', 31);
        INSERT INTO users (id, name, age) VALUES (3, 'carol', 25);
    """)
    conn.commit()
    conn.close()
    return str(path)


@pytest.fixture
def recorder():
    return RecordingBackend()


@pytest.fixture
def gateway_config(users_db, recorder):
    registry = DatabaseRegistry([
        ("DB_USERS", SqliteBackend(users_db)),
        ("DB_FAKE", recorder),
    ])
    return GatewayConfig(api_token=TOKEN, databases=registry)


@pytest.fixture
def app(gateway_config):
    app = create_app(gateway_config)
    app.config["TESTING"] = True
    return app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def auth():
    return {"Authorization": f"Bearer {TOKEN}"}

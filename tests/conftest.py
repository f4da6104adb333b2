"""Pytest configuration and fixtures for minirdbms tests."""

import tempfile
from pathlib import Path

import pytest

from minirdbms import Database, MemoryStore, StorageError


class FailingStore(MemoryStore):
    """Store whose save always fails"""

    def save(self, snapshot):
        raise StorageError("disk full")


@pytest.fixture
def temp_dir():
    """Provide a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def failing_store() -> FailingStore:
    return FailingStore()


@pytest.fixture
def db(store: MemoryStore) -> Database:
    return Database(store)


@pytest.fixture
def users_db(db: Database) -> Database:
    """Database with a users table holding two rows."""
    db.execute('CREATE TABLE users (id INT PRIMARY, name TEXT)')
    db.execute('INSERT INTO users (1, "Alice")')
    db.execute('INSERT INTO users (2, "Bob")')
    return db

"""Shared test fixtures for the invoice app test suite."""

import fnmatch
import os
from pathlib import Path

import pytest
from dotenv import load_dotenv

# Load .env file BEFORE any other imports that might use env vars
load_dotenv(Path(__file__).parent.parent / ".env", override=True)

# Reset vault client singleton to pick up env vars
import clients.vault_client as vault_module
vault_module._vault_client_instance = None
vault_module._secret_cache.clear()

SCHEMA_PATH = Path(__file__).parent.parent / "schema.sql"


# =============================================================================
# DATABASE FIXTURES
# =============================================================================


@pytest.fixture(scope="session")
def db():
    """Session-scoped PostgresClient on TEST_DATABASE_URL with the schema applied."""
    url = os.getenv("TEST_DATABASE_URL")
    if not url:
        pytest.skip("TEST_DATABASE_URL not set")

    from clients.postgres_client import PostgresClient

    client = PostgresClient(url)
    client.execute(SCHEMA_PATH.read_text())
    yield client
    client.close()


@pytest.fixture
def clean_db(db):
    """Empty tables before the test."""
    db.execute("TRUNCATE invoices, users")
    return db


# =============================================================================
# VALKEY FIXTURES
# =============================================================================


@pytest.fixture(scope="session")
def valkey():
    """Session-scoped ValkeyClient on TEST_VALKEY_URL."""
    url = os.getenv("TEST_VALKEY_URL")
    if not url:
        pytest.skip("TEST_VALKEY_URL not set")

    from clients.valkey_client import ValkeyClient

    client = ValkeyClient(url)
    yield client
    client.close()


class InMemoryValkey:
    """Dict-backed stand-in for ValkeyClient. TTLs are ignored."""

    def __init__(self):
        self.store = {}

    def set_json(self, key, value, expire_seconds=None):
        self.store[key] = value

    def get_json(self, key):
        return self.store.get(key)

    def delete(self, key):
        return self.store.pop(key, None) is not None

    def incr(self, key):
        self.store[key] = self.store.get(key, 0) + 1
        return self.store[key]

    def get_ints(self, keys):
        return [self.store.get(k, 0) for k in keys]

    def delete_matching(self, pattern):
        keys = [k for k in self.store if fnmatch.fnmatchcase(k, pattern)]
        for k in keys:
            del self.store[k]
        return len(keys)


@pytest.fixture
def memory_valkey():
    return InMemoryValkey()

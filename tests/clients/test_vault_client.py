"""Tests for VaultClient - AppRole login and KV v2 secrets under invoices/."""

from unittest.mock import MagicMock, patch

import pytest
from hvac.exceptions import Forbidden, InvalidPath

import clients.vault_client as vault_module
from clients.vault_client import VaultClient, VaultError, get_storage_config


@pytest.fixture
def vault_env(monkeypatch):
    monkeypatch.setenv("VAULT_ADDR", "https://vault.example.com")
    monkeypatch.setenv("VAULT_ROLE_ID", "role")
    monkeypatch.setenv("VAULT_SECRET_ID", "secret")
    monkeypatch.delenv("VAULT_NAMESPACE", raising=False)


@pytest.fixture
def hvac_client(vault_env):
    with patch("clients.vault_client.hvac.Client") as client_cls:
        client = MagicMock()
        client.auth.approle.login.return_value = {"auth": {"client_token": "tok"}}
        client.is_authenticated.return_value = True
        client_cls.return_value = client
        yield client


@pytest.fixture
def fresh_cache():
    vault_module._vault_client_instance = None
    vault_module._secret_cache.clear()
    yield
    vault_module._vault_client_instance = None
    vault_module._secret_cache.clear()


def _secret(data: dict) -> dict:
    return {"data": {"data": data}}


class TestVaultClientInit:
    """Initialization and authentication."""

    def test_missing_vault_addr_raises(self, monkeypatch):
        monkeypatch.delenv("VAULT_ADDR", raising=False)
        with pytest.raises(VaultError, match="VAULT_ADDR"):
            VaultClient()

    def test_missing_approle_credentials_raises(self, monkeypatch):
        monkeypatch.setenv("VAULT_ADDR", "https://vault.example.com")
        monkeypatch.delenv("VAULT_ROLE_ID", raising=False)
        with pytest.raises(VaultError, match="VAULT_ROLE_ID"):
            VaultClient()

    def test_login_sets_token(self, hvac_client):
        VaultClient()
        hvac_client.auth.approle.login.assert_called_once_with(role_id="role", secret_id="secret")
        assert hvac_client.token == "tok"

    def test_failed_login_raises(self, hvac_client):
        hvac_client.auth.approle.login.side_effect = Forbidden("bad role")
        with pytest.raises(VaultError, match="AppRole authentication failed"):
            VaultClient()


class TestGetSecret:
    """Secret retrieval scoped to invoices/."""

    def test_reads_prefixed_path(self, hvac_client):
        hvac_client.secrets.kv.v2.read_secret_version.return_value = _secret({"url": "postgres://x"})

        assert VaultClient().get_secret("database", "url") == "postgres://x"
        hvac_client.secrets.kv.v2.read_secret_version.assert_called_once_with(
            path="invoices/database", raise_on_deleted_version=True
        )

    def test_missing_path_raises(self, hvac_client):
        hvac_client.secrets.kv.v2.read_secret_version.side_effect = InvalidPath()
        with pytest.raises(VaultError, match="not found"):
            VaultClient().get_secret("nope", "url")

    def test_missing_field_raises_key_error(self, hvac_client):
        hvac_client.secrets.kv.v2.read_secret_version.return_value = _secret({"url": "x"})
        with pytest.raises(KeyError, match="password"):
            VaultClient().get_secret("database", "password")


class TestStorageConfig:

    def test_reads_all_fields_once(self, hvac_client, fresh_cache):
        hvac_client.secrets.kv.v2.read_secret_version.return_value = _secret({
            "bucket_name": "receipts",
            "region": "us-east-1",
            "access_key_id": "AKIA",
            "secret_access_key": "shh",
        })

        first = get_storage_config()
        second = get_storage_config()

        assert first == second
        assert first["bucket_name"] == "receipts"
        # One read per field, then served from cache
        assert hvac_client.secrets.kv.v2.read_secret_version.call_count == 4

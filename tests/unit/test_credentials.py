"""
Unit tests for secret lookup adapters.
"""

from unittest.mock import MagicMock

import pytest
from hvac.exceptions import Forbidden, InvalidPath
from gate_ldap.adapters.env_credential import EnvCredentialAdapter
from gate_ldap.adapters.vault_credential import VaultCredentialAdapter
from gate_ldap.errors import ConfigurationError


class TestEnvCredentialAdapter:
    """Test environment variable secrets."""

    def test_retrieve(self, monkeypatch):
        monkeypatch.setenv("TEST_LDAP_MANAGER_PASSWORD", "s3cret")
        adapter = EnvCredentialAdapter(prefix="TEST_")

        assert adapter.retrieve("ldap_manager_password") == "s3cret"

    def test_missing_and_blank(self, monkeypatch):
        monkeypatch.setenv("TEST_BLANK", "")
        adapter = EnvCredentialAdapter(prefix="TEST_")

        assert adapter.retrieve("blank") is None
        assert adapter.retrieve("does_not_exist") is None


class TestVaultCredentialAdapter:
    """Test Vault secrets with a stubbed hvac client."""

    @pytest.fixture
    def client(self):
        client = MagicMock()
        client.is_authenticated.return_value = True
        return client

    def test_retrieve(self, client):
        client.secrets.kv.v2.read_secret_version.return_value = {
            "data": {"data": {"value": "s3cret"}}
        }
        adapter = VaultCredentialAdapter(client=client)

        assert adapter.retrieve("ldap_manager_password") == "s3cret"
        client.secrets.kv.v2.read_secret_version.assert_called_once_with(
            path="gate/ldap_manager_password",
            mount_point="secret",
        )

    def test_missing_path(self, client):
        client.secrets.kv.v2.read_secret_version.side_effect = InvalidPath("not found")
        adapter = VaultCredentialAdapter(client=client)

        assert adapter.retrieve("ldap_manager_password") is None

    def test_vault_error(self, client):
        client.secrets.kv.v2.read_secret_version.side_effect = Forbidden("denied")
        adapter = VaultCredentialAdapter(client=client)

        with pytest.raises(ConfigurationError):
            adapter.retrieve("ldap_manager_password")

    def test_unauthenticated(self, client):
        client.is_authenticated.return_value = False

        with pytest.raises(ConfigurationError):
            VaultCredentialAdapter(client=client)

"""
HashiCorp Vault Credential Adapter - Production-grade secret lookup.
"""

import logging
from typing import Optional

import hvac
from hvac.exceptions import InvalidPath, VaultError

from gate_ldap.errors import ConfigurationError
from gate_ldap.ports.credential_port import CredentialPort


logger = logging.getLogger(__name__)


class VaultCredentialAdapter(CredentialPort):
    """
    HashiCorp Vault secret lookup.

    Uses KV Secrets Engine v2. Each key is a secret at
    {path_prefix}/{key} holding its value under "value".
    """

    def __init__(
        self,
        url: str = "http://localhost:8200",
        token: Optional[str] = None,
        mount_point: str = "secret",
        path_prefix: str = "gate",
        client: Optional[hvac.Client] = None,
    ):
        """
        Initialize Vault adapter.

        Args:
            url: Vault server URL
            token: Vault token (or use VAULT_TOKEN env var)
            mount_point: KV mount point (default: secret)
            path_prefix: Path prefix for secrets (default: gate)
            client: Pre-built hvac client

        Raises:
            ConfigurationError: If the Vault token is not accepted
        """
        self._mount_point = mount_point
        self._path_prefix = path_prefix
        self._client = client or hvac.Client(url=url, token=token)

        if not self._client.is_authenticated():
            raise ConfigurationError("Vault authentication failed")

    def _get_path(self, key: str) -> str:
        """Get full Vault path for a key."""
        return f"{self._path_prefix}/{key}"

    def retrieve(self, key: str) -> Optional[str]:
        """
        Retrieve a secret from Vault.

        Args:
            key: Credential key

        Returns:
            Secret value, or None if the path does not exist
        """
        try:
            response = self._client.secrets.kv.v2.read_secret_version(
                path=self._get_path(key),
                mount_point=self._mount_point,
            )
        except InvalidPath:
            logger.warning("Vault secret %s not found", self._get_path(key))
            return None
        except VaultError as exc:
            raise ConfigurationError(f"Vault lookup failed for {key}: {exc}") from exc

        return response["data"]["data"].get("value")

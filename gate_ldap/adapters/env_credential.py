"""
Environment Variable Credential Adapter - Secrets from the process environment.

WARNING: For development only. Use Vault in production.
"""

import os
from typing import Optional
from gate_ldap.ports.credential_port import CredentialPort


class EnvCredentialAdapter(CredentialPort):
    """
    Environment variable-based secret lookup.

    Key "ldap_manager_password" reads GATE_LDAP_MANAGER_PASSWORD with the
    default prefix.
    """

    def __init__(self, prefix: str = "GATE_"):
        """
        Initialize env credential adapter.

        Args:
            prefix: Prefix for environment variables (default GATE_)
        """
        self._prefix = prefix

    def _env_key(self, key: str) -> str:
        """Convert credential key to env var name."""
        return f"{self._prefix}{key.upper()}"

    def retrieve(self, key: str) -> Optional[str]:
        return os.environ.get(self._env_key(key)) or None

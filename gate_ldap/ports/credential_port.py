"""
Credential Port - Interface for reading secrets such as the manager password.

Implementations:
- VaultCredentialAdapter: HashiCorp Vault
- EnvCredentialAdapter: Environment variables (dev only)
"""

from abc import ABC, abstractmethod
from typing import Optional


class CredentialPort(ABC):
    """Port: Secret retrieval."""

    @abstractmethod
    def retrieve(self, key: str) -> Optional[str]:
        """
        Retrieve a secret value.

        Args:
            key: Credential identifier (e.g., "ldap_manager_password")

        Returns:
            Secret value, or None if not found
        """
        pass

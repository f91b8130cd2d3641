"""
Permission Ports - Collaborators that own role state and account scope.

Implementations:
- HttpPermissionRegistrar / HttpAllowedAccountsResolver: remote permission service
- InMemoryPermissionStore: local role-to-account table (testing, dev)
"""

from abc import ABC, abstractmethod
from typing import Collection, Set


class PermissionRegistrarPort(ABC):
    """Port: Record that a user logged in with a set of roles."""

    @abstractmethod
    def register_login(self, username: str, roles: Collection[str]) -> None:
        """
        Register a login. May persist or update role state.

        Args:
            username: Authenticated username
            roles: Canonical role names

        Raises:
            Exception: Any failure; the caller fails the authentication
        """
        pass


class AllowedAccountsPort(ABC):
    """Port: Compute which resource accounts a user may access."""

    @abstractmethod
    def resolve_allowed(self, username: str, roles: Collection[str]) -> Set[str]:
        """
        Resolve accessible accounts.

        Args:
            username: Authenticated username
            roles: Canonical role names

        Returns:
            Account names
        """
        pass

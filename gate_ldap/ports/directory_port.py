"""
Directory Port - Interface for credential validation against a directory.

Implementations:
- Ldap3DirectoryClient: LDAP bind/search via ldap3
"""

from abc import ABC, abstractmethod
from gate_ldap.domain.identity import RawDirectoryIdentity


class DirectoryClientPort(ABC):
    """Port: Validate credentials and read the user's entry and groups."""

    @abstractmethod
    def authenticate(self, username: str, password: str) -> RawDirectoryIdentity:
        """
        Bind as the user and collect attributes and group authorities.

        Args:
            username: Login name as typed by the user
            password: User password

        Returns:
            Raw identity for the bound user

        Raises:
            InvalidCredentialsError: If the directory rejects the user bind
            DirectoryLookupError: On search, network or timeout failures
        """
        pass

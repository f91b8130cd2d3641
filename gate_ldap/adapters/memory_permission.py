"""
Memory Permission Adapter - In-memory role registry (testing, local dev).
"""

from typing import Collection, Dict, FrozenSet, Iterable, List, Mapping, Optional, Set, Tuple
from gate_ldap.ports.permission_port import PermissionRegistrarPort, AllowedAccountsPort


class InMemoryPermissionStore(PermissionRegistrarPort, AllowedAccountsPort):
    """
    In-memory permission store.

    Accounts are granted per role; a user sees the union over their roles
    plus any account granted to everyone (role "*").

    WARNING: Only for testing. State is lost on restart.
    """

    def __init__(self, account_roles: Optional[Mapping[str, Iterable[str]]] = None):
        """
        Initialize the store.

        Args:
            account_roles: {account_name: [role, ...]}; "*" grants to all
        """
        self._account_roles: Dict[str, Set[str]] = {
            account: {r.lower() for r in roles}
            for account, roles in (account_roles or {}).items()
        }
        self._user_roles: Dict[str, FrozenSet[str]] = {}
        self.logins: List[Tuple[str, FrozenSet[str]]] = []

    def register_login(self, username: str, roles: Collection[str]) -> None:
        frozen = frozenset(roles)
        self._user_roles[username] = frozen
        self.logins.append((username, frozen))

    def resolve_allowed(self, username: str, roles: Collection[str]) -> Set[str]:
        roles = set(roles)
        return {
            account
            for account, allowed in self._account_roles.items()
            if "*" in allowed or allowed & roles
        }

    def roles_for(self, username: str) -> Optional[FrozenSet[str]]:
        """Roles recorded at the user's last login."""
        return self._user_roles.get(username)

    def grant(self, account: str, role: str):
        """Grant an account to a role."""
        self._account_roles.setdefault(account, set()).add(role.lower())

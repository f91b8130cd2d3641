"""
Identity Domain Models - Directory lookup results and gateway principals.
"""

from dataclasses import dataclass, field
from typing import Dict, Any, FrozenSet, Iterable, Mapping, Optional


MAIL_ATTRIBUTE = "mail"


@dataclass(frozen=True)
class RawDirectoryIdentity:
    """
    Result of a successful directory bind/search.

    attributes maps an attribute name to its (first) string value, or None
    when the directory returned the attribute without a value.
    """
    username: str
    attributes: Mapping[str, Optional[str]] = field(default_factory=dict)
    raw_groups: FrozenSet[str] = frozenset()
    dn: Optional[str] = None

    def attribute(self, name: str) -> Optional[str]:
        """Get a string attribute; None when absent or empty."""
        value = self.attributes.get(name)
        if value is None:
            value = self.attributes.get(name.lower())
        return value or None

    @property
    def mail(self) -> Optional[str]:
        return self.attribute(MAIL_ATTRIBUTE)


@dataclass(frozen=True)
class Principal:
    """
    Principal entity - the authenticated identity for the rest of a request.

    Domain rules:
    - roles are canonical: lower-case, no ROLE_ prefix, no duplicates
    - allowed_accounts reflects the resolver's answer at login time
    - email is optional (not every directory entry has mail)
    """
    username: str
    email: Optional[str] = None
    roles: FrozenSet[str] = frozenset()
    allowed_accounts: FrozenSet[str] = frozenset()

    @classmethod
    def create(
        cls,
        username: str,
        email: Optional[str] = None,
        roles: Iterable[str] = (),
        allowed_accounts: Iterable[str] = (),
    ) -> "Principal":
        """Create a principal, freezing the role and account collections."""
        return cls(
            username=username,
            email=email,
            roles=frozenset(roles),
            allowed_accounts=frozenset(allowed_accounts),
        )

    def has_role(self, role: str) -> bool:
        return role.lower() in self.roles

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to dict."""
        return {
            "username": self.username,
            "email": self.email,
            "roles": sorted(self.roles),
            "allowed_accounts": sorted(self.allowed_accounts),
        }

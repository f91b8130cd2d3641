"""
Role Normalization - Directory group authorities to canonical role names.

Best effort: tokens that are empty once the prefix is stripped are dropped
without error.
"""

from typing import Any, FrozenSet, Iterable, Optional


ROLE_PREFIX = "ROLE_"


class RoleNormalizer:
    """
    Convert raw group authorities into gateway role names.

    "ROLE_Admin" -> "admin", "role_user" -> "user", "guest" -> "guest".
    Accepts plain strings or objects exposing an ``authority`` attribute.
    """

    def __init__(self, prefix: str = ROLE_PREFIX):
        self._prefix = prefix.lower()

    def normalize(self, raw_authorities: Iterable[Any]) -> FrozenSet[str]:
        roles = set()
        for token in raw_authorities or ():
            role = self.normalize_one(token)
            if role:
                roles.add(role)
        return frozenset(roles)

    def normalize_one(self, token: Any) -> Optional[str]:
        """Normalize a single authority; None if nothing remains."""
        if token is not None and not isinstance(token, str):
            token = getattr(token, "authority", None)
        if not token:
            return None

        role = token.strip().lower()
        # repeated prefixes collapse so normalize() stays idempotent
        while self._prefix and role.startswith(self._prefix):
            role = role[len(self._prefix):].strip()
        return role or None


_default = RoleNormalizer()


def normalize_roles(raw_authorities: Iterable[Any]) -> FrozenSet[str]:
    """Normalize with the default ROLE_ prefix."""
    return _default.normalize(raw_authorities)

"""
Configuration Values - Directory bind parameters and gateway settings.

Both are built once at startup and shared read-only across requests.
"""

import os
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Dict, Any, Mapping, Optional, Tuple

from gate_ldap.errors import ConfigurationError

if TYPE_CHECKING:
    from gate_ldap.ports.credential_port import CredentialPort


DEFAULT_GROUP_SEARCH_FILTER = "(uniqueMember={0})"
DEFAULT_GROUP_ROLE_ATTRIBUTE = "cn"

# (field name, property key, env suffix)
_BIND_FIELDS: Tuple[Tuple[str, str, str], ...] = (
    ("url", "url", "URL"),
    ("manager_dn", "managerDn", "MANAGER_DN"),
    ("manager_password", "managerPassword", "MANAGER_PASSWORD"),
    ("group_search_base", "groupSearchBase", "GROUP_SEARCH_BASE"),
    ("user_dn_pattern", "userDnPattern", "USER_DN_PATTERN"),
    ("user_search_base", "userSearchBase", "USER_SEARCH_BASE"),
    ("user_search_filter", "userSearchFilter", "USER_SEARCH_FILTER"),
    ("group_search_filter", "groupSearchFilter", "GROUP_SEARCH_FILTER"),
    ("group_role_attribute", "groupRoleAttribute", "GROUP_ROLE_ATTRIBUTE"),
    ("connect_timeout", "connectTimeout", "CONNECT_TIMEOUT"),
)

_MANDATORY = ("url", "manager_dn", "manager_password", "group_search_base")

# secrets are used exactly as configured
_VERBATIM = frozenset({"manager_password"})


def _blank_to_none(value: Any, verbatim: bool = False) -> Optional[str]:
    if value is None:
        return None
    value = str(value)
    if not value.strip():
        return None
    return value if verbatim else value.strip()


def _truthy(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return str(value or "").strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class DirectoryBindConfig:
    """
    Connection parameters for the LDAP directory.

    Domain rules:
    - url, manager_dn, manager_password and group_search_base are mandatory
    - user_dn_pattern and user_search_base/user_search_filter are optional
      resolution paths; when both are absent the directory client falls
      back to its own default search
    - manager_password is never rendered by repr()
    """
    url: Optional[str] = None
    manager_dn: Optional[str] = None
    manager_password: Optional[str] = field(default=None, repr=False)
    group_search_base: Optional[str] = None

    user_dn_pattern: Optional[str] = None
    user_search_base: Optional[str] = None
    user_search_filter: Optional[str] = None

    group_search_filter: str = DEFAULT_GROUP_SEARCH_FILTER
    group_role_attribute: str = DEFAULT_GROUP_ROLE_ATTRIBUTE
    connect_timeout: float = 5.0

    @classmethod
    def from_mapping(
        cls,
        props: Mapping[str, Any],
        namespace: str = "ldap",
    ) -> "DirectoryBindConfig":
        """
        Build from flat key/value properties.

        Args:
            props: Properties such as {"ldap.url": ..., "ldap.managerDn": ...}
            namespace: Property namespace (default "ldap")

        Returns:
            Config with blank values treated as absent
        """
        values = {}
        for name, key, _ in _BIND_FIELDS:
            value = _blank_to_none(props.get(f"{namespace}.{key}"), name in _VERBATIM)
            if value is not None:
                values[name] = value
        return cls._coerce(values)

    @classmethod
    def from_env(cls, prefix: str = "LDAP_") -> "DirectoryBindConfig":
        """Build from environment variables (LDAP_URL, LDAP_MANAGER_DN, ...)."""
        values = {}
        for name, _, suffix in _BIND_FIELDS:
            value = _blank_to_none(os.environ.get(f"{prefix}{suffix}"), name in _VERBATIM)
            if value is not None:
                values[name] = value
        return cls._coerce(values)

    @classmethod
    def _coerce(cls, values: Dict[str, Any]) -> "DirectoryBindConfig":
        if "connect_timeout" in values:
            try:
                values["connect_timeout"] = float(values["connect_timeout"])
            except ValueError as exc:
                raise ConfigurationError(
                    f"ldap.connectTimeout must be a number, got {values['connect_timeout']!r}"
                ) from exc
        return cls(**values)

    @property
    def has_dn_pattern(self) -> bool:
        return bool(self.user_dn_pattern)

    @property
    def has_user_search(self) -> bool:
        return bool(self.user_search_base or self.user_search_filter)

    def missing_fields(self) -> Tuple[str, ...]:
        """Names of mandatory fields that are not set."""
        return tuple(name for name in _MANDATORY if not getattr(self, name))

    def validate(self) -> "DirectoryBindConfig":
        """
        Check presence of mandatory fields.

        Raises:
            ConfigurationError: Listing every missing field
        """
        missing = self.missing_fields()
        if missing:
            raise ConfigurationError(
                "LDAP authentication is enabled but missing settings: "
                + ", ".join(missing),
                missing=missing,
            )
        return self

    def with_manager_password(self, password: str) -> "DirectoryBindConfig":
        """Copy with the bind secret filled in."""
        return replace(self, manager_password=password)

    def resolve_manager_password(
        self,
        credentials: "CredentialPort",
        key: str = "ldap_manager_password",
    ) -> "DirectoryBindConfig":
        """
        Fill manager_password from a credential store when not configured inline.

        Args:
            credentials: Credential adapter (env, Vault)
            key: Credential key holding the bind secret

        Returns:
            Config with manager_password set if the store had a value
        """
        if self.manager_password:
            return self
        secret = credentials.retrieve(key)
        if not secret:
            return self
        return self.with_manager_password(secret)


@dataclass(frozen=True)
class GatewaySettings:
    """Gateway-level settings this authentication mode depends on."""
    enabled: bool = False
    base_url: str = ""

    @classmethod
    def from_mapping(cls, props: Mapping[str, Any]) -> "GatewaySettings":
        """Read ldap.enabled and services.deck.baseUrl."""
        return cls(
            enabled=_truthy(props.get("ldap.enabled")),
            base_url=_blank_to_none(props.get("services.deck.baseUrl")) or "",
        )

    @classmethod
    def from_env(cls) -> "GatewaySettings":
        """Read LDAP_ENABLED and GATE_BASE_URL."""
        return cls(
            enabled=_truthy(os.environ.get("LDAP_ENABLED")),
            base_url=_blank_to_none(os.environ.get("GATE_BASE_URL")) or "",
        )

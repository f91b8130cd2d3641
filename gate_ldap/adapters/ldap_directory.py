"""
LDAP Directory Adapter - Implements DirectoryClientPort with ldap3.

Resolution order for the user's DN:
1. user DN pattern (direct bind, no search)
2. user search base + filter (manager bind, search, then user bind)
When neither is configured, a search for (uid={0}) under the root DN is used.
"""

import logging
from typing import Any, Dict, List, Optional, Tuple
from urllib.parse import unquote, urlparse

from ldap3 import BASE, SUBTREE, SYNC, Connection, Server
from ldap3.core.exceptions import LDAPException
from ldap3.utils.conv import escape_filter_chars
from ldap3.utils.dn import escape_rdn

from gate_ldap.domain.config import DirectoryBindConfig
from gate_ldap.domain.identity import RawDirectoryIdentity
from gate_ldap.errors import DirectoryLookupError, InvalidCredentialsError
from gate_ldap.ports.directory_port import DirectoryClientPort


logger = logging.getLogger(__name__)

DEFAULT_USER_SEARCH_FILTER = "(uid={0})"
_HIDDEN_ATTRIBUTES = frozenset({"userpassword"})


def _join_dn(relative: Optional[str], root: str) -> str:
    """Append the root DN taken from the directory URL, if any."""
    relative = (relative or "").strip()
    if not root:
        return relative
    if not relative:
        return root
    if relative.lower().endswith(root.lower()):
        return relative
    return f"{relative},{root}"


def _first_value(value: Any) -> Optional[str]:
    if isinstance(value, (list, tuple)):
        value = value[0] if value else None
    if value is None:
        return None
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    return str(value)


class Ldap3DirectoryClient(DirectoryClientPort):
    """
    LDAP bind/search client.

    Uses ldap3 connections per attempt; nothing is cached between attempts.
    The manager account is only used for user and group searches.
    """

    def __init__(
        self,
        config: DirectoryBindConfig,
        server: Optional[Server] = None,
        client_strategy: str = SYNC,
    ):
        """
        Initialize the directory client.

        Args:
            config: Directory bind configuration
            server: Pre-built ldap3 Server (default: built from config.url)
            client_strategy: ldap3 client strategy (default SYNC)
        """
        self._config = config
        self._strategy = client_strategy
        self._root_dn = self._root_dn_from_url(config.url or "")
        self._server = server or self._build_server(config)

    @property
    def root_dn(self) -> str:
        return self._root_dn

    def resolution_paths(self) -> List[str]:
        """Names of the DN resolution paths in the order they are tried."""
        paths = []
        if self._config.has_dn_pattern:
            paths.append("dn_pattern")
        if self._config.has_user_search or not paths:
            paths.append("search")
        return paths

    def authenticate(self, username: str, password: str) -> RawDirectoryIdentity:
        """Bind as the user and read attributes and groups."""
        if not username or not password:
            # an empty password would be an unauthenticated bind
            raise InvalidCredentialsError("Username and password are required")

        user_dn, attributes = self._resolve_and_bind(username, password)
        groups = self._search_groups(user_dn, username)

        logger.debug("LDAP user %s resolved to %s with %d groups", username, user_dn, len(groups))

        return RawDirectoryIdentity(
            username=username,
            attributes=attributes,
            raw_groups=frozenset(groups),
            dn=user_dn,
        )

    def _resolve_and_bind(self, username: str, password: str) -> Tuple[str, Dict[str, Optional[str]]]:
        for path in self.resolution_paths():
            if path == "dn_pattern":
                user_dn = _join_dn(
                    self._config.user_dn_pattern.format(escape_rdn(username)),
                    self._root_dn,
                )
                attributes = self._bind_and_read(user_dn, password)
                if attributes is not None:
                    return user_dn, attributes
                logger.debug("LDAP DN pattern bind failed for %s", user_dn)
            else:
                user_dn, attributes = self._search_user(username)
                if self._bind_and_read(user_dn, password) is None:
                    break
                return user_dn, attributes

        logger.info("LDAP authentication failed for %s", username)
        raise InvalidCredentialsError("Bad credentials")

    def _bind_and_read(self, user_dn: str, password: str) -> Optional[Dict[str, Optional[str]]]:
        """Bind as user_dn; return its attributes, or None if the bind is refused."""
        conn = self._connection(user_dn, password)
        try:
            if not conn.bind():
                return None
            conn.search(
                search_base=user_dn,
                search_filter="(objectClass=*)",
                search_scope=BASE,
                attributes=["*"],
            )
            entries = self._entries(conn)
            return entries[0][1] if entries else {}
        except LDAPException as exc:
            raise DirectoryLookupError(f"LDAP bind failed: {exc}") from exc
        finally:
            conn.unbind()

    def _search_user(self, username: str) -> Tuple[str, Dict[str, Optional[str]]]:
        base = _join_dn(self._config.user_search_base, self._root_dn)
        template = self._config.user_search_filter or DEFAULT_USER_SEARCH_FILTER
        search_filter = template.format(escape_filter_chars(username))

        entries = self._manager_search(base, search_filter, ["*"])
        if not entries:
            raise InvalidCredentialsError("Bad credentials")
        if len(entries) > 1:
            raise DirectoryLookupError(
                f"LDAP user search returned {len(entries)} entries for {username}"
            )
        return entries[0]

    def _search_groups(self, user_dn: str, username: str) -> List[str]:
        base = _join_dn(self._config.group_search_base, self._root_dn)
        search_filter = self._config.group_search_filter.format(
            escape_filter_chars(user_dn),
            escape_filter_chars(username),
        )
        role_attribute = self._config.group_role_attribute.lower()

        groups = []
        for _, attributes in self._manager_search(base, search_filter, [role_attribute]):
            value = attributes.get(role_attribute)
            if value:
                groups.append(value)
        return groups

    def _manager_search(self, base: str, search_filter: str, attributes: List[str]):
        conn = self._connection(self._config.manager_dn, self._config.manager_password)
        try:
            if not conn.bind():
                raise DirectoryLookupError(
                    f"LDAP manager bind failed for {self._config.manager_dn}"
                )
            conn.search(
                search_base=base,
                search_filter=search_filter,
                search_scope=SUBTREE,
                attributes=attributes,
            )
            return self._entries(conn)
        except LDAPException as exc:
            raise DirectoryLookupError(f"LDAP search failed: {exc}") from exc
        finally:
            conn.unbind()

    def _connection(self, user: Optional[str], password: Optional[str]) -> Connection:
        return Connection(
            self._server,
            user=user,
            password=password,
            client_strategy=self._strategy,
            receive_timeout=self._config.connect_timeout,
            raise_exceptions=False,
        )

    @staticmethod
    def _entries(conn: Connection) -> List[Tuple[str, Dict[str, Optional[str]]]]:
        entries = []
        for item in conn.response or []:
            if item.get("type") != "searchResEntry":
                continue
            attributes = {
                name.lower(): _first_value(value)
                for name, value in (item.get("attributes") or {}).items()
                if name.lower() not in _HIDDEN_ATTRIBUTES
            }
            entries.append((item["dn"], attributes))
        return entries

    @staticmethod
    def _root_dn_from_url(url: str) -> str:
        return unquote(urlparse(url).path or "").strip("/")

    @staticmethod
    def _build_server(config: DirectoryBindConfig) -> Server:
        parsed = urlparse(config.url or "")
        use_ssl = parsed.scheme.lower() == "ldaps"
        return Server(
            parsed.hostname or "localhost",
            port=parsed.port or (636 if use_ssl else 389),
            use_ssl=use_ssl,
            connect_timeout=config.connect_timeout,
        )

"""
HTTP Permission Adapters - Remote permission service collaborators.

The permission service owns role state and account authorizations:
- PUT  /roles/{username}      body: ["role", ...]  -> register a login
- GET  /authorize/{username}  -> {"accounts": [{"name": ..., "authorizations": [...]}]}

Failures are raised, never swallowed: a failed call must fail the login.
"""

import logging
from typing import Collection, Optional, Set
from urllib.parse import quote

import httpx

from gate_ldap.ports.permission_port import PermissionRegistrarPort, AllowedAccountsPort


logger = logging.getLogger(__name__)


class _PermissionServiceClient:
    """Shared httpx client setup for the permission service."""

    def __init__(
        self,
        base_url: str = "http://localhost:7003",
        timeout: float = 5.0,
        client: Optional[httpx.Client] = None,
    ):
        """
        Initialize the permission service client.

        Args:
            base_url: Permission service URL
            timeout: Request timeout in seconds
            client: Pre-built httpx client (tests inject a MockTransport)
        """
        self._base_url = base_url.rstrip("/")
        self._client = client or httpx.Client(base_url=self._base_url, timeout=timeout)

    @staticmethod
    def _user_path(prefix: str, username: str) -> str:
        return f"/{prefix}/{quote(username, safe='')}"

    def close(self):
        self._client.close()


class HttpPermissionRegistrar(_PermissionServiceClient, PermissionRegistrarPort):
    """Register logins with the permission service."""

    def register_login(self, username: str, roles: Collection[str]) -> None:
        response = self._client.put(
            self._user_path("roles", username),
            json=sorted(roles),
        )
        response.raise_for_status()
        logger.debug("Registered login for %s with roles %s", username, sorted(roles))


class HttpAllowedAccountsResolver(_PermissionServiceClient, AllowedAccountsPort):
    """
    Resolve accessible accounts from the permission service.

    An account is allowed when its authorizations include the required one
    (WRITE by default).
    """

    def __init__(self, *args, required_authorization: str = "WRITE", **kwargs):
        super().__init__(*args, **kwargs)
        self._required = required_authorization.upper()

    def resolve_allowed(self, username: str, roles: Collection[str]) -> Set[str]:
        response = self._client.get(self._user_path("authorize", username))
        response.raise_for_status()

        accounts = response.json().get("accounts") or []
        return {
            account["name"]
            for account in accounts
            if account.get("name")
            and self._required in {a.upper() for a in account.get("authorizations") or []}
        }

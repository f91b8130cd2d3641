"""
Identity Mapper - Directory lookup result to gateway Principal.

Runs once per successful bind. The permission registrar is called before
the principal exists; if it or the accounts resolver fails, no principal
is produced.
"""

import logging
from typing import Any, Optional

from gate_ldap.domain.identity import Principal, RawDirectoryIdentity
from gate_ldap.domain.result import Err, Result
from gate_ldap.domain.roles import RoleNormalizer
from gate_ldap.errors import MappingError, UnsupportedWriteError
from gate_ldap.ports.permission_port import PermissionRegistrarPort, AllowedAccountsPort


logger = logging.getLogger(__name__)


class IdentityMapper:
    """
    Map RawDirectoryIdentity to Principal.

    Example:
        mapper = IdentityMapper(
            permission_registrar=HttpPermissionRegistrar(base_url="http://fiat:7003"),
            allowed_accounts=HttpAllowedAccountsResolver(base_url="http://fiat:7003"),
        )
        principal = mapper.map_identity(directory.authenticate("alice", "secret"))
    """

    def __init__(
        self,
        permission_registrar: PermissionRegistrarPort,
        allowed_accounts: AllowedAccountsPort,
        normalizer: Optional[RoleNormalizer] = None,
    ):
        self._registrar = permission_registrar
        self._allowed_accounts = allowed_accounts
        self._normalizer = normalizer or RoleNormalizer()

    def map_identity(self, ctx: RawDirectoryIdentity) -> Principal:
        """
        Build the principal for a bound directory user.

        Args:
            ctx: Result of a successful directory lookup

        Returns:
            Principal with canonical roles and the resolver's accounts

        Raises:
            MappingError: If registering the login or resolving accounts fails
        """
        roles = self._normalizer.normalize(ctx.raw_groups)

        try:
            self._registrar.register_login(ctx.username, roles)
        except Exception as exc:
            logger.warning("Login registration failed for %s: %s", ctx.username, exc)
            raise MappingError(f"Could not register login for {ctx.username}") from exc

        try:
            accounts = self._allowed_accounts.resolve_allowed(ctx.username, roles)
        except Exception as exc:
            logger.warning("Allowed accounts lookup failed for %s: %s", ctx.username, exc)
            raise MappingError(f"Could not resolve allowed accounts for {ctx.username}") from exc

        principal = Principal.create(
            username=ctx.username,
            email=ctx.mail,
            roles=roles,
            allowed_accounts=accounts or (),
        )
        logger.info(
            "Mapped LDAP user %s (roles=%s, accounts=%d)",
            principal.username, sorted(principal.roles), len(principal.allowed_accounts),
        )
        return principal

    def map_principal_to_directory(self, principal: Principal, ctx: Any = None) -> Result:
        """Writing back to the directory is not supported; always returns Err."""
        return Err(UnsupportedWriteError("Cannot save to LDAP server"))

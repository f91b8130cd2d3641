"""
Gate LDAP - Directory-backed authentication for the API gateway.

Hexagonal architecture: ports for the directory, the permission
collaborators and secrets; adapters for ldap3, the permission service
(httpx) and Vault (hvac).

Usage:
    from gate_ldap import AuthenticationPipelineAssembler, IdentityMapper
    from gate_ldap.adapters import HttpPermissionRegistrar, HttpAllowedAccountsResolver

    mapper = IdentityMapper(
        permission_registrar=HttpPermissionRegistrar(base_url="http://fiat:7003"),
        allowed_accounts=HttpAllowedAccountsResolver(base_url="http://fiat:7003"),
    )
    assembler = AuthenticationPipelineAssembler.from_settings(props, mapper)
    if assembler:
        pipeline = assembler.assemble()
"""

__version__ = "0.1.0"

from gate_ldap.domain.config import DirectoryBindConfig, GatewaySettings
from gate_ldap.domain.identity import Principal, RawDirectoryIdentity
from gate_ldap.domain.roles import RoleNormalizer, normalize_roles
from gate_ldap.security.identity_mapper import IdentityMapper
from gate_ldap.security.entry_point import TransportAwareEntryPoint
from gate_ldap.security.assembler import AuthenticationPipelineAssembler

__all__ = [
    "DirectoryBindConfig",
    "GatewaySettings",
    "Principal",
    "RawDirectoryIdentity",
    "RoleNormalizer",
    "normalize_roles",
    "IdentityMapper",
    "TransportAwareEntryPoint",
    "AuthenticationPipelineAssembler",
]

"""
Domain Models - Pure values for directory-backed authentication.

No infrastructure dependencies. Domain logic only.
"""

from gate_ldap.domain.config import DirectoryBindConfig, GatewaySettings
from gate_ldap.domain.identity import RawDirectoryIdentity, Principal
from gate_ldap.domain.roles import RoleNormalizer, normalize_roles
from gate_ldap.domain.result import Ok, Err, Result

__all__ = [
    "DirectoryBindConfig",
    "GatewaySettings",
    "RawDirectoryIdentity",
    "Principal",
    "RoleNormalizer",
    "normalize_roles",
    "Ok",
    "Err",
    "Result",
]

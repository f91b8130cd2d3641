"""
Ports - Interfaces for the directory, permission collaborators, secrets,
and pipeline extensions.

Hexagonal architecture: These define WHAT we need, not HOW.
Adapters provide the HOW.
"""

from gate_ldap.ports.directory_port import DirectoryClientPort
from gate_ldap.ports.permission_port import PermissionRegistrarPort, AllowedAccountsPort
from gate_ldap.ports.credential_port import CredentialPort
from gate_ldap.ports.pipeline_port import PipelineConfigurer, GatewayAuthConfig

__all__ = [
    # Directory
    "DirectoryClientPort",
    # Collaborators
    "PermissionRegistrarPort",
    "AllowedAccountsPort",
    # Secrets
    "CredentialPort",
    # Pipeline extensions
    "PipelineConfigurer",
    "GatewayAuthConfig",
]

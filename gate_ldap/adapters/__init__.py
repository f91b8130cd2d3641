"""
Adapters - Implementations of ports.

Directory:
- Ldap3DirectoryClient: LDAP bind/search via ldap3

Permission collaborators:
- HttpPermissionRegistrar: register logins with the permission service
- HttpAllowedAccountsResolver: account scope from the permission service
- InMemoryPermissionStore: in-memory registrar + resolver (testing)

Secrets:
- EnvCredentialAdapter: Environment variable secrets
- VaultCredentialAdapter: HashiCorp Vault secrets
"""

# Directory
from gate_ldap.adapters.ldap_directory import Ldap3DirectoryClient

# Permission collaborators
from gate_ldap.adapters.http_permission import HttpPermissionRegistrar, HttpAllowedAccountsResolver
from gate_ldap.adapters.memory_permission import InMemoryPermissionStore

# Secrets
from gate_ldap.adapters.env_credential import EnvCredentialAdapter
from gate_ldap.adapters.vault_credential import VaultCredentialAdapter

__all__ = [
    # Directory
    "Ldap3DirectoryClient",
    # Permission collaborators
    "HttpPermissionRegistrar",
    "HttpAllowedAccountsResolver",
    "InMemoryPermissionStore",
    # Secrets
    "EnvCredentialAdapter",
    "VaultCredentialAdapter",
]

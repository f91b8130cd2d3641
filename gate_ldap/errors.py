"""
Errors - Failure taxonomy for directory-backed authentication.

ConfigurationError blocks startup. DirectoryLookupError and MappingError
both end an attempt as an authentication failure (redirect to login).
"""


class GateAuthError(Exception):
    """Base class for all gate_ldap errors."""


class ConfigurationError(GateAuthError):
    """Mandatory directory settings are missing or the pipeline was misassembled."""

    def __init__(self, message: str, missing: tuple = ()):
        super().__init__(message)
        self.missing = tuple(missing)


class DirectoryLookupError(GateAuthError):
    """Bind or search against the directory failed (including timeouts)."""


class InvalidCredentialsError(DirectoryLookupError):
    """The user bind was rejected by the directory."""


class MappingError(GateAuthError):
    """
    The directory lookup succeeded but the principal could not be built.

    Raised when the permission registrar or allowed-accounts resolver fails.
    """


class UnsupportedWriteError(GateAuthError):
    """Writing an identity back to the directory is never supported."""


class AuthenticationRequired(GateAuthError):
    """Raised inside the pipeline when a request carries no principal."""

"""
Directory Authenticator - Drives one authentication attempt.

ANONYMOUS -> DIRECTORY_LOOKUP_IN_FLIGHT -> BOUND_SUCCESS -> MAPPED_SUCCESS
                                        -> LOOKUP_FAILED
                                        BOUND_SUCCESS -> MAPPING_FAILED
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from gate_ldap.domain.identity import Principal
from gate_ldap.errors import DirectoryLookupError, GateAuthError, MappingError
from gate_ldap.ports.directory_port import DirectoryClientPort
from gate_ldap.security.identity_mapper import IdentityMapper


logger = logging.getLogger(__name__)


class AuthenticationState(Enum):
    """Authentication attempt lifecycle states."""
    ANONYMOUS = "anonymous"
    DIRECTORY_LOOKUP_IN_FLIGHT = "directory_lookup_in_flight"
    BOUND_SUCCESS = "bound_success"
    MAPPED_SUCCESS = "mapped_success"
    LOOKUP_FAILED = "lookup_failed"
    MAPPING_FAILED = "mapping_failed"


TERMINAL_STATES = frozenset({
    AuthenticationState.MAPPED_SUCCESS,
    AuthenticationState.LOOKUP_FAILED,
    AuthenticationState.MAPPING_FAILED,
})


@dataclass(frozen=True)
class AuthenticationOutcome:
    """Terminal result of an attempt; principal is set only on MAPPED_SUCCESS."""
    state: AuthenticationState
    transitions: Tuple[AuthenticationState, ...]
    principal: Optional[Principal] = None
    error: Optional[GateAuthError] = None

    @property
    def succeeded(self) -> bool:
        return self.state == AuthenticationState.MAPPED_SUCCESS


class DirectoryAuthenticator:
    """Validate credentials with the directory, then map the identity."""

    def __init__(self, directory: DirectoryClientPort, mapper: IdentityMapper):
        self._directory = directory
        self._mapper = mapper

    def authenticate(self, username: str, password: str) -> AuthenticationOutcome:
        """
        Run one attempt to a terminal state.

        Lookup and mapping failures are returned as outcomes, never retried.

        Args:
            username: Submitted username
            password: Submitted password

        Returns:
            AuthenticationOutcome
        """
        transitions = [AuthenticationState.ANONYMOUS, AuthenticationState.DIRECTORY_LOOKUP_IN_FLIGHT]

        try:
            identity = self._directory.authenticate(username, password)
        except DirectoryLookupError as exc:
            logger.info("Directory lookup failed for %s: %s", username, exc)
            return self._outcome(transitions, AuthenticationState.LOOKUP_FAILED, error=exc)

        transitions.append(AuthenticationState.BOUND_SUCCESS)

        try:
            principal = self._mapper.map_identity(identity)
        except MappingError as exc:
            logger.warning("Identity mapping failed for %s: %s", username, exc)
            return self._outcome(transitions, AuthenticationState.MAPPING_FAILED, error=exc)

        return self._outcome(transitions, AuthenticationState.MAPPED_SUCCESS, principal=principal)

    @staticmethod
    def _outcome(transitions, state, principal=None, error=None) -> AuthenticationOutcome:
        transitions.append(state)
        return AuthenticationOutcome(
            state=state,
            transitions=tuple(transitions),
            principal=principal,
            error=error,
        )

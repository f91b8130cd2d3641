"""
Default Gateway Auth Config - Shared security rules for the gateway.
"""

from typing import Callable, Iterable, Optional

from gate_ldap.domain.identity import Principal
from gate_ldap.ports.pipeline_port import GatewayAuthConfig
from gate_ldap.security.http import GatewayRequest
from gate_ldap.security.pipeline import AuthenticationPipeline
from gate_ldap.security.stages import AuthorizationStage, PreAuthenticatedStage


DEFAULT_PERMIT_PATHS = ("/error", "/favicon.ico", "/health", "/login")
DEFAULT_IGNORED_PATHS = ("/css", "/js", "/images")


class DefaultGatewayAuthConfig(GatewayAuthConfig):
    """
    Pre-authenticated principal lookup, authorization, and static paths.

    Example:
        config = DefaultGatewayAuthConfig(session_resolver=sessions.principal_for)
    """

    def __init__(
        self,
        session_resolver: Optional[Callable[[GatewayRequest], Optional[Principal]]] = None,
        permit_paths: Iterable[str] = DEFAULT_PERMIT_PATHS,
        ignored_paths: Iterable[str] = DEFAULT_IGNORED_PATHS,
    ):
        self._session_resolver = session_resolver
        self._permit_paths = tuple(permit_paths)
        self._ignored_paths = tuple(ignored_paths)

    def configure(self, pipeline: AuthenticationPipeline) -> None:
        pipeline.add_stage(PreAuthenticatedStage(self._session_resolver))
        pipeline.add_stage(AuthorizationStage(self._permit_paths))
        pipeline.ignore(*self._ignored_paths)

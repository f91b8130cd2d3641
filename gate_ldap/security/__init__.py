"""
Security - The LDAP authentication pipeline.

- IdentityMapper: directory lookup -> Principal
- TransportAwareEntryPoint: login redirect, forced https when advertised
- AuthenticationPipeline: ordered stages
- AuthenticationPipelineAssembler: core wiring + extension configurers
"""

from gate_ldap.security.http import GatewayRequest, GatewayResponse
from gate_ldap.security.identity_mapper import IdentityMapper
from gate_ldap.security.entry_point import EntryPointPolicy, TransportAwareEntryPoint, decide
from gate_ldap.security.authenticator import (
    AuthenticationState,
    AuthenticationOutcome,
    DirectoryAuthenticator,
)
from gate_ldap.security.pipeline import AuthenticationPipeline, Stage
from gate_ldap.security.login_page import LoginPageStage
from gate_ldap.security.stages import FormLoginStage, PreAuthenticatedStage, AuthorizationStage
from gate_ldap.security.auth_config import DefaultGatewayAuthConfig
from gate_ldap.security.assembler import AuthenticationPipelineAssembler

__all__ = [
    "GatewayRequest",
    "GatewayResponse",
    "IdentityMapper",
    "EntryPointPolicy",
    "TransportAwareEntryPoint",
    "decide",
    "AuthenticationState",
    "AuthenticationOutcome",
    "DirectoryAuthenticator",
    "AuthenticationPipeline",
    "Stage",
    "LoginPageStage",
    "FormLoginStage",
    "PreAuthenticatedStage",
    "AuthorizationStage",
    "DefaultGatewayAuthConfig",
    "AuthenticationPipelineAssembler",
]

"""
Pipeline Stages - Form login, pre-authenticated context, authorization.
"""

import logging
from typing import Callable, Iterable, Optional

from gate_ldap.domain.identity import Principal
from gate_ldap.errors import AuthenticationRequired
from gate_ldap.security.authenticator import DirectoryAuthenticator
from gate_ldap.security.entry_point import TransportAwareEntryPoint
from gate_ldap.security.http import GatewayRequest, GatewayResponse
from gate_ldap.security.pipeline import Handler, Stage


logger = logging.getLogger(__name__)

FORM_LOGIN_STAGE = "form_login"
PRE_AUTHENTICATED_STAGE = "pre_authenticated"
AUTHORIZATION_STAGE = "authorization"

# stages that read credentials off a request
CREDENTIAL_STAGES = (PRE_AUTHENTICATED_STAGE, FORM_LOGIN_STAGE)


class FormLoginStage(Stage):
    """
    Process the login form submission (POST to the login URL).

    Success redirects to success_url with the principal attached to the
    response; failure redirects back to the login page with ?error.
    Both redirects follow the entry point's transport policy.
    """

    name = FORM_LOGIN_STAGE

    def __init__(
        self,
        authenticator: DirectoryAuthenticator,
        entry_point: TransportAwareEntryPoint,
        login_url: str = "/login",
        success_url: str = "/",
    ):
        self._authenticator = authenticator
        self._entry_point = entry_point
        self.login_url = login_url
        self.success_url = success_url

    def __call__(self, request: GatewayRequest, next_handler: Handler) -> GatewayResponse:
        if request.method.upper() != "POST" or request.path != self.login_url:
            return next_handler(request)

        outcome = self._authenticator.authenticate(
            request.form.get("username", ""),
            request.form.get("password", ""),
        )
        if not outcome.succeeded:
            return GatewayResponse.redirect(self._entry_point.login_url(request, query="error"))

        request.principal = outcome.principal
        return GatewayResponse.redirect(
            self._entry_point.absolute_url(request, self.success_url),
            principal=outcome.principal,
        )


class PreAuthenticatedStage(Stage):
    """
    Establish the principal from state the host already holds (e.g. a session).

    resolver returns the stored Principal for a request, or None.
    """

    name = PRE_AUTHENTICATED_STAGE

    def __init__(self, resolver: Optional[Callable[[GatewayRequest], Optional[Principal]]] = None):
        self._resolver = resolver

    def __call__(self, request: GatewayRequest, next_handler: Handler) -> GatewayResponse:
        if request.principal is None and self._resolver is not None:
            request.principal = self._resolver(request)
        return next_handler(request)


class AuthorizationStage(Stage):
    """Require a principal, except on permitted paths."""

    name = AUTHORIZATION_STAGE

    def __init__(self, permit_paths: Iterable[str] = ()):
        self._permit = tuple(permit_paths)

    def __call__(self, request: GatewayRequest, next_handler: Handler) -> GatewayResponse:
        if request.principal is None and request.path not in self._permit:
            raise AuthenticationRequired(f"Authentication required for {request.path}")
        return next_handler(request)

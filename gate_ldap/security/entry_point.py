"""
Transport-Aware Entry Point - Redirect unauthenticated requests to login.

When the gateway's advertised base URL is https, the login redirect is
always issued over https, even if the request reached us over plain http
(e.g. TLS terminated at a load balancer).
"""

import logging
from dataclasses import dataclass
from typing import Dict, Optional

from gate_ldap.security.http import DEFAULT_PORTS, GatewayRequest, GatewayResponse


logger = logging.getLogger(__name__)

LOGIN_PATH = "/login"
SECURE_SCHEME = "https"

# plain port -> secure port
PORT_MAPPINGS: Dict[int, int] = {80: 443, 8080: 8443}


@dataclass(frozen=True)
class EntryPointPolicy:
    """Login redirect policy, fixed at startup."""
    login_path: str = LOGIN_PATH
    force_secure_redirect: bool = False


def decide(base_url: Optional[str]) -> EntryPointPolicy:
    """Secure redirects are forced iff base_url uses the https scheme."""
    secure = (base_url or "").strip().lower().startswith(SECURE_SCHEME)
    return EntryPointPolicy(login_path=LOGIN_PATH, force_secure_redirect=secure)


class TransportAwareEntryPoint:
    """Authentication entry point redirecting to the login page."""

    def __init__(self, base_url: Optional[str], port_mappings: Optional[Dict[int, int]] = None):
        self._policy = decide(base_url)
        self._port_mappings = dict(PORT_MAPPINGS if port_mappings is None else port_mappings)
        if self._policy.force_secure_redirect:
            logger.info("Login redirects forced to %s for %s", SECURE_SCHEME, base_url)

    @classmethod
    def decide(cls, base_url: Optional[str]) -> EntryPointPolicy:
        return decide(base_url)

    @property
    def policy(self) -> EntryPointPolicy:
        return self._policy

    def commence(self, request: GatewayRequest, error: Optional[Exception] = None) -> GatewayResponse:
        """Redirect to the login page."""
        return GatewayResponse.redirect(self.login_url(request))

    def login_url(self, request: GatewayRequest, query: str = "") -> str:
        """Absolute login URL for the request, honoring the transport policy."""
        path = self._policy.login_path + (f"?{query}" if query else "")
        return self.absolute_url(request, path)

    def absolute_url(self, request: GatewayRequest, path: str) -> str:
        scheme = request.scheme.lower()
        port = request.effective_port

        if self._policy.force_secure_redirect and not request.is_secure:
            scheme = SECURE_SCHEME
            port = self._port_mappings.get(port, DEFAULT_PORTS[SECURE_SCHEME])

        if port == DEFAULT_PORTS.get(scheme):
            return f"{scheme}://{request.host}{path}"
        return f"{scheme}://{request.host}:{port}{path}"

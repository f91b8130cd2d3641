"""
HTTP Values - Framework-neutral request/response seen by the pipeline.

Host applications translate their own request objects into GatewayRequest
and render GatewayResponse back.
"""

from dataclasses import dataclass, field
from typing import Dict, Optional

from gate_ldap.domain.identity import Principal


DEFAULT_PORTS = {"http": 80, "https": 443}


@dataclass
class GatewayRequest:
    """
    Inbound request.

    principal is the security context for the rest of the request; it is
    None until a stage establishes it.
    """
    method: str
    path: str
    scheme: str = "http"
    host: str = "localhost"
    port: Optional[int] = None
    query: Dict[str, str] = field(default_factory=dict)
    form: Dict[str, str] = field(default_factory=dict)
    headers: Dict[str, str] = field(default_factory=dict)
    principal: Optional[Principal] = None

    @property
    def is_secure(self) -> bool:
        return self.scheme.lower() == "https"

    @property
    def effective_port(self) -> int:
        return self.port or DEFAULT_PORTS.get(self.scheme.lower(), 80)


@dataclass
class GatewayResponse:
    """Outbound response. principal is set when a login just succeeded."""
    status: int = 200
    headers: Dict[str, str] = field(default_factory=dict)
    body: str = ""
    principal: Optional[Principal] = None

    @classmethod
    def redirect(cls, location: str, principal: Optional[Principal] = None) -> "GatewayResponse":
        return cls(status=302, headers={"Location": location}, principal=principal)

    @classmethod
    def html(cls, body: str, status: int = 200) -> "GatewayResponse":
        return cls(
            status=status,
            headers={"Content-Type": "text/html;charset=UTF-8"},
            body=body,
        )

    @property
    def location(self) -> Optional[str]:
        return self.headers.get("Location")

"""
Unit tests for the HTTP permission service adapters.
"""

import json

import httpx
import pytest
from gate_ldap.adapters.http_permission import HttpAllowedAccountsResolver, HttpPermissionRegistrar
from gate_ldap.domain.identity import RawDirectoryIdentity
from gate_ldap.errors import MappingError
from gate_ldap.security.identity_mapper import IdentityMapper


def make_client(handler):
    return httpx.Client(transport=httpx.MockTransport(handler), base_url="http://fiat.local")


def test_register_login_puts_sorted_roles():
    requests = []

    def handler(request):
        requests.append(request)
        return httpx.Response(200)

    registrar = HttpPermissionRegistrar(client=make_client(handler))
    registrar.register_login("alice@corp", {"ops", "dev"})

    assert requests[0].method == "PUT"
    assert requests[0].url.raw_path == b"/roles/alice%40corp"
    assert json.loads(requests[0].content) == ["dev", "ops"]


def test_register_login_failure_raises():
    registrar = HttpPermissionRegistrar(client=make_client(lambda request: httpx.Response(503)))

    with pytest.raises(httpx.HTTPStatusError):
        registrar.register_login("alice", {"ops"})


def test_resolve_allowed_filters_by_write():
    payload = {
        "accounts": [
            {"name": "prod", "authorizations": ["READ", "WRITE"]},
            {"name": "staging", "authorizations": ["read"]},
            {"name": "test", "authorizations": ["write"]},
            {"authorizations": ["WRITE"]},
        ]
    }

    def handler(request):
        assert request.url.path == "/authorize/alice"
        return httpx.Response(200, json=payload)

    resolver = HttpAllowedAccountsResolver(client=make_client(handler))

    assert resolver.resolve_allowed("alice", {"ops"}) == {"prod", "test"}


def test_resolve_allowed_custom_authorization():
    payload = {"accounts": [{"name": "staging", "authorizations": ["READ"]}]}
    resolver = HttpAllowedAccountsResolver(
        client=make_client(lambda request: httpx.Response(200, json=payload)),
        required_authorization="read",
    )

    assert resolver.resolve_allowed("alice", set()) == {"staging"}


def test_resolve_allowed_empty_payload():
    resolver = HttpAllowedAccountsResolver(client=make_client(lambda request: httpx.Response(200, json={})))
    assert resolver.resolve_allowed("alice", set()) == set()


def test_service_outage_fails_mapping():
    """A permission service outage after a good bind still fails the login."""
    client = make_client(lambda request: httpx.Response(500))
    mapper = IdentityMapper(
        permission_registrar=HttpPermissionRegistrar(client=client),
        allowed_accounts=HttpAllowedAccountsResolver(client=client),
    )

    with pytest.raises(MappingError):
        mapper.map_identity(RawDirectoryIdentity(username="alice", raw_groups=frozenset({"ROLE_OPS"})))


def test_connection_error_fails_mapping():
    def handler(request):
        raise httpx.ConnectError("refused", request=request)

    client = make_client(handler)
    mapper = IdentityMapper(HttpPermissionRegistrar(client=client), HttpAllowedAccountsResolver(client=client))

    with pytest.raises(MappingError) as exc_info:
        mapper.map_identity(RawDirectoryIdentity(username="alice"))

    assert isinstance(exc_info.value.__cause__, httpx.ConnectError)

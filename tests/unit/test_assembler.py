"""
Unit tests for AuthenticationPipelineAssembler and DirectoryAuthenticator.
"""

import pytest
from gate_ldap.adapters.ldap_directory import Ldap3DirectoryClient
from gate_ldap.adapters.memory_permission import InMemoryPermissionStore
from gate_ldap.domain.config import DirectoryBindConfig, GatewaySettings
from gate_ldap.domain.identity import Principal, RawDirectoryIdentity
from gate_ldap.errors import ConfigurationError, DirectoryLookupError, InvalidCredentialsError
from gate_ldap.ports.directory_port import DirectoryClientPort
from gate_ldap.ports.permission_port import PermissionRegistrarPort
from gate_ldap.ports.pipeline_port import PipelineConfigurer
from gate_ldap.security.assembler import AuthenticationPipelineAssembler
from gate_ldap.security.auth_config import DefaultGatewayAuthConfig
from gate_ldap.security.authenticator import AuthenticationState
from gate_ldap.security.http import GatewayRequest, GatewayResponse
from gate_ldap.security.identity_mapper import IdentityMapper
from gate_ldap.security.pipeline import Stage


BIND_CONFIG = DirectoryBindConfig(
    url="ldap://ldap.example.com",
    manager_dn="cn=manager,dc=example,dc=com",
    manager_password="secret",
    group_search_base="ou=groups,dc=example,dc=com",
    user_dn_pattern="uid={0},ou=people,dc=example,dc=com",
    user_search_base="ou=people,dc=example,dc=com",
    user_search_filter="(uid={0})",
)


class StubDirectory(DirectoryClientPort):
    def __init__(self, users=None, error=None):
        self._users = users or {}
        self._error = error

    def authenticate(self, username, password):
        if self._error is not None:
            raise self._error
        if self._users.get(username, (None,))[0] != password:
            raise InvalidCredentialsError("Bad credentials")
        return RawDirectoryIdentity(
            username=username,
            attributes={"mail": f"{username}@example.com"},
            raw_groups=frozenset(self._users[username][1]),
        )


class BrokenRegistrar(PermissionRegistrarPort):
    def register_login(self, username, roles):
        raise RuntimeError("fiat down")


class NamedStage(Stage):
    def __init__(self, name):
        self.name = name

    def __call__(self, request, next_handler):
        return next_handler(request)


class AddStage(PipelineConfigurer):
    def __init__(self, name, calls):
        self._name = name
        self._calls = calls

    def configure(self, pipeline):
        self._calls.append(self._name)
        pipeline.add_stage(NamedStage(self._name))


class RemoveCoreStage(PipelineConfigurer):
    def configure(self, pipeline):
        pipeline.remove_stage("login_page")


@pytest.fixture
def store():
    return InMemoryPermissionStore({"prod": ["ops"]})


@pytest.fixture
def directory():
    return StubDirectory({"alice": ("pw", ["ROLE_OPS"])})


def make_assembler(store, directory, base_url="https://gate.example.com", **kwargs):
    return AuthenticationPipelineAssembler(
        bind_config=BIND_CONFIG,
        settings=GatewaySettings(enabled=True, base_url=base_url),
        mapper=IdentityMapper(store, store),
        auth_config=DefaultGatewayAuthConfig(),
        directory=directory,
        **kwargs,
    )


def endpoint(request):
    return GatewayResponse(body=f"hello {request.principal.username}")


def test_login_page_precedes_credential_stages(store, directory):
    """The login page must run before credential extraction."""
    pipeline = make_assembler(store, directory).assemble()
    names = pipeline.stage_names

    assert names[0] == "login_page"
    assert names.index("login_page") < names.index("pre_authenticated")
    assert names.index("login_page") < names.index("form_login")
    assert pipeline.get_stage("login_page").authentication_url == "/login"


def test_entry_point_registered(store, directory):
    assembler = make_assembler(store, directory)
    pipeline = assembler.assemble()

    assert pipeline.entry_point is assembler.entry_point
    assert pipeline.locked


def test_configurers_applied_last_in_order(store, directory):
    calls = []
    assembler = make_assembler(
        store, directory,
        configurers=[AddStage("first", calls), AddStage("second", calls)],
    )

    pipeline = assembler.assemble()

    assert calls == ["first", "second"]
    assert pipeline.stage_names[-2:] == ("first", "second")
    assert "first" not in pipeline.core_stage_names


def test_configurer_cannot_remove_core_stage(store, directory):
    assembler = make_assembler(store, directory, configurers=[RemoveCoreStage()])
    with pytest.raises(ConfigurationError):
        assembler.assemble()


def test_unauthenticated_plain_request_redirected_over_https(store, directory):
    pipeline = make_assembler(store, directory).assemble()
    request = GatewayRequest(method="GET", path="/applications", scheme="http", host="gate.example.com")

    response = pipeline.handle(request, endpoint)

    assert response.status == 302
    assert response.location == "https://gate.example.com/login"


def test_unauthenticated_not_forced_over_http(store, directory):
    pipeline = make_assembler(store, directory, base_url="http://gate.example.com").assemble()
    request = GatewayRequest(method="GET", path="/applications", scheme="http", host="gate.example.com")

    assert pipeline.handle(request, endpoint).location == "http://gate.example.com/login"


def test_login_page_served(store, directory):
    pipeline = make_assembler(store, directory).assemble()

    response = pipeline.handle(GatewayRequest(method="GET", path="/login"), endpoint)

    assert response.status == 200
    assert 'action="/login"' in response.body


def test_form_login_through_pipeline(store, directory):
    pipeline = make_assembler(store, directory).assemble()
    request = GatewayRequest(
        method="POST", path="/login", host="gate.example.com",
        form={"username": "alice", "password": "pw"},
    )

    response = pipeline.handle(request, endpoint)

    assert response.location == "https://gate.example.com/"
    assert response.principal == Principal.create(
        username="alice", email="alice@example.com", roles=["ops"], allowed_accounts=["prod"],
    )


def test_authenticated_request_reaches_endpoint(store, directory):
    principal = Principal(username="alice")
    pipeline = make_assembler(store, directory).assemble()
    request = GatewayRequest(method="GET", path="/applications", principal=principal)

    assert pipeline.handle(request, endpoint).body == "hello alice"


def test_authenticate_success_transitions(store, directory):
    outcome = make_assembler(store, directory).authenticate("alice", "pw")

    assert outcome.succeeded
    assert outcome.transitions == (
        AuthenticationState.ANONYMOUS,
        AuthenticationState.DIRECTORY_LOOKUP_IN_FLIGHT,
        AuthenticationState.BOUND_SUCCESS,
        AuthenticationState.MAPPED_SUCCESS,
    )


def test_authenticate_bad_password(store, directory):
    outcome = make_assembler(store, directory).authenticate("alice", "wrong")

    assert outcome.state == AuthenticationState.LOOKUP_FAILED
    assert outcome.principal is None
    assert isinstance(outcome.error, InvalidCredentialsError)
    assert store.logins == []


def test_authenticate_directory_timeout(store):
    directory = StubDirectory(error=DirectoryLookupError("timed out"))

    outcome = make_assembler(store, directory).authenticate("alice", "pw")

    assert outcome.state == AuthenticationState.LOOKUP_FAILED


def test_authenticate_mapping_failure(directory):
    store = InMemoryPermissionStore()
    assembler = AuthenticationPipelineAssembler(
        bind_config=BIND_CONFIG,
        settings=GatewaySettings(enabled=True),
        mapper=IdentityMapper(BrokenRegistrar(), store),
        directory=directory,
    )

    outcome = assembler.authenticate("alice", "pw")

    assert outcome.state == AuthenticationState.MAPPING_FAILED
    assert AuthenticationState.BOUND_SUCCESS in outcome.transitions
    assert outcome.principal is None


def test_missing_config_blocks_startup(store, directory):
    with pytest.raises(ConfigurationError):
        AuthenticationPipelineAssembler(
            bind_config=DirectoryBindConfig(url="ldap://x"),
            settings=GatewaySettings(enabled=True),
            mapper=IdentityMapper(store, store),
            directory=directory,
        )


def test_from_settings_disabled(store):
    assert AuthenticationPipelineAssembler.from_settings({}, IdentityMapper(store, store)) is None


def test_from_settings_enabled_but_incomplete(store):
    with pytest.raises(ConfigurationError):
        AuthenticationPipelineAssembler.from_settings(
            {"ldap.enabled": "true", "ldap.url": "ldap://x"},
            IdentityMapper(store, store),
        )


def test_default_directory_client_resolution_order(store):
    """DN pattern first, then search base/filter."""
    assembler = AuthenticationPipelineAssembler(
        bind_config=BIND_CONFIG,
        settings=GatewaySettings(enabled=True),
        mapper=IdentityMapper(store, store),
    )

    client = assembler.build_directory_client()

    assert isinstance(client, Ldap3DirectoryClient)
    assert client.resolution_paths() == ["dn_pattern", "search"]


def test_pipeline_without_auth_config(store, directory):
    assembler = AuthenticationPipelineAssembler(
        bind_config=BIND_CONFIG,
        settings=GatewaySettings(enabled=True),
        mapper=IdentityMapper(store, store),
        directory=directory,
    )

    assert assembler.assemble().stage_names == ("login_page", "form_login")

"""
LDAP Login Example - Assemble the pipeline and walk through a login.

Uses ldap3's offline mock server so it runs without a directory.
"""

from ldap3 import MOCK_SYNC, Connection, Server

from gate_ldap import AuthenticationPipelineAssembler, DirectoryBindConfig, IdentityMapper
from gate_ldap.adapters import InMemoryPermissionStore, Ldap3DirectoryClient
from gate_ldap.security import DefaultGatewayAuthConfig, GatewayRequest, GatewayResponse


PROPS = {
    "ldap.enabled": "true",
    "ldap.url": "ldap://localhost:389/dc=example,dc=com",
    "ldap.managerDn": "cn=manager,dc=example,dc=com",
    "ldap.managerPassword": "manager-pw",
    "ldap.groupSearchBase": "ou=groups",
    "ldap.userDnPattern": "uid={0},ou=people",
    "services.deck.baseUrl": "https://gate.example.com",
}


def fake_directory() -> Server:
    server = Server("example_ldap")
    add = Connection(server, client_strategy=MOCK_SYNC).strategy.add_entry
    add("dc=example,dc=com", {"objectClass": ["domain"], "dc": "example"})
    add("ou=people,dc=example,dc=com", {"objectClass": ["organizationalUnit"], "ou": "people"})
    add("ou=groups,dc=example,dc=com", {"objectClass": ["organizationalUnit"], "ou": "groups"})
    add("cn=manager,dc=example,dc=com", {"objectClass": ["person"], "cn": "manager", "sn": "m", "userPassword": "manager-pw"})
    add("uid=alice,ou=people,dc=example,dc=com", {
        "objectClass": ["inetOrgPerson"], "uid": "alice", "cn": "Alice", "sn": "A",
        "mail": "alice@example.com", "userPassword": "alice-pw",
    })
    add("cn=ROLE_OPS,ou=groups,dc=example,dc=com", {
        "objectClass": ["groupOfUniqueNames"], "cn": "ROLE_OPS",
        "uniqueMember": ["uid=alice,ou=people,dc=example,dc=com"],
    })
    return server


def main():
    store = InMemoryPermissionStore({"prod": ["ops"], "test": ["*"]})
    directory = Ldap3DirectoryClient(
        DirectoryBindConfig.from_mapping(PROPS),
        server=fake_directory(),
        client_strategy=MOCK_SYNC,
    )
    assembler = AuthenticationPipelineAssembler.from_settings(
        PROPS,
        mapper=IdentityMapper(store, store),
        auth_config=DefaultGatewayAuthConfig(),
        directory=directory,
    )
    pipeline = assembler.assemble()
    print(f"Pipeline: {list(pipeline.stage_names)}")

    def endpoint(request):
        return GatewayResponse(body=f"Hello {request.principal.username}")

    response = pipeline.handle(GatewayRequest(method="GET", path="/applications", host="gate.example.com"), endpoint)
    print(f"Unauthenticated -> {response.status} {response.location}")

    response = pipeline.handle(
        GatewayRequest(
            method="POST", path="/login", host="gate.example.com",
            form={"username": "alice", "password": "alice-pw"},
        ),
        endpoint,
    )
    print(f"Login -> {response.status} {response.location}")
    print(f"Principal: {response.principal.to_dict()}")


if __name__ == "__main__":
    main()

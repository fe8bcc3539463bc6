# SPDX-FileCopyrightText: 2024 Swiss Confederation
#
# SPDX-License-Identifier: MIT

"""
End to end issuance through the generator.
Template store, renderer & registry run in process, the generator reaches them through a mock transport.
"""

import typing

import httpx
import pytest
from fastapi.testclient import TestClient

import common.db.database as db
import generator.generator as generator_app
import generator.config as generator_conf
import renderer.renderer as renderer_app
import registry.registry as registry_app
import template_store.templates as template_store_app
import template_store.config as template_store_conf
from generator import signing

GENERATOR_DOMAIN = "generator.test"
TEMPLATE_DOMAIN = "templates.test"
RENDERER_HOST = "renderer.test"
REGISTRY_HOST = "registry.test"

TEMPLATE = {
    "template": "<p>{{ data.name }} ({{ data.degree }})</p>",
    "renderer": "jinja2",
    "schema": {
        "type": "object",
        "properties": {
            "name": {"type": "string"},
            "degree": {"enum": ["BSc", "MSc"]},
        },
        "required": ["name", "degree"],
    },
}


def make_credential(subject: dict, number: int = 1) -> dict:
    return {
        "@context": ["https://www.w3.org/2018/credentials/v1"],
        "id": f"did:web:issuer.test:credentials:{number}",
        "type": ["VerifiableCredential"],
        "issuer": "did:web:issuer.test",
        "issuanceDate": "2024-01-01T00:00:00Z",
        "credentialSubject": subject,
        "proof": {
            "type": "Ed25519Signature2020",
            "created": "2024-01-01T00:00:00Z",
            "proofPurpose": "assertionMethod",
            "verificationMethod": "did:web:issuer.test#key-1",
            "proofValue": "z3FXQjecWufY46yg5abdVZsXqLhxhueuSoZgNSARiKBk9czhSePTFehP8c3PGfb6a22gkfUKods5D2UAUL5n2KLpWe",
        },
    }


class Network:
    """Forwards requests to the in process services by host, records the calls"""

    def __init__(self, clients: dict[str, TestClient]):
        self.clients = clients
        self.calls: list[str] = []
        self.unreachable: set[str] = set()

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.calls.append(f"{request.method} {request.url.host}{request.url.path}")
        if request.url.host in self.unreachable or request.url.host not in self.clients:
            raise httpx.ConnectError("Name or service not known", request=request)
        response = self.clients[request.url.host].request(
            request.method,
            request.url.path,
            params=request.url.params,
            content=request.content,
            headers={"content-type": request.headers.get("content-type", "application/json")},
        )
        return httpx.Response(
            response.status_code,
            content=response.content,
            headers={"content-type": response.headers.get("content-type", "application/json")},
        )


def _session_override(db_url: str):
    db.create_tables(db_url)

    def t_session() -> typing.Generator[db.Session, None, None]:
        session = db.session(db_connection_string=db_url)
        try:
            yield session
        finally:
            session.close()

    return t_session


@pytest.fixture()
def network(tmp_path) -> typing.Generator[Network, None, None]:
    apps = [generator_app.app, renderer_app.app, registry_app.app, template_store_app.app]
    for app, name in zip(apps, ["generator", "renderer", "registry", "template_store"]):
        app.dependency_overrides[db.env_session] = _session_override(f"sqlite:///{tmp_path}/{name}.db")

    network = Network(
        {
            TEMPLATE_DOMAIN: TestClient(template_store_app.app),
            RENDERER_HOST: TestClient(renderer_app.app),
            REGISTRY_HOST: TestClient(registry_app.app),
        }
    )
    http_client = httpx.Client(transport=httpx.MockTransport(network.handle))

    class TestGeneratorConfig(generator_conf.GeneratorConfig):
        def __init__(self):
            super().__init__()
            self.domain = GENERATOR_DOMAIN
            self.use_https = False

        def get_http_client(self) -> httpx.Client:
            return http_client

    def t_template_store_config():
        config = template_store_conf.TemplateStoreConfig()
        config.domain = TEMPLATE_DOMAIN
        yield config

    generator_app.app.dependency_overrides[generator_conf.GeneratorConfig] = TestGeneratorConfig
    template_store_app.app.dependency_overrides[template_store_conf.TemplateStoreConfig] = t_template_store_config
    yield network
    for app in apps:
        app.dependency_overrides.clear()


@pytest.fixture()
def generator(network: Network) -> TestClient:
    return TestClient(generator_app.app)


@pytest.fixture()
def application(generator: TestClient, network: Network) -> dict:
    r = network.clients[TEMPLATE_DOMAIN].post("/templates", json=TEMPLATE)
    assert r.status_code == 201, r.text
    template_id = r.json()["data"]["id"]

    r = generator.post("/keys", json={"name": "signer", "type": "Ed25519VerificationKey2020"})
    assert r.status_code == 201, r.text
    key = r.json()["data"]

    r = generator.post(
        "/applications",
        json={
            "name": "diplomas",
            "template": {"id": f"did:web:{TEMPLATE_DOMAIN}:templates:{template_id}"},
            "renderer": {"api": f"http://{RENDERER_HOST}"},
            "registry": {"api": f"http://{REGISTRY_HOST}/"},
            "keys": [key["id"]],
        },
    )
    assert r.status_code == 201, r.text
    return r.json()["data"] | {"signer": key}


def issue(generator: TestClient, application: dict, credentials: list[dict], holder: str = "did:example:jane") -> httpx.Response:
    return generator.post(
        f"/applications/{application['id']}/issue",
        json={"credentials": credentials, "output": "htm", "holder": holder},
    )


def test_issue_presentation(generator: TestClient, application: dict, network: Network):
    credentials = [
        make_credential({"id": "did:example:jane", "name": "Jane", "degree": "BSc"}, 1),
        make_credential({"id": "did:example:jane", "degree": "MSc"}, 2),
    ]
    r = issue(generator, application, credentials)
    assert r.status_code == 201, r.text
    body = r.json()
    assert body["meta"]["status"] == 201
    presentation = body["data"]["presentation"]
    assert body["data"]["certificate"] == "<p>Jane (MSc)</p>", "Later subjects should overwrite earlier ones"
    assert presentation["holder"] == "did:example:jane"
    assert presentation["verifiableCredential"] == credentials, "Credentials should be wrapped unchanged and in order"
    assert presentation["id"].startswith(f"did:web:{GENERATOR_DOMAIN}:presentations:")
    assert presentation["proof"]["verificationMethod"] == f"did:web:{GENERATOR_DOMAIN}:keys:{application['keys'][0]}"
    assert signing.verify_presentation(presentation, application["signer"]["public"])

    assert [call.split(" ")[1].split("/")[0] for call in network.calls] == [TEMPLATE_DOMAIN, RENDERER_HOST, REGISTRY_HOST], "Render before registration"

    registry = network.clients[REGISTRY_HOST]
    r = registry.get("/presentations", params={"subject": "did:example:jane"})
    assert r.json()["data"] == [presentation]
    r = registry.get(f"/presentations/{presentation['id']}")
    assert r.json()["data"] == presentation


def test_issuing_twice_creates_new_presentations(generator: TestClient, application: dict, network: Network):
    credentials = [make_credential({"id": "did:example:jane", "name": "Jane", "degree": "BSc"})]
    first = issue(generator, application, credentials).json()["data"]["presentation"]
    second = issue(generator, application, credentials).json()["data"]["presentation"]
    assert first["id"] != second["id"]
    assert first["proof"]["challenge"] != second["proof"]["challenge"]
    assert first["verifiableCredential"] == second["verifiableCredential"]
    assert len(network.clients[REGISTRY_HOST].get("/presentations").json()["data"]) == 2


def test_render_error_is_proxied(generator: TestClient, application: dict, network: Network):
    r = issue(generator, application, [make_credential({"id": "did:example:jane", "name": "Jane", "degree": "PhD"})])
    assert r.status_code == 412, r.text
    error = r.json()["error"]
    assert error["code"] == "precondition-failed"
    assert "'data.degree'" in error["message"]
    assert error["message"].endswith("(BSc, MSc)")
    assert not any(REGISTRY_HOST in call for call in network.calls), "Nothing should be registered after a failed render"
    assert network.clients[REGISTRY_HOST].get("/presentations").json()["data"] == []


def test_missing_field_is_named(generator: TestClient, application: dict):
    r = issue(generator, application, [make_credential({"id": "did:example:jane", "degree": "BSc"})])
    assert r.status_code == 412
    assert "the 'data.name' field is required" in r.json()["error"]["message"]


def test_unresolvable_template(generator: TestClient, application: dict, network: Network):
    template_did = f"did:web:{TEMPLATE_DOMAIN}:templates:doesnotexist"
    generator.patch(f"/applications/{application['id']}", json={"template": {"id": template_did}})
    r = issue(generator, application, [make_credential({"id": "did:example:jane", "name": "Jane", "degree": "BSc"})])
    assert r.status_code == 404
    assert r.json()["error"] == {"code": "entity-not-found", "message": f"Could not resolve DID {template_did}."}
    assert not any(RENDERER_HOST in call for call in network.calls)


def test_unreachable_renderer(generator: TestClient, application: dict, network: Network):
    network.unreachable.add(RENDERER_HOST)
    r = issue(generator, application, [make_credential({"id": "did:example:jane", "name": "Jane", "degree": "BSc"})])
    assert r.status_code == 503
    assert r.json()["error"]["code"] == "backend-unavailable"
    assert not any(REGISTRY_HOST in call for call in network.calls)


def test_unreachable_registry(generator: TestClient, application: dict, network: Network):
    network.unreachable.add(REGISTRY_HOST)
    r = issue(generator, application, [make_credential({"id": "did:example:jane", "name": "Jane", "degree": "BSc"})])
    assert r.status_code == 503
    assert REGISTRY_HOST in r.json()["error"]["message"]


def test_malformed_credential_fails_before_network(generator: TestClient, application: dict, network: Network):
    credential = make_credential({"id": "did:example:jane", "name": "Jane", "degree": "BSc"})
    del credential["issuer"]
    r = issue(generator, application, [credential])
    assert r.status_code == 400
    assert r.json()["error"]["code"] == "improper-payload"
    assert "'credentials.0.issuer'" in r.json()["error"]["message"]
    assert network.calls == []


def test_registry_error_is_proxied(generator: TestClient, application: dict, network: Network):
    """The registry insists on a signature in the credential proofs"""
    credential = make_credential({"id": "did:example:jane", "name": "Jane", "degree": "BSc"})
    del credential["proof"]["proofValue"]
    r = issue(generator, application, [credential])
    assert r.status_code == 400, r.text
    error = r.json()["error"]
    assert error["code"] == "improper-payload"
    assert "verifiableCredential.0.proof" in error["message"], "Should be the message of the registry"
    assert [call.split(" ")[1].split("/")[0] for call in network.calls] == [TEMPLATE_DOMAIN, RENDERER_HOST, REGISTRY_HOST]

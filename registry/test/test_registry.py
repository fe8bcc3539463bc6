# SPDX-FileCopyrightText: 2024 Swiss Confederation
#
# SPDX-License-Identifier: MIT

"""Test for basic operations of the presentation registry"""

import copy
import typing

import pytest
from fastapi.testclient import TestClient

import common.db.database as db
from registry.registry import app


@pytest.fixture()
def client(tmp_path) -> TestClient:
    db_url = f"sqlite:///{tmp_path}/registry.db"
    db.create_tables(db_url)

    def t_session() -> typing.Generator[db.Session, None, None]:
        session = db.session(db_connection_string=db_url)
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[db.env_session] = t_session
    yield TestClient(app)
    app.dependency_overrides.clear()


def make_presentation(presentation_id: str, *subjects: str) -> dict:
    return {
        "@context": ["https://www.w3.org/2018/credentials/v1", "https://w3id.org/security/suites/ed25519-2020/v1"],
        "type": ["VerifiablePresentation"],
        "id": presentation_id,
        "holder": "did:example:holder",
        "verifiableCredential": [
            {
                "@context": ["https://www.w3.org/2018/credentials/v1"],
                "id": f"did:web:issuer.test:credentials:{index}",
                "type": ["VerifiableCredential", "UniversityDegreeCredential"],
                "issuer": {"id": "did:web:issuer.test", "name": "University"},
                "issuanceDate": "2024-01-01T00:00:00Z",
                "credentialSubject": {"id": subject, "degree": "BSc"},
                "proof": {
                    "type": "Ed25519Signature2020",
                    "created": "2024-01-01T00:00:00Z",
                    "proofPurpose": "assertionMethod",
                    "verificationMethod": "did:web:issuer.test#key-1",
                    "proofValue": "z58DAdFfa9SkqZMVPxAQp",
                },
            }
            for index, subject in enumerate(subjects)
        ],
        "proof": {
            "type": "Ed25519Signature2020",
            "created": "2024-03-04T10:00:00Z",
            "proofPurpose": "authentication",
            "verificationMethod": "did:web:generator.test:keys:abc",
            "challenge": "Vx7nq2",
            "jws": "eyJhbGciOiJFZERTQSJ9..c2lnbmF0dXJl",
        },
    }


def test_create_echoes_presentation(client: TestClient):
    presentation = make_presentation("did:web:generator.test:presentations:1", "did:example:jane")
    presentation["verifiableCredential"][0]["credentialStatus"] = {"id": "https://status.test/1", "type": "StatusList2021Entry"}
    r = client.post("/presentations", json=presentation)
    assert r.status_code == 201, r.text
    assert r.json() == {"meta": {"status": 201}, "data": presentation}, "Should return the presentation unmodified"

    r = client.get(f"/presentations/{presentation['id']}")
    assert r.status_code == 200
    assert r.json()["data"] == presentation


def test_search_by_subject(client: TestClient):
    jane = make_presentation("did:web:generator.test:presentations:1", "did:example:jane")
    both = make_presentation("did:web:generator.test:presentations:2", "did:example:john", "did:example:jane")
    john = make_presentation("did:web:generator.test:presentations:3", "did:example:john")
    for presentation in [jane, both, john]:
        assert client.post("/presentations", json=presentation).status_code == 201

    r = client.get("/presentations", params={"subject": "did:example:jane"})
    assert r.json()["data"] == [jane, both], "Any credential about the subject should match"
    r = client.get("/presentations", params={"subject": "did:example:nobody"})
    assert r.json()["data"] == []
    r = client.get("/presentations")
    assert [p["id"] for p in r.json()["data"]] == [jane["id"], both["id"], john["id"]]


def test_update_keeps_position(client: TestClient):
    first = make_presentation("did:web:generator.test:presentations:1", "did:example:jane")
    second = make_presentation("did:web:generator.test:presentations:2", "did:example:john")
    client.post("/presentations", json=first)
    client.post("/presentations", json=second)

    updated = make_presentation(first["id"], "did:example:john")
    updated["holder"] = "did:example:other"
    r = client.put(f"/presentations/{first['id']}", json=updated)
    assert r.status_code == 200, r.text
    assert r.json()["data"] == updated

    r = client.get("/presentations")
    assert r.json()["data"] == [updated, second]
    r = client.get("/presentations", params={"subject": "did:example:jane"})
    assert r.json()["data"] == [], "Subjects should be replaced as well"


def test_update_with_same_subjects(client: TestClient):
    """A presentation signed again keeps its subjects"""
    presentation = make_presentation("did:web:generator.test:presentations:1", "did:example:jane", "did:example:john")
    client.post("/presentations", json=presentation)

    resigned = copy.deepcopy(presentation)
    resigned["proof"]["challenge"] = "Qa81Lw"
    resigned["proof"]["jws"] = "eyJhbGciOiJFZERTQSJ9..b3RoZXI"
    r = client.put(f"/presentations/{presentation['id']}", json=resigned)
    assert r.status_code == 200, r.text
    assert r.json()["data"] == resigned

    for subject in ["did:example:jane", "did:example:john"]:
        r = client.get("/presentations", params={"subject": subject})
        assert r.json()["data"] == [resigned]
    r = client.get("/presentations")
    assert r.json()["data"] == [resigned]


def test_update_unknown(client: TestClient):
    presentation = make_presentation("did:web:generator.test:presentations:404", "did:example:jane")
    r = client.put(f"/presentations/{presentation['id']}", json=presentation)
    assert r.status_code == 404
    assert r.json()["error"] == {"code": "entity-not-found", "message": "A presentation with the specified ID does not exist."}


def test_update_with_other_id(client: TestClient):
    presentation = make_presentation("did:web:generator.test:presentations:1", "did:example:jane")
    client.post("/presentations", json=presentation)
    other = make_presentation("did:web:generator.test:presentations:2", "did:example:jane")
    r = client.put(f"/presentations/{presentation['id']}", json=other)
    assert r.status_code == 400
    assert r.json()["error"]["code"] == "improper-payload"


def test_get_unknown(client: TestClient):
    r = client.get("/presentations/did:web:generator.test:presentations:unknown")
    assert r.status_code == 404
    assert r.json()["error"]["code"] == "entity-not-found"


def test_duplicate_id(client: TestClient):
    presentation = make_presentation("did:web:generator.test:presentations:1", "did:example:jane")
    client.post("/presentations", json=presentation)
    r = client.post("/presentations", json=presentation)
    assert r.status_code == 412
    assert r.json()["error"]["code"] == "precondition-failed"


def _without(presentation: dict, *path) -> dict:
    broken = copy.deepcopy(presentation)
    target = broken
    for part in path[:-1]:
        target = target[part]
    del target[path[-1]]
    return broken


@pytest.mark.parametrize(
    "path,expected_field",
    [
        (("proof", "jws"), "'proof'"),
        (("proof", "verificationMethod"), "'proof.verificationMethod'"),
        (("verifiableCredential", 0, "credentialSubject"), "'verifiableCredential.0.credentialSubject'"),
        (("@context",), "'@context'"),
        (("holder",), "'holder'"),
    ],
)
def test_invalid_presentation(client: TestClient, path: tuple, expected_field: str):
    presentation = make_presentation("did:web:generator.test:presentations:1", "did:example:jane")
    r = client.post("/presentations", json=_without(presentation, *path))
    assert r.status_code == 400
    error = r.json()["error"]
    assert error["code"] == "improper-payload"
    assert expected_field in error["message"]


def test_invalid_proof_type(client: TestClient):
    presentation = make_presentation("did:web:generator.test:presentations:1", "did:example:jane")
    presentation["proof"]["type"] = "RsaSignature2018"
    r = client.post("/presentations", json=presentation)
    assert r.status_code == 400
    assert "'proof.type'" in r.json()["error"]["message"]


def test_health(client: TestClient):
    r = client.get("/health/readiness")
    assert r.status_code == 200, r.text

# SPDX-FileCopyrightText: 2024 Swiss Confederation
#
# SPDX-License-Identifier: MIT

import typing

import pytest
from fastapi.testclient import TestClient

import common.db.database as db
from template_store.templates import app
import template_store.config as conf

DOMAIN = "templates.test"

TEMPLATE = {
    "template": "<p>{{ data.name }}</p>",
    "renderer": "jinja2",
    "schema": {"type": "object", "required": ["name"]},
}


def t_config() -> typing.Generator[conf.TemplateStoreConfig, None, None]:
    config = conf.TemplateStoreConfig()
    config.domain = DOMAIN
    yield config


@pytest.fixture()
def client(tmp_path) -> TestClient:
    db_url = f"sqlite:///{tmp_path}/template_store.db"
    db.create_tables(db_url)

    def t_session() -> typing.Generator[db.Session, None, None]:
        session = db.session(db_connection_string=db_url)
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[db.env_session] = t_session
    app.dependency_overrides[conf.TemplateStoreConfig] = t_config
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_template_lifecycle(client: TestClient):
    r = client.post("/templates", json=TEMPLATE)
    assert r.status_code == 201, r.text
    template = r.json()["data"]
    assert len(template["id"]) == 28
    assert template == TEMPLATE | {"id": template["id"]}

    r = client.get(f"/templates/{template['id']}")
    assert r.json() == {"meta": {"status": 200}, "data": template}

    other = client.post("/templates", json={"template": "<p/>", "renderer": "jinja2"}).json()["data"]
    assert "schema" not in other

    r = client.get("/templates")
    assert r.json()["data"] == [template, other]


def test_did_document(client: TestClient):
    template = client.post("/templates", json=TEMPLATE).json()["data"]
    r = client.get(f"/templates/{template['id']}/did.json")
    assert r.status_code == 200
    assert r.headers["content-type"].startswith("application/ld+json")
    assert r.json() == {
        "@context": ["https://www.w3.org/ns/did/v1"],
        "id": f"did:web:{DOMAIN}:templates:{template['id']}",
        "template": TEMPLATE["template"],
        "renderer": "jinja2",
        "schema": TEMPLATE["schema"],
    }


def test_unknown_template(client: TestClient):
    for route in ["/templates/unknown", "/templates/unknown/did.json"]:
        r = client.get(route)
        assert r.status_code == 404
        assert r.json()["error"] == {"code": "entity-not-found", "message": "A template with the specified ID does not exist."}


@pytest.mark.parametrize(
    "template,expected_field",
    [
        ({"template": "<p/>", "renderer": "ejs"}, "'renderer'"),
        ({"template": "{% for %}", "renderer": "jinja2"}, "'template'"),
        ({"template": "<p/>", "renderer": "jinja2", "schema": {"type": 5}}, "'schema'"),
    ],
)
def test_invalid_template(client: TestClient, template: dict, expected_field: str):
    r = client.post("/templates", json=template)
    assert r.status_code == 400
    error = r.json()["error"]
    assert error["code"] == "improper-payload"
    assert expected_field in error["message"]
    assert client.get("/templates").json()["data"] == []

# SPDX-FileCopyrightText: 2024 Swiss Confederation
#
# SPDX-License-Identifier: MIT

"""
Template Store
Keeps the templates and publishes each one as did:web document, so the generator can resolve them
"""

import logging

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse
from asgi_correlation_id import CorrelationIdMiddleware

import common.db.database as db
from common import did, parsing
from common.fastapi_extensions import ExtendedFastAPI
from common.health import HealthAPIRouterWithDBInject
from common.model.envelope import wrap

from template_store import config as conf
from template_store import models, validation
from template_store.db import template as template_db

_logger = logging.getLogger(__name__)

DID_CONTEXT = "https://www.w3.org/ns/did/v1"

app = ExtendedFastAPI(conf.inject)

app.add_middleware(CorrelationIdMiddleware)

router = APIRouter(prefix="/templates", tags=["Templates"])


def _dump(template: template_db.Template) -> dict:
    return models.Template(
        id=template.id,
        template=template.template,
        renderer=template.renderer,
        data_schema=template.data_schema,
    ).as_document()


@router.get("")
def list_templates(session: db.inject) -> models.TemplateListEnvelope:
    return wrap([_dump(template) for template in template_db.list_templates(session)])


@router.post("", status_code=status.HTTP_201_CREATED, description="Registers a template after checking its syntax & schema")
def create_template(template_dto: models.TemplateDto, session: db.inject) -> models.TemplateEnvelope:
    validation.validate_template(template_dto)
    template = template_db.create_template(
        session,
        template_db.Template(
            id=parsing.generate_id(),
            template=template_dto.template,
            renderer=template_dto.renderer,
            data_schema=template_dto.data_schema,
        ),
    )
    return wrap(_dump(template), status.HTTP_201_CREATED)


@router.get("/{template_id}")
def get_template(template_id: str, session: db.inject) -> models.TemplateEnvelope:
    return wrap(_dump(template_db.get_template(session, template_id)))


@router.get("/{template_id}/did.json", description="The template as did:web document")
def get_template_did_document(template_id: str, session: db.inject, config: conf.inject) -> JSONResponse:
    template = _dump(template_db.get_template(session, template_id))
    document = {
        "@context": [DID_CONTEXT],
        **template,
        "id": did.did_web(config.domain, "templates", template["id"]),
    }
    _logger.info(f"Exported template {template_id} as did document")
    return JSONResponse(content=document, media_type="application/ld+json")


app.include_router(router)
app.include_router(HealthAPIRouterWithDBInject())

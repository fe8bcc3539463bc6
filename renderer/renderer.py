# SPDX-FileCopyrightText: 2024 Swiss Confederation
#
# SPDX-License-Identifier: MIT

"""
Presentation Renderer
Fills the data of a presentation into a template

JSON Schema Draft 7
https://json-schema.org/specification-links#draft-7
"""

import logging

from fastapi import APIRouter, status
from asgi_correlation_id import CorrelationIdMiddleware

from common.fastapi_extensions import ExtendedFastAPI
from common.health import HealthAPIRouter
from common.model.envelope import wrap

from renderer import config as conf
from renderer import engine, models, schema

_logger = logging.getLogger(__name__)

app = ExtendedFastAPI(conf.inject)

app.add_middleware(CorrelationIdMiddleware)

router = APIRouter(tags=["Render"])


@router.post(
    "/render",
    description="Validates the data against the schema of the template and renders it",
    responses={status.HTTP_412_PRECONDITION_FAILED: {"description": "Data does not satisfy the template schema"}},
)
def render(render_dto: models.RenderDto) -> models.RenderEnvelope:
    template = render_dto.template
    if template.data_schema is not None:
        schema.validate(render_dto.data, template.data_schema)
    rendered = engine.compile(template.template, render_dto.data, template.renderer, render_dto.output)
    _logger.info("Rendered presentation")
    return wrap(rendered)


app.include_router(router)
app.include_router(HealthAPIRouter())

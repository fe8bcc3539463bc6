# SPDX-FileCopyrightText: 2024 Swiss Confederation
#
# SPDX-License-Identifier: MIT

"""
Presentation Registry
Stores signed presentations, searchable by the subjects of their credentials
"""

import logging

from fastapi import APIRouter, status
from asgi_correlation_id import CorrelationIdMiddleware

import common.db.database as db
from common.fastapi_extensions import ExtendedFastAPI
from common.health import HealthAPIRouterWithDBInject
from common.model.envelope import wrap
from common.exception.errors import ImproperPayload

from registry import config as conf
from registry import models
from registry.db import presentation as presentation_db

_logger = logging.getLogger(__name__)

app = ExtendedFastAPI(conf.inject)

app.add_middleware(CorrelationIdMiddleware)

router = APIRouter(prefix="/presentations", tags=["Presentations"])


@router.get("", description="Lists all presentations, optionally only the ones containing a credential about the subject")
def list_presentations(session: db.inject, subject: str | None = None) -> models.PresentationListEnvelope:
    return wrap(presentation_db.list_presentations(session, subject))


@router.post("", status_code=status.HTTP_201_CREATED)
def create_presentation(presentation: models.Presentation, session: db.inject) -> models.PresentationEnvelope:
    document = presentation_db.create_presentation(session, presentation.as_document(), presentation.subjects())
    return wrap(document, status.HTTP_201_CREATED)


@router.get("/{presentation_id}")
def get_presentation(presentation_id: str, session: db.inject) -> models.PresentationEnvelope:
    return wrap(presentation_db.get_presentation(session, presentation_id))


@router.put("/{presentation_id}", description="Replaces the presentation")
def update_presentation(presentation_id: str, presentation: models.Presentation, session: db.inject) -> models.PresentationEnvelope:
    if presentation.id != presentation_id:
        raise ImproperPayload("The 'id' field is invalid: it does not match the presentation id in the path")
    document = presentation_db.update_presentation(session, presentation_id, presentation.as_document(), presentation.subjects())
    return wrap(document)


app.include_router(router)
app.include_router(HealthAPIRouterWithDBInject())

# SPDX-FileCopyrightText: 2024 Swiss Confederation
#
# SPDX-License-Identifier: MIT

"""Management of the applications & issuance of presentations through them"""

import logging

from fastapi import APIRouter, status

import common.db.database as db
from common import parsing
from common.model.envelope import wrap
from generator import config as conf
from generator import issuance, models
from generator.db import application as application_db

_logger = logging.getLogger(__name__)

router = APIRouter(prefix="/applications", tags=["Applications"])


def _dump(application: application_db.Application) -> dict:
    return models.Application.model_validate(application).model_dump()


@router.get("", description="Lists all applications, optionally only the ones with the given name")
def list_applications(session: db.inject, name: str | None = None) -> models.ApplicationListEnvelope:
    return wrap([_dump(application) for application in application_db.list_applications(session, name)])


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    responses={status.HTTP_404_NOT_FOUND: {"description": "A referenced key does not exist"}},
)
def create_application(application_dto: models.ApplicationDto, session: db.inject) -> models.ApplicationEnvelope:
    application = application_db.create_application(
        session,
        application_db.Application(id=parsing.generate_id(), **application_dto.model_dump()),
    )
    return wrap(_dump(application), status.HTTP_201_CREATED)


@router.get("/{application_id}")
def get_application(application_id: str, session: db.inject) -> models.ApplicationEnvelope:
    return wrap(_dump(application_db.get_application(session, application_id)))


@router.patch("/{application_id}", description="Merges the given fields into the application")
def update_application(application_id: str, application_dto: models.UpdateApplicationDto, session: db.inject) -> models.ApplicationEnvelope:
    changes = application_dto.model_dump(exclude_unset=True, exclude_none=True)
    return wrap(_dump(application_db.update_application(session, application_id, changes)))


@router.delete("/{application_id}")
def delete_application(application_id: str, session: db.inject) -> dict:
    application_db.delete_application(session, application_id)
    return {"meta": {"status": status.HTTP_204_NO_CONTENT}}


@router.post(
    "/{application_id}/issue",
    status_code=status.HTTP_201_CREATED,
    description="Signs a presentation of the credentials for the holder, renders it and stores it in the registry",
)
def issue_presentation(
    application_id: str,
    issue_dto: models.IssueDto,
    session: db.inject,
    config: conf.inject,
) -> models.IssuedPresentationEnvelope:
    application = application_db.get_application(session, application_id)
    _logger.info(f"Issuing presentation through application {application_id}")
    result = issuance.issue_presentation(
        session,
        application,
        credentials=issue_dto.credentials,
        output=issue_dto.output,
        holder=issue_dto.holder,
        config=config,
    )
    return wrap(result, status.HTTP_201_CREATED)

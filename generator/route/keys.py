# SPDX-FileCopyrightText: 2024 Swiss Confederation
#
# SPDX-License-Identifier: MIT

"""Management of the signing keys"""

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

import common.db.database as db
from common import parsing
from common.model.envelope import wrap
from common.exception.errors import PreconditionFailed
from generator import config as conf
from generator import crypto, models, signing
from generator.db import key as key_db
from generator.db import application as application_db

_logger = logging.getLogger(__name__)

router = APIRouter(prefix="/keys", tags=["Keys"])


def _public(key: key_db.Key) -> dict:
    """Strips the private key material"""
    return models.Key.model_validate(key).model_dump()


def _now() -> str:
    return datetime.now(tz=timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


@router.get("", description="Lists all keys, optionally only the ones with the given name")
def list_keys(session: db.inject, name: str | None = None) -> models.KeyListEnvelope:
    return wrap([_public(key) for key in key_db.list_keys(session, name)])


@router.post("", status_code=status.HTTP_201_CREATED, description="Generates a new key pair")
def create_key(key_dto: models.KeyDto, session: db.inject) -> models.KeyEnvelope:
    pair = crypto.create_key_pair(key_dto.type)
    key = key_db.create_key(
        session,
        key_db.Key(
            id=parsing.generate_id(),
            name=key_dto.name,
            type=key_dto.type,
            created=_now(),
            public=pair.public,
            private=pair.private,
        ),
    )
    return wrap(_public(key), status.HTTP_201_CREATED)


@router.get("/{key_id}")
def get_key(key_id: str, session: db.inject) -> models.KeyEnvelope:
    return wrap(_public(key_db.get_key(session, key_id)))


@router.patch("/{key_id}", description="Renames the key")
def update_key(key_id: str, key_dto: models.UpdateKeyDto, session: db.inject) -> models.KeyEnvelope:
    return wrap(_public(key_db.rename_key(session, key_id, key_dto.name)))


@router.delete(
    "/{key_id}",
    description="Deletes the key. Keys still used by an application can not be deleted.",
    responses={status.HTTP_412_PRECONDITION_FAILED: {"description": "Key is used by an application"}},
)
def delete_key(key_id: str, session: db.inject) -> dict:
    application = application_db.find_application_using_key(session, key_id)
    if application:
        _logger.warning(f"Cannot delete key {key_id} as it is being used by application {application.id}")
        raise PreconditionFailed(f"This key is being used by the application {application.name}. Please unlink the key from the application before deleting it.")
    key_db.delete_key(session, key_id)
    return {"meta": {"status": status.HTTP_204_NO_CONTENT}}


@router.get("/{key_id}/did.json", description="DID document of the key")
def get_key_did_document(key_id: str, session: db.inject, config: conf.inject) -> JSONResponse:
    key = key_db.get_key(session, key_id)
    document = signing.key_document(key, config.domain, include_private=config.enable_private_key_export)
    _logger.info(f"Exported key {key_id} as did document")
    return JSONResponse(content=document, media_type="application/ld+json")

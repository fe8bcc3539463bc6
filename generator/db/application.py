# SPDX-FileCopyrightText: 2024 Swiss Confederation
#
# SPDX-License-Identifier: MIT

"""
Storage for applications, the tenant configuration used to issue presentations
"""

import logging

import sqlalchemy.orm as sa_orm
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import Integer, String, TEXT, JSON, select

import common.db.database as db
from common.exception.errors import EntityNotFound
from generator.db import key as key_db

_logger = logging.getLogger(__name__)

##########
# Tables #
##########


class Application(db.Base):
    __tablename__ = "application"
    position: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    id: Mapped[str] = mapped_column(String(28), unique=True, index=True, nullable=False)
    name: Mapped[str] = mapped_column(TEXT, nullable=False)
    template: Mapped[dict] = mapped_column(JSON, nullable=False)
    """{"id": <did:web of the template>}"""
    renderer: Mapped[dict] = mapped_column(JSON, nullable=False)
    """{"api": <base url of the renderer>}"""
    registry: Mapped[dict] = mapped_column(JSON, nullable=False)
    """{"api": <base url of the registry>}"""
    keys: Mapped[list] = mapped_column(JSON, nullable=False)
    """Key ids, the first one signs the presentations"""


#############
# Functions #
#############


def list_applications(session: sa_orm.Session, name: str = None) -> list[Application]:
    query = select(Application).order_by(Application.position)
    if name is not None:
        query = query.where(Application.name == name)
    return list(session.scalars(query).all())


def get_application(session: sa_orm.Session, application_id: str) -> Application:
    """Raises EntityNotFound if there is no application with the id"""
    application = session.scalars(select(Application).where(Application.id == application_id)).one_or_none()
    if not application:
        raise EntityNotFound("A application with the specified ID does not exist.")
    return application


def find_application_using_key(session: sa_orm.Session, key_id: str) -> Application | None:
    """First application which lists the key, if any"""
    for application in list_applications(session):
        if key_id in application.keys:
            return application
    return None


def ensure_keys_exist(session: sa_orm.Session, key_ids: list[str]) -> None:
    """Raises EntityNotFound naming the first key id which does not exist"""
    for key_id in key_ids:
        if not key_db.find_key(session, key_id):
            raise EntityNotFound(f"A keypair with the ID {key_id} was not found.")


def create_application(session: sa_orm.Session, application: Application) -> Application:
    ensure_keys_exist(session, application.keys)
    session.add(application)
    session.commit()
    session.refresh(application)
    _logger.info(f"Stored application {application.id}")
    return application


def update_application(session: sa_orm.Session, application_id: str, changes: dict) -> Application:
    """Merges the changes into the stored application, keeping its position"""
    if "keys" in changes:
        ensure_keys_exist(session, changes["keys"])
    application = get_application(session, application_id)
    for field, value in changes.items():
        setattr(application, field, value)
    session.commit()
    session.refresh(application)
    return application


def delete_application(session: sa_orm.Session, application_id: str) -> None:
    application = session.scalars(select(Application).where(Application.id == application_id)).one_or_none()
    if application:
        session.delete(application)
        session.commit()

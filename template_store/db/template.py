# SPDX-FileCopyrightText: 2024 Swiss Confederation
#
# SPDX-License-Identifier: MIT

"""
Storage for templates
"""

import logging

import sqlalchemy.orm as sa_orm
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import Integer, String, TEXT, JSON, select

import common.db.database as db
from common.exception.errors import EntityNotFound

_logger = logging.getLogger(__name__)


class Template(db.Base):
    __tablename__ = "template"
    position: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    id: Mapped[str] = mapped_column(String(28), unique=True, index=True, nullable=False)
    template: Mapped[str] = mapped_column(TEXT, nullable=False)
    renderer: Mapped[str] = mapped_column(TEXT, nullable=False)
    data_schema: Mapped[dict] = mapped_column("schema", JSON, nullable=True)


def list_templates(session: sa_orm.Session) -> list[Template]:
    return list(session.scalars(select(Template).order_by(Template.position)).all())


def get_template(session: sa_orm.Session, template_id: str) -> Template:
    template = session.scalars(select(Template).where(Template.id == template_id)).one_or_none()
    if not template:
        raise EntityNotFound("A template with the specified ID does not exist.")
    return template


def create_template(session: sa_orm.Session, template: Template) -> Template:
    session.add(template)
    session.commit()
    session.refresh(template)
    _logger.info(f"Stored template {template.id}")
    return template

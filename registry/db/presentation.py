# SPDX-FileCopyrightText: 2024 Swiss Confederation
#
# SPDX-License-Identifier: MIT

"""
Storage for signed presentations.
Subjects of the embedded credentials are kept in an association table for searching.
"""

import logging

import sqlalchemy.orm as sa_orm
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import ForeignKey, Integer, TEXT, JSON, select

import common.db.database as db
from common.exception.errors import EntityNotFound, PreconditionFailed

_logger = logging.getLogger(__name__)

##########
# Tables #
##########


class Presentation(db.Base):
    __tablename__ = "presentation"
    position: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    id: Mapped[str] = mapped_column(TEXT, unique=True, nullable=False)
    document: Mapped[dict] = mapped_column(JSON, nullable=False)
    subjects: Mapped[list["PresentationSubject"]] = sa_orm.relationship(
        back_populates="presentation",
        cascade="all, delete-orphan",
    )


class PresentationSubject(db.Base):
    """
    Association of a presentation with the subject ids of its credentials
    """

    __tablename__ = "presentation_subject"
    presentation_position: Mapped[int] = mapped_column(Integer, ForeignKey(Presentation.position), primary_key=True)
    presentation: Mapped[Presentation] = sa_orm.relationship(back_populates="subjects")
    subject: Mapped[str] = mapped_column(TEXT, primary_key=True, index=True)


#############
# Functions #
#############


def list_presentations(session: sa_orm.Session, subject: str = None) -> list[dict]:
    query = select(Presentation).order_by(Presentation.position)
    if subject is not None:
        query = query.where(Presentation.subjects.any(PresentationSubject.subject == subject))
    return [presentation.document for presentation in session.scalars(query).all()]


def _find(session: sa_orm.Session, presentation_id: str) -> Presentation | None:
    return session.scalars(select(Presentation).where(Presentation.id == presentation_id)).one_or_none()


def get_presentation(session: sa_orm.Session, presentation_id: str) -> dict:
    presentation = _find(session, presentation_id)
    if not presentation:
        raise EntityNotFound("A presentation with the specified ID does not exist.")
    return presentation.document


def create_presentation(session: sa_orm.Session, document: dict, subjects: set[str]) -> dict:
    if _find(session, document["id"]):
        raise PreconditionFailed(f"A presentation with the ID {document['id']} already exists.")
    presentation = Presentation(
        id=document["id"],
        document=document,
        subjects=[PresentationSubject(subject=subject) for subject in sorted(subjects)],
    )
    session.add(presentation)
    session.commit()
    _logger.info(f"Stored presentation {presentation.id}")
    return document


def update_presentation(session: sa_orm.Session, presentation_id: str, document: dict, subjects: set[str]) -> dict:
    """Replaces the presentation, keeping its position"""
    presentation = _find(session, presentation_id)
    if not presentation:
        raise EntityNotFound("A presentation with the specified ID does not exist.")
    presentation.document = document
    presentation.subjects = [PresentationSubject(subject=subject) for subject in sorted(subjects)]
    session.commit()
    _logger.info(f"Updated presentation {presentation_id}")
    return document

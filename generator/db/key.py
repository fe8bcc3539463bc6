# SPDX-FileCopyrightText: 2024 Swiss Confederation
#
# SPDX-License-Identifier: MIT

"""
Storage for signing keys.
The private key material never leaves this module except through `Key.private`.
"""

import logging

import sqlalchemy.orm as sa_orm
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import Integer, String, TEXT, select

import common.db.database as db
from common.exception.errors import EntityNotFound

_logger = logging.getLogger(__name__)

##########
# Tables #
##########


class Key(db.Base):
    __tablename__ = "key"
    position: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    """Insertion order, lists are returned in this order"""
    id: Mapped[str] = mapped_column(String(28), unique=True, index=True, nullable=False)
    name: Mapped[str] = mapped_column(TEXT, nullable=False)
    type: Mapped[str] = mapped_column(TEXT, nullable=False)
    created: Mapped[str] = mapped_column(TEXT, nullable=False)
    """ISO 8601 timestamp"""
    public: Mapped[str] = mapped_column(TEXT, nullable=False)
    private: Mapped[str] = mapped_column(TEXT, nullable=False)


#############
# Functions #
#############


def list_keys(session: sa_orm.Session, name: str = None) -> list[Key]:
    query = select(Key).order_by(Key.position)
    if name is not None:
        query = query.where(Key.name == name)
    return list(session.scalars(query).all())


def find_key(session: sa_orm.Session, key_id: str) -> Key | None:
    return session.scalars(select(Key).where(Key.id == key_id)).one_or_none()


def get_key(session: sa_orm.Session, key_id: str) -> Key:
    """Raises EntityNotFound if there is no key with the id"""
    key = find_key(session, key_id)
    if not key:
        raise EntityNotFound("A key with the specified ID does not exist.")
    return key


def create_key(session: sa_orm.Session, key: Key) -> Key:
    session.add(key)
    session.commit()
    session.refresh(key)
    _logger.info(f"Stored key {key.id}")
    return key


def rename_key(session: sa_orm.Session, key_id: str, name: str) -> Key:
    key = get_key(session, key_id)
    key.name = name
    session.commit()
    session.refresh(key)
    return key


def delete_key(session: sa_orm.Session, key_id: str) -> None:
    key = find_key(session, key_id)
    if key:
        session.delete(key)
        session.commit()

# SPDX-FileCopyrightText: 2024 Swiss Confederation
#
# SPDX-License-Identifier: MIT

"""
Response envelope used by all services.
Success: {"meta": {"status": 200}, "data": ...}
Failure: {"meta": {"status": 404}, "error": {"code": "entity-not-found", "message": "..."}}
"""

from typing import Generic, TypeVar, Optional

from pydantic import BaseModel

DataT = TypeVar("DataT")


class Meta(BaseModel):
    status: int


class ErrorDetail(BaseModel):
    code: str
    """Stable machine readable code, eg. entity-not-found"""
    message: str


class ErrorEnvelope(BaseModel):
    """
    General error rendered by the exception handlers
    """

    meta: Meta
    error: ErrorDetail


class Envelope(BaseModel, Generic[DataT]):
    meta: Meta
    data: Optional[DataT] = None


def wrap(data, status: int = 200) -> dict:
    """Puts the data into the success envelope"""
    return {"meta": {"status": status}, "data": data}

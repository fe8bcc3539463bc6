# SPDX-FileCopyrightText: 2024 Swiss Confederation
#
# SPDX-License-Identifier: MIT

"""Request & response bodies of the generator"""

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from common.model.envelope import Envelope

OutputFormat = Literal["htm"]


########
# Keys #
########


class KeyDto(BaseModel):
    name: str
    type: str = Field(examples=["Ed25519VerificationKey2020"])
    """Checked when generating the key pair, to name the unsupported type in the error"""


class UpdateKeyDto(BaseModel):
    name: str


class Key(BaseModel):
    """Key without its private material"""

    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    type: str
    created: str
    public: str


################
# Applications #
################


class TemplateReference(BaseModel):
    id: str = Field(examples=["did:web:templates.example.com:templates:Lmm4cPNahTzMnQ9mn1QUHebmhnpN"])


class ServiceReference(BaseModel):
    api: str = Field(examples=["http://localhost:8001"])


class ApplicationDto(BaseModel):
    name: str
    template: TemplateReference
    renderer: ServiceReference
    registry: ServiceReference
    keys: list[str] = Field(min_length=1)
    """The first key signs the issued presentations"""


class UpdateApplicationDto(BaseModel):
    name: Optional[str] = None
    template: Optional[TemplateReference] = None
    renderer: Optional[ServiceReference] = None
    registry: Optional[ServiceReference] = None
    keys: Optional[list[str]] = Field(default=None, min_length=1)


class Application(ApplicationDto):
    model_config = ConfigDict(from_attributes=True)

    id: str


################
# Presentation #
################


class IssueDto(BaseModel):
    credentials: list[dict] = Field(min_length=1)
    output: OutputFormat
    holder: str = Field(examples=["did:web:example.com:holders:jane"])


class IssuedPresentation(BaseModel):
    certificate: str
    """Rendered artifact"""
    presentation: dict


KeyEnvelope = Envelope[Key]
KeyListEnvelope = Envelope[list[Key]]
ApplicationEnvelope = Envelope[Application]
ApplicationListEnvelope = Envelope[list[Application]]
IssuedPresentationEnvelope = Envelope[IssuedPresentation]

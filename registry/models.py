# SPDX-FileCopyrightText: 2024 Swiss Confederation
#
# SPDX-License-Identifier: MIT

"""
Shape of the stored presentations
https://www.w3.org/TR/vc-data-model/#presentations
"""

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from common.model.envelope import Envelope


class Proof(BaseModel):
    model_config = ConfigDict(extra="allow")

    type: Literal["Ed25519Signature2020"]
    created: str
    proofPurpose: Literal["authentication", "assertionMethod"]
    verificationMethod: str
    challenge: Optional[str] = None
    domain: Optional[str] = None
    jws: Optional[str] = None
    proofValue: Optional[str] = None

    @model_validator(mode="after")
    def check_signature_present(self) -> "Proof":
        if not self.jws and not self.proofValue:
            raise ValueError("Either jws or proofValue is required")
        return self


class Credential(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    id: str
    context: list[str | dict] = Field(alias="@context")
    type: str | list[str]
    issuer: str | dict
    issuanceDate: str
    credentialSubject: dict
    proof: Proof


class Presentation(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    context: list[str | dict] = Field(alias="@context")
    type: str | list[str]
    id: str = Field(examples=["did:web:localhost%3A8000:presentations:Lmm4cPNahTzMnQ9mn1QUHebmhnpN"])
    holder: str
    verifiableCredential: list[Credential]
    proof: Proof

    def as_document(self) -> dict:
        """The presentation as it was received"""
        return self.model_dump(by_alias=True, exclude_unset=True)

    def subjects(self) -> set[str]:
        """Ids of the credential subjects, used for searching"""
        return {c.credentialSubject["id"] for c in self.verifiableCredential if isinstance(c.credentialSubject.get("id"), str)}


PresentationEnvelope = Envelope[dict]
PresentationListEnvelope = Envelope[list[dict]]

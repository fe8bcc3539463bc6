# SPDX-FileCopyrightText: 2024 Swiss Confederation
#
# SPDX-License-Identifier: MIT

"""
Signing of verifiable presentations with the Ed25519Signature2020 suite
https://www.w3.org/TR/vc-data-model/#presentations
https://w3c.github.io/vc-di-eddsa/

The proof carries a detached compact JWS (RFC 7515 Appendix F) over
    SHA-256(canonical proof options) || SHA-256(canonical presentation)
where canonical is the JSON serialization with sorted keys and without whitespace.
"""

import hashlib
import logging
from datetime import datetime, timezone
from dataclasses import dataclass

import pydantic
from pydantic import BaseModel, ConfigDict, Field
from jwcrypto import jws, jwk
from jwcrypto.common import json_encode

from common import did, parsing
from common.exception.errors import ImproperPayload
from generator import crypto
from generator.db.key import Key

_logger = logging.getLogger(__name__)

DID_CONTEXT = "https://www.w3.org/ns/did/v1"
CREDENTIALS_CONTEXT = "https://www.w3.org/2018/credentials/v1"
ED25519_2020_CONTEXT = "https://w3id.org/security/suites/ed25519-2020/v1"
PROOF_TYPE = "Ed25519Signature2020"
PROOF_PURPOSE = "authentication"
_JWS_ALGORITHM = "EdDSA"


class Credential(BaseModel):
    """Minimal shape a credential needs to be wrapped into a presentation"""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    id: str
    context: list[str | dict] = Field(alias="@context")
    type: str | list[str]
    issuer: str | dict
    issuanceDate: str
    credentialSubject: dict
    proof: dict


def validate_credentials(credentials: list[dict]) -> None:
    """Raises ImproperPayload naming the first field of a credential with an invalid shape"""
    for index, credential in enumerate(credentials):
        try:
            Credential.model_validate(credential)
        except pydantic.ValidationError as e:
            error = e.errors()[0]
            field = ".".join(map(str, ["credentials", index, *error["loc"]]))
            raise ImproperPayload(f"The '{field}' field is invalid: {error['msg']}")


@dataclass(frozen=True)
class SigningContext:
    """In memory DID document of a key, holding its private material. Never persisted."""

    document: dict
    verification_method: str

    def signing_key(self) -> jwk.JWK:
        method = next(m for m in self.document["authentication"] if m["id"] == self.verification_method)
        return crypto.private_jwk(method["privateKeyMultibase"])


def key_document(key: Key, domain: str, include_private: bool = False) -> dict:
    """
    DID document of the key as published at /keys/{id}/did.json
    Private material is only part of the authentication section and only if requested.
    """
    key_did = did.did_web(domain, "keys", key.id)

    def verification_method(private: bool) -> dict:
        method = {
            "id": key_did,
            "type": key.type,
            "controller": did.did_web(domain),
            "publicKeyMultibase": key.public,
        }
        if private:
            method["privateKeyMultibase"] = key.private
        return method

    return {
        "@context": [DID_CONTEXT, ED25519_2020_CONTEXT],
        "id": key_did,
        "authentication": [verification_method(include_private)],
        "assertionMethod": [verification_method(False)],
    }


def build_signing_context(key: Key, domain: str) -> SigningContext:
    document = key_document(key, domain, include_private=True)
    return SigningContext(document=document, verification_method=document["id"])


def _signing_input(document: dict, proof_options: dict) -> bytes:
    return hashlib.sha256(parsing.canonical_json(proof_options)).digest() + hashlib.sha256(parsing.canonical_json(document)).digest()


def _sign_detached(key: jwk.JWK, payload: bytes) -> str:
    token = jws.JWS(payload=payload)
    token.allowed_algs = [_JWS_ALGORITHM]
    token.add_signature(key, alg=_JWS_ALGORITHM, protected=json_encode({"alg": _JWS_ALGORITHM}))
    header, _, signature = token.serialize(compact=True).split(".")
    return f"{header}..{signature}"


def _now() -> str:
    return datetime.now(tz=timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def sign_presentation(
    credentials: list[dict],
    presentation_id: str,
    holder: str,
    context: SigningContext,
    challenge: str,
    domain: str = None,
) -> dict:
    """
    Wraps the credentials into a presentation for the holder and signs it.
    Fails with ImproperPayload before signing if any credential is malformed.
    """
    validate_credentials(credentials)
    presentation = {
        "@context": [CREDENTIALS_CONTEXT, ED25519_2020_CONTEXT],
        "type": ["VerifiablePresentation"],
        "id": presentation_id,
        "holder": holder,
        "verifiableCredential": credentials,
    }
    proof = {
        "type": PROOF_TYPE,
        "created": _now(),
        "proofPurpose": PROOF_PURPOSE,
        "verificationMethod": context.verification_method,
        "challenge": challenge,
    }
    if domain:
        proof["domain"] = domain
    proof["jws"] = _sign_detached(context.signing_key(), _signing_input(presentation, proof))
    _logger.debug(f"Signed presentation {presentation_id} with {context.verification_method}")
    return presentation | {"proof": proof}


def verify_presentation(presentation: dict, public_key_multibase: str) -> bool:
    """Checks the proof of a presentation against the public key of its verification method"""
    proof = presentation.get("proof")
    if not isinstance(proof, dict) or proof.get("type") != PROOF_TYPE or "jws" not in proof:
        return False
    proof_options = {k: v for k, v in proof.items() if k != "jws"}
    document = {k: v for k, v in presentation.items() if k != "proof"}

    header, payload, signature = (proof["jws"].split(".") + ["", "", ""])[:3]
    if payload:
        # Attached payloads are not part of this suite
        return False
    payload = parsing.bytes_to_url_safe(_signing_input(document, proof_options))
    token = jws.JWS()
    token.allowed_algs = [_JWS_ALGORITHM]
    try:
        token.deserialize(f"{header}.{payload}.{signature}", key=crypto.public_jwk(public_key_multibase))
    except (jws.InvalidJWSSignature, jws.InvalidJWSObject):
        _logger.info(f"Invalid proof on presentation {presentation.get('id')}")
        return False
    return True

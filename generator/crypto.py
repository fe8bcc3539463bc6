# SPDX-FileCopyrightText: 2024 Swiss Confederation
#
# SPDX-License-Identifier: MIT

"""
Key material for the Ed25519Signature2020 suite
https://w3c.github.io/vc-di-eddsa/#ed25519verificationkey2020

Keys are stored as multibase (base58btc, prefix z) encoded multicodec values
* public: 0xed01 + 32 byte public key
* private: 0x8026 + 32 byte seed + 32 byte public key
"""

import logging
from dataclasses import dataclass

import base58
from jwcrypto import jwk

from common import parsing
from common.exception.errors import ImproperPayload

_logger = logging.getLogger(__name__)

ED25519_KEY_TYPE = "Ed25519VerificationKey2020"
SUPPORTED_KEY_TYPES = [ED25519_KEY_TYPE]

_MULTIBASE_BASE58_BTC = "z"
_ED25519_PUBLIC_CODEC = b"\xed\x01"
_ED25519_PRIVATE_CODEC = b"\x80\x26"


@dataclass(frozen=True)
class KeyPair:
    public: str
    """publicKeyMultibase"""
    private: str
    """privateKeyMultibase"""


def _encode_multibase(codec: bytes, raw: bytes) -> str:
    return _MULTIBASE_BASE58_BTC + base58.b58encode(codec + raw).decode()


def _decode_multibase(codec: bytes, encoded: str) -> bytes:
    if not encoded or not encoded.startswith(_MULTIBASE_BASE58_BTC):
        raise ValueError("Only base58btc multibase values are supported")
    decoded = base58.b58decode(encoded[1:])
    if not decoded.startswith(codec):
        raise ValueError(f"Expected multicodec prefix {codec.hex()}")
    return decoded[len(codec) :]


def create_key_pair(type: str) -> KeyPair:
    """
    Generates a fresh key pair of the given suite.
    Raises ImproperPayload for unsupported key types.
    """
    if type not in SUPPORTED_KEY_TYPES:
        raise ImproperPayload(f"Invalid key type {type}, expected '{ED25519_KEY_TYPE}'.")
    key = jwk.JWK.generate(kty="OKP", crv="Ed25519")
    exported = key.export(private_key=True, as_dict=True)
    public = parsing.bytes_from_url_safe(exported["x"])
    seed = parsing.bytes_from_url_safe(exported["d"])
    _logger.debug(f"Generated key pair of {type=}")
    return KeyPair(
        public=_encode_multibase(_ED25519_PUBLIC_CODEC, public),
        private=_encode_multibase(_ED25519_PRIVATE_CODEC, seed + public),
    )


def public_jwk(public_key_multibase: str) -> jwk.JWK:
    """Verification key from the publicKeyMultibase"""
    public = _decode_multibase(_ED25519_PUBLIC_CODEC, public_key_multibase)
    return jwk.JWK(kty="OKP", crv="Ed25519", x=parsing.bytes_to_url_safe(public))


def private_jwk(private_key_multibase: str) -> jwk.JWK:
    """Signing key from the privateKeyMultibase"""
    material = _decode_multibase(_ED25519_PRIVATE_CODEC, private_key_multibase)
    seed, public = material[:32], material[32:]
    return jwk.JWK(
        kty="OKP",
        crv="Ed25519",
        d=parsing.bytes_to_url_safe(seed),
        x=parsing.bytes_to_url_safe(public),
    )

# SPDX-FileCopyrightText: 2024 Swiss Confederation
#
# SPDX-License-Identifier: MIT

import re
import json
import base64
import secrets
import string

_ID_ALPHABET = string.ascii_letters + string.digits
_ID_LENGTH = 28


def generate_id() -> str:
    """Random 28 characters long alphanumeric identifier"""
    return ''.join(secrets.choice(_ID_ALPHABET) for _ in range(_ID_LENGTH))


def canonical_json(data: dict | list) -> bytes:
    """Deterministic JSON serialization (sorted keys, no whitespace) used as signing input."""
    return json.dumps(data, sort_keys=True, separators=(',', ':'), ensure_ascii=False).encode()


def bytes_to_url_safe(data: bytes) -> str:
    """Url safe base64 without padding, as used by JOSE"""
    return remove_padding(base64.urlsafe_b64encode(data).decode())


def bytes_from_url_safe(data: str) -> bytes:
    """Decode url safe base64. Adds padding as needed."""
    return base64.urlsafe_b64decode(add_padding(data))


def remove_padding(base64_encoded: str) -> str:
    """Remove padding form b64 encoded string"""
    return base64_encoded.rstrip('=')


def add_padding(base64_encoded: str) -> str:
    """Add padding (=) for b64 encoded string, so it can be decoded"""
    return f'{base64_encoded}==='


def interpret_as_bool(boolify: str) -> bool:
    """
    Converts an inpput to an boolean according to commonly used patterns.
    """
    if isinstance(boolify, bool):
        return boolify
    if isinstance(boolify, int):
        return boolify > 0
    elif isinstance(boolify, str):
        return re.match(r"^(y|yes|1|true)$", boolify, re.IGNORECASE | re.MULTILINE) is not None
    raise Exception(f"Can't boolify a {boolify}.")

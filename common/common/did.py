# SPDX-FileCopyrightText: 2024 Swiss Confederation
#
# SPDX-License-Identifier: MIT

"""
Resolver for did:web identifiers
https://w3c-ccg.github.io/did-method-web/

did:web:example.com                 -> https://example.com/.well-known/did.json
did:web:example.com:templates:abc   -> https://example.com/templates/abc/did.json
did:web:localhost%3A8000:keys:abc   -> https://localhost:8000/keys/abc/did.json
"""

import json
import logging
import urllib.parse

from fastapi import status

import common.httpx_wrapper as httpxw
from common import config as conf
from common.exception.errors import EntityNotFound, ImproperPayload

_logger = logging.getLogger(__name__)

DID_WEB_PREFIX = "did:web:"


def is_did_web_identifier(identifier: str) -> bool:
    """
    Checks if the identifier is a did:web identifier with at least a host.
    """
    return identifier.startswith(DID_WEB_PREFIX) and len(identifier) > len(DID_WEB_PREFIX)


def did_web(domain: str, *path: str) -> str:
    """Builds the did:web identifier for the domain and path segments"""
    return ":".join(["did", "web", domain, *path])


def did_to_url(identifier: str, use_https: bool = True) -> str:
    """
    Returns the location of the DID document for a did:web identifier.
    Raises ImproperPayload if the identifier is not a did:web identifier.
    """
    if not is_did_web_identifier(identifier):
        raise ImproperPayload(f"The identifier {identifier} is not a valid did:web identifier.")
    # Fragments & queries are not part of the document location
    method_specific_id = identifier[len(DID_WEB_PREFIX) :].split("#")[0].split("?")[0]
    domain, *path = method_specific_id.split(":")
    if not domain or not all(path):
        raise ImproperPayload(f"The identifier {identifier} is not a valid did:web identifier.")
    host = urllib.parse.unquote(domain)
    scheme = "https" if use_https else "http"
    if path:
        return f"{scheme}://{host}/{'/'.join(map(urllib.parse.unquote, path))}/did.json"
    return f"{scheme}://{host}/.well-known/did.json"


def resolve(identifier: str, config: conf.Config) -> dict:
    """
    Fetches the document for the did:web identifier.

    Raises EntityNotFound if the document does not exist (or is not a document for this identifier).
    Any other failure (unreachable host, server errors) propagates as is.
    """
    url = did_to_url(identifier, config.use_https)
    _logger.debug(f"Resolving {identifier=} via {url=}")
    response = httpxw.get(url, config)
    if response.status_code == status.HTTP_404_NOT_FOUND:
        raise EntityNotFound(f"Could not resolve DID {identifier}.")
    response.raise_for_status()

    try:
        document = response.json()
    except json.JSONDecodeError:
        _logger.warning(f"Document for {identifier=} is not valid json")
        raise EntityNotFound(f"Could not resolve DID {identifier}.")
    if not isinstance(document, dict) or document.get("id") != identifier.split("#")[0]:
        _logger.warning(f"Document at {url=} does not belong to {identifier=}")
        raise EntityNotFound(f"Could not resolve DID {identifier}.")
    return document

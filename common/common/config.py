# SPDX-FileCopyrightText: 2024 Swiss Confederation
#
# SPDX-License-Identifier: MIT

"""
Environment of the presentation services, injected into the routes with `inject`
"""

import os
from typing import Annotated
from functools import cache

import httpx
from fastapi import Depends

from common.parsing import interpret_as_bool


def _flag(name: str, default) -> bool:
    return interpret_as_bool(os.environ.get(name, default))


class Config:
    def __init__(self):
        self.app_name = os.getenv("APP_NAME", "anonymous")
        self.log_level = os.getenv("LOG_LEVEL", "INFO")

        # Debug mode flips the defaults of the flags below towards local development
        self.enable_debug_mode = _flag("ENABLE_DEBUG_MODE", False)
        self.enable_ssl_verification = _flag("ENABLE_SSL_VERIFICATION", not self.enable_debug_mode)
        self.enable_documentation_endpoints = _flag("ENABLE_DOCUMENTATION_ENDPOINTS", self.enable_debug_mode)
        self.enable_cors = _flag("ENABLE_CORS", self.enable_debug_mode)
        self.enable_splunk_log = _flag("ENABLE_SPLUNK_LOG", not self.enable_debug_mode)

        self.external_url = os.getenv("EXTERNAL_URL")
        self.additional_allowed_origins = os.getenv("ADDITIONAL_ALLOWED_ORIGINS", "")
        '''Comma separated origins allowed in addition to the external url when CORS is enabled'''

        self.domain = os.getenv("DOMAIN", "localhost%3A8000")
        '''
        Host part of the did:web identifiers minted by the service (keys, presentations, templates).
        A port has to be percent encoded, eg. localhost%3A8000
        '''
        self.use_https = _flag("USE_HTTPS", True)
        '''Scheme used to resolve did:web identifiers, only plain http for local setups'''
        self.downstream_timeout = float(os.getenv("DOWNSTREAM_TIMEOUT", "10"))
        '''Seconds a call to another service (DID document, renderer, registry) may take'''

    def get_http_client(self) -> httpx.Client:
        """Client for the calls to other services, shared by all configs with the same settings"""
        return _http_client(self.enable_ssl_verification, self.downstream_timeout)


@cache
def _http_client(verify: bool, timeout: float) -> httpx.Client:
    return httpx.Client(verify=verify, timeout=timeout)


inject = Annotated[Config, Depends(Config)]


class DBConfig:
    def __init__(self):
        component = os.getenv("COMPONENT", "generator")
        """Service directory holding the alembic setup: generator / registry / template_store"""
        self.SQLALCHEMY_DATABASE_URL = os.getenv("DB_CONNECTION", f"sqlite:///{component}.db")
        self.SQLALCHEMY_DATABASE_SCHEMA = os.getenv("DB_SCHEMA", "presentations")
        """Only used with postgresql connections"""
        self.ALEMBIC_CONFIG_FILE = f"{component}/alembic.ini"


inject_db_config = Annotated[DBConfig, Depends(DBConfig)]

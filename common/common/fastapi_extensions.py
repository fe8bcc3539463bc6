# SPDX-FileCopyrightText: 2024 Swiss Confederation
#
# SPDX-License-Identifier: MIT

import logging
from typing import Type
import contextlib

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from common.logging.setup import configure_logging
from common.exception.handler import configure_exception_handlers
from common.version import get_version
from common import config as conf

_logger = logging.getLogger(__name__)


class ExtendedFastAPI(FastAPI):
    """
    FastAPI app with the setup shared by all presentation services.

    Driven by the flags of the config:
     - documentation endpoints (/docs, /redoc, /openapi.json) only if enabled
     - app name & build version as openapi title & version
     - logging output configured on startup
     - CORS for the external url & additional origins
     - every error rendered into the response envelope
    For the remaining keywords see https://fastapi.tiangolo.com/reference/fastapi/
    """

    @staticmethod
    @contextlib.contextmanager
    def _logging_lifespan(app: "ExtendedFastAPI") -> contextlib.AbstractContextManager:
        configure_logging(app.config_instance)
        _logger.info(f"Starting {app.title} {app.version}")
        yield

    @staticmethod
    @contextlib.asynccontextmanager
    async def lifespan(app: "ExtendedFastAPI") -> contextlib.AbstractAsyncContextManager:
        with contextlib.ExitStack() as stack:
            for lifespan_function in app.lifespan_functions:
                stack.enter_context(lifespan_function)
            yield

    def __init__(
        self,
        config: Type[conf.Config],
        lifespan_functions: list[contextlib.AbstractContextManager] = None,
        *args,
        **kwargs,
    ) -> None:
        self.config_instance = config()

        if not self.config_instance.enable_documentation_endpoints:
            kwargs.update(docs_url=None, redoc_url=None, openapi_url=None)
        kwargs.setdefault("title", self.config_instance.app_name)
        kwargs.setdefault("version", get_version())
        kwargs.setdefault("lifespan", ExtendedFastAPI.lifespan)

        self.lifespan_functions = [ExtendedFastAPI._logging_lifespan(self), *(lifespan_functions or [])]

        super().__init__(*args, **kwargs)

        if self.config_instance.enable_cors:
            self._add_cors()
        configure_exception_handlers(self)

    def _add_cors(self) -> None:
        allowed_origins = [self.config_instance.external_url or '*']
        if self.config_instance.additional_allowed_origins:
            allowed_origins += self.config_instance.additional_allowed_origins.split(',')
        _logger.info(f"Activate CORS support for {allowed_origins}")
        self.add_middleware(
            CORSMiddleware,
            allow_origins=allowed_origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

# SPDX-FileCopyrightText: 2024 Swiss Confederation
#
# SPDX-License-Identifier: MIT

import logging

from fastapi import Request, FastAPI, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from common.logging.setup import get_log_id
from common.exception.errors import ServerError, ImproperPayload, RouteNotFound, MethodNotAllowed

_logger = logging.getLogger(__name__)


def _describe_location(location: tuple) -> str:
    """('body', 'template', 'renderer') -> template.renderer"""
    parts = [str(part) for part in location if part not in ("body", "query", "path")]
    return ".".join(parts) if parts else "body"


def configure_exception_handlers(app: FastAPI) -> None:
    """
    Configure exception handlers on the FastAPI app instance to render every error into the error envelope.
    Changed 422 Unprocessable Entity to 400 Bad Request

    Args:
        app (FastAPI): the instance to configure the handlers for.
    """

    @app.exception_handler(ServerError)
    async def server_error_handler(request: Request, exc: ServerError):
        return JSONResponse(
            status_code=exc.status_code,
            content={"meta": {"status": exc.status_code}, "error": exc.as_dict()},
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        """Errors raised by the framework itself, eg. unknown routes"""
        if exc.status_code == status.HTTP_404_NOT_FOUND:
            wrapper_exception = RouteNotFound(f"The route {request.method} {request.url.path} was not found.")
        elif exc.status_code == status.HTTP_405_METHOD_NOT_ALLOWED:
            wrapper_exception = MethodNotAllowed(f"The method {request.method} is not allowed on {request.url.path}.")
        else:
            wrapper_exception = ServerError(message=str(exc.detail), status_code=exc.status_code)
        return await server_error_handler(request, wrapper_exception)

    @app.exception_handler(RequestValidationError)
    async def invalid_request_exception_handler(request: Request, exc: RequestValidationError):
        """
        Recasts Validation Errors to improper-payload errors naming the first offending field
        """
        errors = exc.errors()
        if errors:
            first = errors[0]
            message = f"The '{_describe_location(first.get('loc', ()))}' field is invalid: {first.get('msg')}"
        else:
            message = None
        return await server_error_handler(request, ImproperPayload(message))

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        _logger.error("Unhandled exception detected.", exc_info=exc)
        wrapper_exception = ServerError(f'Could not process the request. Please contact support with request id {get_log_id()}')
        return await server_error_handler(request, wrapper_exception)

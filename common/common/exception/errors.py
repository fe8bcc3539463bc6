# SPDX-FileCopyrightText: 2024 Swiss Confederation
#
# SPDX-License-Identifier: MIT

"""
Errors shared by all services.
Every error has a stable, machine readable code, a http status and a human readable message.
They are rendered into the response envelope `{"meta": {"status"}, "error": {"code", "message"}}`
"""

from fastapi import HTTPException, status


class ServerError(HTTPException):
    """Base class for all errors which are rendered into the error envelope."""

    code: str = "server-crash"
    """Machine readable code identifieng the error."""

    message: str = "An unexpected error occurred on the server."
    """Human readable default message for the error type."""

    default_status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str = None, status_code: int = None, code: str = None) -> None:
        """Create a server error.

        Args:
            message (str, optional): Human readable message. Defaults to the message of the error type.
            status_code (int, optional): Overrides the status of the error type.
            code (str, optional): Overrides the code of the error type. Only used when proxying errors of other services.
        """
        if code:
            self.code = code
        if message:
            self.message = message
        super().__init__(status_code or self.default_status_code, self.message)

    def as_dict(self) -> dict:
        return {"code": self.code, "message": self.message}


class ImproperPayload(ServerError):
    code = "improper-payload"
    message = "The request payload is invalid."
    default_status_code = status.HTTP_400_BAD_REQUEST


class EntityNotFound(ServerError):
    code = "entity-not-found"
    message = "The requested entity was not found."
    default_status_code = status.HTTP_404_NOT_FOUND


class RouteNotFound(ServerError):
    code = "route-not-found"
    message = "The requested route was not found."
    default_status_code = status.HTTP_404_NOT_FOUND


class MethodNotAllowed(ServerError):
    code = "method-not-allowed"
    message = "The requested method is not allowed on this route."
    default_status_code = status.HTTP_405_METHOD_NOT_ALLOWED


class PreconditionFailed(ServerError):
    code = "precondition-failed"
    message = "The request could not be processed in the current state."
    default_status_code = status.HTTP_412_PRECONDITION_FAILED


class BackendUnavailable(ServerError):
    code = "backend-unavailable"
    message = "A service required to process the request did not respond."
    default_status_code = status.HTTP_503_SERVICE_UNAVAILABLE


_ERRORS_BY_CODE: dict[str, type[ServerError]] = {
    error.code: error
    for error in [
        ServerError,
        ImproperPayload,
        EntityNotFound,
        RouteNotFound,
        MethodNotAllowed,
        PreconditionFailed,
        BackendUnavailable,
    ]
}


def from_envelope(error: dict, status_code: int = None) -> ServerError:
    """
    Recreates the error of another service from its error envelope.
    Code & message are kept verbatim, so the caller sees where the error originated.
    """
    code = error.get("code", ServerError.code)
    error_type = _ERRORS_BY_CODE.get(code, ServerError)
    if status_code is None or status_code < 400:
        status_code = error_type.default_status_code
    return error_type(message=error.get("message"), status_code=status_code, code=code)

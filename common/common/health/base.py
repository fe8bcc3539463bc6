# SPDX-FileCopyrightText: 2024 Swiss Confederation
#
# SPDX-License-Identifier: MIT

from enum import Enum

from pydantic import BaseModel

from fastapi import APIRouter, status, Response


class HealthStatus(Enum):
    """Indicator of system health."""

    healthy = "HEALTHY"
    unhealthy = "UNHEALTHY"


class HealthResponse(BaseModel):
    """Response body model for health probes.

    Subclasses add one `HealthStatus` field per checked dependency.
    Checks may assign booleans, those get converted before the model is returned."""

    http_server_connectivity: HealthStatus = HealthStatus.unhealthy

    def convert_from_bool(self) -> None:
        for k, v in iter(self):
            if isinstance(v, bool):
                setattr(self, k, HealthStatus.healthy if v else HealthStatus.unhealthy)

    def is_healthy(self) -> bool:
        return all([v == HealthStatus.healthy for _, v in iter(self)])


def resolve_probe(result: HealthResponse, response: Response) -> HealthResponse:
    """Sets the http status of the response according to the checks in `result`"""
    result.http_server_connectivity = HealthStatus.healthy
    result.convert_from_bool()
    response.status_code = status.HTTP_200_OK if result.is_healthy() else status.HTTP_503_SERVICE_UNAVAILABLE
    return result


class HealthAPIRouter(APIRouter):
    """Router for `/health/liveness` and `/health/readiness`.

    Services with further dependencies overwrite `get_readiness_probe`
    and pass their own response model.
    """

    def __init__(self, readiness_response_model: type[HealthResponse] = HealthResponse, *args, **kwargs) -> None:
        super().__init__(prefix="/health", tags=["Health"], *args, **kwargs)
        self.add_api_route(
            "/liveness",
            endpoint=self.get_liveness_probe,
            description="Determines whether the application instance needs to be restarted.",
            responses={status.HTTP_503_SERVICE_UNAVAILABLE: {"model": HealthResponse}},
        )
        self.add_api_route(
            "/readiness",
            endpoint=self.get_readiness_probe,
            description="Determines whether the application instance is ready to accept requests.",
            responses={status.HTTP_503_SERVICE_UNAVAILABLE: {"model": readiness_response_model}},
        )

    def get_liveness_probe(self, response: Response) -> HealthResponse:
        return resolve_probe(HealthResponse(), response)

    def get_readiness_probe(self, response: Response) -> HealthResponse:
        return resolve_probe(HealthResponse(), response)

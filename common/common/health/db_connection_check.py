# SPDX-FileCopyrightText: 2024 Swiss Confederation
#
# SPDX-License-Identifier: MIT

"""Readiness probe for the services persisting into a database (generator, registry, template store)"""

import logging

import sqlalchemy.exc
from sqlalchemy import text

from fastapi import Response

import common.db.database as db
from common.health import base

_logger = logging.getLogger(__name__)


def check_health_of_db(session: db.Session) -> base.HealthStatus:
    try:
        session.execute(text("SELECT 1"))
    except sqlalchemy.exc.SQLAlchemyError:
        _logger.exception("Database not reachable for the readiness probe.")
        return base.HealthStatus.unhealthy
    return base.HealthStatus.healthy if session.is_active else base.HealthStatus.unhealthy


class ReadinessHealthResponseWithDBInject(base.HealthResponse):
    db_connectivity: base.HealthStatus = base.HealthStatus.unhealthy


class HealthAPIRouterWithDBInject(base.HealthAPIRouter):
    """Readiness additionally reports the connectivity of the service database"""

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(ReadinessHealthResponseWithDBInject, *args, **kwargs)

    def get_readiness_probe(self, response: Response, session: db.inject) -> ReadinessHealthResponseWithDBInject:
        readiness = ReadinessHealthResponseWithDBInject(db_connectivity=check_health_of_db(session))
        return base.resolve_probe(readiness, response)

# SPDX-FileCopyrightText: 2024 Swiss Confederation
#
# SPDX-License-Identifier: MIT

from .base import HealthStatus, HealthResponse, HealthAPIRouter, resolve_probe  # noqa:F401 Convenience imports
from .db_connection_check import ReadinessHealthResponseWithDBInject, HealthAPIRouterWithDBInject, check_health_of_db  # noqa:F401

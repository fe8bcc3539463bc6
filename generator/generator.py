# SPDX-FileCopyrightText: 2024 Swiss Confederation
#
# SPDX-License-Identifier: MIT

"""
Presentation Generator
Manages signing keys & applications and issues verifiable presentations

W3C Verifiable Credentials Data Model
https://www.w3.org/TR/vc-data-model/

Ed25519 Signature 2020
https://w3c.github.io/vc-di-eddsa/

did:web Method
https://w3c-ccg.github.io/did-method-web/
"""

from asgi_correlation_id import CorrelationIdMiddleware

from common.fastapi_extensions import ExtendedFastAPI
from common.health import HealthAPIRouterWithDBInject

import generator.route.keys as keys
import generator.route.applications as applications
import generator.config as conf

app = ExtendedFastAPI(conf.inject)

app.include_router(keys.router)
app.include_router(applications.router)
app.include_router(HealthAPIRouterWithDBInject())

app.add_middleware(
    CorrelationIdMiddleware,
)

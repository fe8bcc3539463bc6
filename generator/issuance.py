# SPDX-FileCopyrightText: 2024 Swiss Confederation
#
# SPDX-License-Identifier: MIT

"""
Issuance of verifiable presentations for an application.

1. Sign a presentation wrapping the credentials with the first key of the application
2. Resolve the template of the application
3. Render the merged credential subjects with the renderer of the application
4. Register the presentation with the registry of the application

Signing completes before any network call and rendering always precedes registration.
"""

import contextlib
import logging

import httpx
from sqlalchemy.orm import Session

import common.httpx_wrapper as httpxw
from common import did, parsing
from common.exception.errors import BackendUnavailable, EntityNotFound, from_envelope
from generator import config as conf
from generator import signing
from generator.db import key as key_db
from generator.db.application import Application
from generator.logging import GeneratorOperationsLogEntry

_logger = logging.getLogger(__name__)


@contextlib.contextmanager
def _operation_step(step: GeneratorOperationsLogEntry.Step, application_id: str, presentation_id: str = None):
    """Logs the outcome of an issuance step for operations"""
    entry = dict(
        operation=GeneratorOperationsLogEntry.Operation.issuance,
        step=step,
        application_id=application_id,
        presentation_id=presentation_id,
    )
    try:
        yield
    except Exception:
        _logger.info(
            GeneratorOperationsLogEntry(
                message="Error during presentation issuance.",
                status=GeneratorOperationsLogEntry.Status.error,
                **entry,
            )
        )
        raise
    _logger.info(
        GeneratorOperationsLogEntry(
            message=f"Completed issuance step {step.value.lower()}.",
            status=GeneratorOperationsLogEntry.Status.success,
            **entry,
        )
    )


def assemble_render_data(credentials: list[dict]) -> dict:
    """Merges the credential subjects, later subjects overwrite keys of earlier ones"""
    data = {}
    for credential in credentials:
        data.update(credential.get("credentialSubject") or {})
    return data


def _post_downstream(url: str, payload: dict, config: conf.GeneratorConfig):
    """
    Posts to another service and unwraps the data of its envelope.
    Errors in the envelope are raised verbatim, unreachable services become BackendUnavailable.
    """
    try:
        response = httpxw.post(url, payload, config)
    except httpx.TimeoutException:
        _logger.exception(f"Request to {url=} timed out")
        raise BackendUnavailable(f"The service at {url} did not respond in time.")
    except httpx.TransportError:
        _logger.exception(f"Request to {url=} failed")
        raise BackendUnavailable(f"The service at {url} could not be reached.")

    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict) and isinstance(body.get("error"), dict):
        _logger.warning(f"{url=} answered with error {body['error']}")
        raise from_envelope(body["error"], response.status_code)
    if response.is_error or not isinstance(body, dict):
        _logger.error(f"{url=} answered with status {response.status_code} and without envelope")
        raise BackendUnavailable(f"The service at {url} answered with an unexpected response.")
    return body.get("data")


def issue_presentation(
    session: Session,
    application: Application,
    credentials: list[dict],
    output: str,
    holder: str,
    config: conf.GeneratorConfig,
) -> dict:
    """
    Returns {"certificate": <rendered artifact>, "presentation": <signed presentation>}
    """
    with _operation_step(GeneratorOperationsLogEntry.Step.issuance_signing, application.id):
        key_id = application.keys[0]
        key = key_db.find_key(session, key_id)
        if not key:
            _logger.error(f"Application {application.id} references the missing key {key_id}")
            raise EntityNotFound(f"A keypair with the ID {key_id} was not found.")
        context = signing.build_signing_context(key, config.domain)
        presentation_id = did.did_web(config.domain, "presentations", parsing.generate_id())
        presentation = signing.sign_presentation(
            credentials,
            presentation_id=presentation_id,
            holder=holder,
            context=context,
            challenge=parsing.generate_id(),
        )

    with _operation_step(GeneratorOperationsLogEntry.Step.issuance_template_resolution, application.id, presentation_id):
        template = did.resolve(application.template["id"], config)

    with _operation_step(GeneratorOperationsLogEntry.Step.issuance_rendering, application.id, presentation_id):
        certificate = _post_downstream(
            f"{application.renderer['api'].rstrip('/')}/render",
            {
                "template": template,
                "data": assemble_render_data(credentials),
                "output": output,
            },
            config,
        )

    with _operation_step(GeneratorOperationsLogEntry.Step.issuance_registration, application.id, presentation_id):
        _post_downstream(f"{application.registry['api'].rstrip('/')}/presentations", presentation, config)

    return {"certificate": certificate, "presentation": presentation}

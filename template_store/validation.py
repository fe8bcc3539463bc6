# SPDX-FileCopyrightText: 2024 Swiss Confederation
#
# SPDX-License-Identifier: MIT

"""Checks run when registering a template, so rendering it later can only fail because of the data"""

import logging

from jinja2 import TemplateSyntaxError
from jinja2.sandbox import SandboxedEnvironment
from jsonschema import Draft7Validator
from jsonschema.exceptions import SchemaError

from common.exception.errors import ImproperPayload
from template_store import models

_logger = logging.getLogger(__name__)


def validate_template(template: models.TemplateDto) -> None:
    """Raises ImproperPayload if the template does not compile or its schema is invalid"""
    try:
        SandboxedEnvironment().parse(template.template)
    except TemplateSyntaxError as e:
        _logger.info(f"Rejected template with syntax error in line {e.lineno}")
        raise ImproperPayload(f"The 'template' field is invalid: {e.message} (line {e.lineno})")
    if template.data_schema is not None:
        try:
            Draft7Validator.check_schema(template.data_schema)
        except SchemaError as e:
            raise ImproperPayload(f"The 'schema' field is invalid: {e.message}")

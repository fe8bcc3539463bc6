# SPDX-FileCopyrightText: 2024 Swiss Confederation
#
# SPDX-License-Identifier: MIT

"""Validation of the data to render against the JSON Schema of the template"""

import logging

from jsonschema import Draft7Validator
from jsonschema.exceptions import SchemaError, ValidationError, best_match

from common.exception.errors import ImproperPayload, PreconditionFailed

_logger = logging.getLogger(__name__)

_INSUFFICIENT_DATA = "The data provided was insufficient to render the presentation using the specified template"


def check_schema(schema: dict) -> None:
    """Raises ImproperPayload if the schema is no valid JSON Schema"""
    try:
        Draft7Validator.check_schema(schema)
    except SchemaError as e:
        raise ImproperPayload(f"The template schema is invalid: {e.message}")


def _field_path(error: ValidationError) -> str:
    path = ["data", *map(str, error.absolute_path)]
    if error.validator == "required":
        missing = [name for name in error.validator_value if name not in error.instance]
        path.extend(missing[:1])
    return ".".join(path)


def _reason(error: ValidationError) -> str:
    if error.validator == "required":
        return "is required"
    if error.validator == "enum":
        allowed = ", ".join(map(str, error.validator_value))
        return f"must be equal to one of the allowed values ({allowed})"
    if error.validator == "type":
        expected = error.validator_value
        return f"must be {' or '.join(expected) if isinstance(expected, list) else expected}"
    return error.message


def validate(data: dict, schema: dict) -> None:
    """
    Raises PreconditionFailed naming the offending field if the data does not satisfy the schema.
    """
    check_schema(schema)
    error = best_match(Draft7Validator(schema).iter_errors(data))
    if error is None:
        return
    _logger.warning(f"Validation of data failed: {error.message}")
    raise PreconditionFailed(f"{_INSUFFICIENT_DATA}: the '{_field_path(error)}' field {_reason(error)}")

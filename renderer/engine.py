# SPDX-FileCopyrightText: 2024 Swiss Confederation
#
# SPDX-License-Identifier: MIT

"""
Template compilation.
Templates come from the callers, so they are rendered in the jinja2 sandbox.
"""

import logging
from functools import cache

from jinja2 import TemplateError
from jinja2.sandbox import SandboxedEnvironment

from common.exception.errors import ImproperPayload

_logger = logging.getLogger(__name__)


@cache
def _environment(output: str) -> SandboxedEnvironment:
    # htm is the only output, it needs html escaping
    return SandboxedEnvironment(autoescape=output == "htm")


def compile(template: str, data: dict, renderer: str, output: str) -> str:
    """
    Interpolates the data into the template. The template sees the data as `data`.
    Raises ImproperPayload if the template can not be compiled,
    or fails on the data while rendering (eg. adding a number to a string).
    """
    _logger.debug(f"Rendering template with {renderer=} to {output=}")
    try:
        return _environment(output).from_string(template).render(data=data)
    except TemplateError as e:
        _logger.warning(f"Could not render template: {e}")
        raise ImproperPayload(f"The template could not be compiled: {e.message}")
    except (TypeError, ValueError, ArithmeticError, LookupError) as e:
        _logger.warning(f"Template failed on the data: {e!r}")
        raise ImproperPayload(f"The template could not be rendered with the provided data: {e}")

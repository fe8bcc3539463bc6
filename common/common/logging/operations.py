# SPDX-FileCopyrightText: 2024 Swiss Confederation
#
# SPDX-License-Identifier: MIT

from enum import Enum

from common.logging import splunk


class OperationsLogEntry(splunk.SplunkExtendedLogEntry):
    """Structured entry for operations logging.

    Services subclass this and overwrite `Operation` and `Step`
    with the operations they actually perform."""

    class Status(Enum):
        success = "SUCCESS"
        error = "ERROR"

    class Operation(Enum):
        """Placeholder, enums cannot be extended by subclasses."""

        only_test = "ONLY_TEST"

    class Step(Enum):
        """Placeholder, enums cannot be extended by subclasses."""

        only_test = "ONLY_TEST"

    status: Status
    operation: Operation
    step: Step
    application_id: str | None = None
    """Application on whose behalf the operation runs"""
    presentation_id: str | None = None

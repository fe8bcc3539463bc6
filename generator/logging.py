# SPDX-FileCopyrightText: 2024 Swiss Confederation
#
# SPDX-License-Identifier: MIT

from enum import Enum

from common.logging import operations


class GeneratorOperationsLogEntry(operations.OperationsLogEntry):
    """Container for presentation issuance specific logging."""

    class Operation(Enum):
        issuance = "ISSUANCE"

    class Step(Enum):
        issuance_signing = "SIGNING"
        issuance_template_resolution = "TEMPLATE_RESOLUTION"
        issuance_rendering = "RENDERING"
        issuance_registration = "REGISTRATION"

    operation: Operation
    step: Step

# SPDX-FileCopyrightText: 2024 Swiss Confederation
#
# SPDX-License-Identifier: MIT

"""Configuration definition and collector of default values."""

import os
from typing import Annotated

from fastapi import Depends

import common.config as conf
from common.parsing import interpret_as_bool


class GeneratorConfig(conf.Config):
    def __init__(self):
        super().__init__()
        self.app_name = os.getenv("APP_NAME", "Presentation Generator")

        self.enable_private_key_export: bool = interpret_as_bool(os.getenv("ENABLE_PRIVATE_KEY_EXPORT", "False"))
        '''
        Include the private key material in /keys/{id}/did.json.
        Only meant for local setups with signers outside of this service.
        '''


inject = Annotated[GeneratorConfig, Depends(GeneratorConfig)]

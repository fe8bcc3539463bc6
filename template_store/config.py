# SPDX-FileCopyrightText: 2024 Swiss Confederation
#
# SPDX-License-Identifier: MIT

"""Configuration definition and collector of default values."""

import os
from typing import Annotated

from fastapi import Depends

import common.config as conf


class TemplateStoreConfig(conf.Config):
    def __init__(self):
        super().__init__()
        self.app_name = os.getenv("APP_NAME", "Template Store")
        # Templates are published as did:web:<DOMAIN>:templates:<id>, see common.config.Config.domain


inject = Annotated[TemplateStoreConfig, Depends(TemplateStoreConfig)]

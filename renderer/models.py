# SPDX-FileCopyrightText: 2024 Swiss Confederation
#
# SPDX-License-Identifier: MIT

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from common.model.envelope import Envelope

TemplateRenderer = Literal["jinja2"]
OutputFormat = Literal["htm"]


class Template(BaseModel):
    """Template as stored in the template store. Additional fields (eg. id, @context) are ignored."""

    model_config = ConfigDict(populate_by_name=True)

    template: str = Field(examples=["<h1>{{ data.name }}</h1>"])
    renderer: TemplateRenderer
    data_schema: Optional[dict] = Field(default=None, alias="schema")
    """JSON Schema (draft 7) the data has to satisfy"""


class RenderDto(BaseModel):
    template: Template
    data: dict
    output: OutputFormat


RenderEnvelope = Envelope[str]

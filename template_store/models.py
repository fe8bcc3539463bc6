# SPDX-FileCopyrightText: 2024 Swiss Confederation
#
# SPDX-License-Identifier: MIT

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from common.model.envelope import Envelope

TemplateRenderer = Literal["jinja2"]


class TemplateDto(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    template: str = Field(examples=["<h1>{{ data.name }}</h1>"])
    renderer: TemplateRenderer
    data_schema: Optional[dict] = Field(default=None, alias="schema")
    """JSON Schema (draft 7) for the data rendered into the template"""


class Template(TemplateDto):
    model_config = ConfigDict(populate_by_name=True)

    id: str

    def as_document(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)


TemplateEnvelope = Envelope[dict]
TemplateListEnvelope = Envelope[list[dict]]

# SPDX-FileCopyrightText: 2024 Swiss Confederation
#
# SPDX-License-Identifier: MIT

"""init

Revision ID: 1.0
Revises:
Create Date: 2024-03-04 11:02:37.904115

Templates of the template store.

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '1.0'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "template",
        sa.Column("position", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("id", sa.String(28), nullable=False, unique=True),
        sa.Column("template", sa.TEXT, nullable=False),
        sa.Column("renderer", sa.TEXT, nullable=False),
        sa.Column("schema", sa.JSON, nullable=True),
    )


def downgrade() -> None:
    op.drop_table("template")

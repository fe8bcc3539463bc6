# SPDX-FileCopyrightText: 2024 Swiss Confederation
#
# SPDX-License-Identifier: MIT

"""init

Revision ID: 1.0
Revises:
Create Date: 2024-03-04 10:21:44.118020

Keys & applications of the generator.

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
        "key",
        sa.Column("position", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("id", sa.String(28), nullable=False, unique=True),
        sa.Column("name", sa.TEXT, nullable=False),
        sa.Column("type", sa.TEXT, nullable=False),
        sa.Column("created", sa.TEXT, nullable=False),
        sa.Column("public", sa.TEXT, nullable=False),
        sa.Column("private", sa.TEXT, nullable=False),
    )
    op.create_table(
        "application",
        sa.Column("position", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("id", sa.String(28), nullable=False, unique=True),
        sa.Column("name", sa.TEXT, nullable=False),
        sa.Column("template", sa.JSON, nullable=False),
        sa.Column("renderer", sa.JSON, nullable=False),
        sa.Column("registry", sa.JSON, nullable=False),
        sa.Column("keys", sa.JSON, nullable=False),
    )


def downgrade() -> None:
    op.drop_table("application")
    op.drop_table("key")

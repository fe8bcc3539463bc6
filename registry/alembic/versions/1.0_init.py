# SPDX-FileCopyrightText: 2024 Swiss Confederation
#
# SPDX-License-Identifier: MIT

"""init

Revision ID: 1.0
Revises:
Create Date: 2024-03-04 10:48:02.531407

Presentations & their subjects.

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
        "presentation",
        sa.Column("position", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("id", sa.TEXT, nullable=False, unique=True),
        sa.Column("document", sa.JSON, nullable=False),
    )
    op.create_table(
        "presentation_subject",
        sa.Column("presentation_position", sa.Integer, sa.ForeignKey("presentation.position"), primary_key=True),
        sa.Column("subject", sa.TEXT, primary_key=True),
    )
    op.create_index("ix_presentation_subject_subject", "presentation_subject", ["subject"])


def downgrade() -> None:
    op.drop_index("ix_presentation_subject_subject", "presentation_subject")
    op.drop_table("presentation_subject")
    op.drop_table("presentation")

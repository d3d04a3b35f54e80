"""Create favorites table

Revision ID: 0001
Revises: None
Create Date: 2025-06-02 00:00:00.000000+00:00

What:  Creates the `favorites` table holding users' bookmarked recipes.
How:   Portable column types: the Integer primary key becomes SERIAL on
       PostgreSQL and a rowid alias on SQLite.

Rollback: downgrade() drops the table (all favorites are lost).
"""

from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

# revision identifiers
revision: str = "0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "favorites",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("user_id", sa.Text(), nullable=False),
        sa.Column("recipe_id", sa.Integer(), nullable=False),
        sa.Column("title", sa.Text(), nullable=False),
        sa.Column("image", sa.Text(), nullable=True),
        sa.Column("cook_time", sa.Text(), nullable=True),
        sa.Column("servings", sa.Text(), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=False),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=True,
        ),
        sa.PrimaryKeyConstraint("id"),
    )


def downgrade() -> None:
    op.drop_table("favorites")

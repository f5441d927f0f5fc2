"""create app_user table

Revision ID: 8a2e4c6b1d57
Revises: 3f1c9a7d2b10
Create Date: 2026-10-19 00:10:00.000000

"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op

revision: str = "8a2e4c6b1d57"
down_revision: str | None = "3f1c9a7d2b10"
branch_labels: str | None = None
depends_on: str | None = None


def upgrade() -> None:
    op.create_table(
        "app_user",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True, nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False, server_default=""),
        sa.Column("username", sa.String(length=100), nullable=False),
        sa.Column("password", sa.String(length=150), nullable=False),
        sa.Column("authorities", sa.String(length=150), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("CURRENT_TIMESTAMP")),
    )
    op.create_index("ix_app_user_username", "app_user", ["username"], unique=True)


def downgrade() -> None:
    op.drop_index("ix_app_user_username", table_name="app_user")
    op.drop_table("app_user")

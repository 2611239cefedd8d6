"""regen_balances

Revision ID: c7d1e2f3a4b5
Revises:
Create Date: 2026-10-17 10:00:00.000000
"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

revision: str = "c7d1e2f3a4b5"
down_revision: str | None = None
branch_labels: Sequence[str] | None = None
depends_on: Sequence[str] | None = None


def upgrade() -> None:
    op.create_table(
        "regen_balances",
        sa.Column("fid", sa.BigInteger(), autoincrement=False, nullable=False),
        sa.Column("balance", sa.BigInteger(), nullable=False, server_default=sa.text("0")),
        sa.Column("last_regen_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("version", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint("balance >= 0", name="ck_regen_balances_balance_non_negative"),
        sa.CheckConstraint("fid > 0", name="ck_regen_balances_fid_positive"),
        sa.PrimaryKeyConstraint("fid"),
    )
    op.create_index("idx_regen_balances_last_regen_at", "regen_balances", ["last_regen_at"])


def downgrade() -> None:
    op.drop_index("idx_regen_balances_last_regen_at", table_name="regen_balances")
    op.drop_table("regen_balances")

"""create issuance + directory tables

Revision ID: 3f1c2a9d7b10
Revises:
Create Date: 2026-10-16 09:12:41.508213
"""
from __future__ import annotations

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "3f1c2a9d7b10"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

BigIntId = sa.BigInteger().with_variant(sa.Integer(), "sqlite")


def upgrade() -> None:
    op.create_table(
        "user",
        sa.Column("user_id", BigIntId, autoincrement=True, nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("password", sa.String(255), nullable=False),
        sa.Column("full_name", sa.String(200), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.PrimaryKeyConstraint("user_id"),
        sa.UniqueConstraint("email"),
    )

    op.create_table(
        "branches",
        sa.Column("id", BigIntId, autoincrement=True, nullable=False),
        sa.Column("branch_name", sa.String(200), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("branch_name"),
    )

    op.create_table(
        "products",
        sa.Column("product_id", BigIntId, autoincrement=True, nullable=False),
        sa.Column("product_name", sa.String(255), nullable=False),
        sa.Column("product_category", sa.Integer(), nullable=False),
        sa.Column("unit_of_measurement", sa.Integer(), nullable=True),
        sa.Column("date_added", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("last_updated", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("product_id"),
        sa.UniqueConstraint("product_name", name="uq_products_name"),
    )
    op.create_index("ix_products_category_name", "products", ["product_category", "product_name"])

    # Sorties : en-tête + lignes, écrits ensemble dans une seule transaction
    op.create_table(
        "medical_supply_issue",
        sa.Column("id", BigIntId, autoincrement=True, nullable=False),
        sa.Column("issue_no", sa.String(32), nullable=False),
        sa.Column("branch_id", sa.BigInteger(), nullable=False),
        sa.Column("employee_id", sa.BigInteger(), nullable=False),
        sa.Column("status", sa.String(32), nullable=True),
        sa.Column("issue_date", sa.Date(), nullable=False),
        sa.Column("remarks", sa.Text(), nullable=True),
        sa.Column("created_by", sa.BigInteger(), nullable=False),
        sa.Column("approved_by", sa.BigInteger(), nullable=True),
        sa.Column("approved_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("issue_no"),
    )
    op.create_index("ix_medical_supply_issue_branch_id", "medical_supply_issue", ["branch_id"])

    op.create_table(
        "medical_supply_issue_line",
        sa.Column("id", BigIntId, autoincrement=True, nullable=False),
        sa.Column("issue_id", BigIntId, nullable=False),
        sa.Column("product_id", sa.BigInteger(), nullable=False),
        sa.Column("qty", sa.Integer(), nullable=False),
        sa.Column("uom", sa.String(32), nullable=True),
        sa.Column("batch_no", sa.String(64), nullable=True),
        sa.Column("expiry_date", sa.Date(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["issue_id"], ["medical_supply_issue.id"], ondelete="CASCADE"),
    )
    op.create_index("ix_medical_supply_issue_line_issue_id", "medical_supply_issue_line", ["issue_id"])


def downgrade() -> None:
    op.drop_index("ix_medical_supply_issue_line_issue_id", table_name="medical_supply_issue_line")
    op.drop_table("medical_supply_issue_line")
    op.drop_index("ix_medical_supply_issue_branch_id", table_name="medical_supply_issue")
    op.drop_table("medical_supply_issue")
    op.drop_index("ix_products_category_name", table_name="products")
    op.drop_table("products")
    op.drop_table("branches")
    op.drop_table("user")

"""Initial schema

Revision ID: 001
Revises:
Create Date: 2025-03-01 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

PAYMENT_STATUSES = ("grace", "upcoming", "pending", "paid", "late")


def upgrade() -> None:
    # Franchises table
    op.create_table(
        "franchises",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(200), nullable=False, index=True),
        sa.Column("company_name", sa.String(200), nullable=False),
        sa.Column("owner_name", sa.String(200), nullable=False),
        sa.Column("owner_email", sa.String(255), nullable=False),
        sa.Column("owner_phone", sa.String(50), nullable=True),
        sa.Column("tax_id", sa.String(50), nullable=True),
        sa.Column("email", sa.String(255), nullable=True),
        sa.Column("phone", sa.String(50), nullable=True),
        sa.Column("address", sa.Text(), nullable=True),
        sa.Column("commune", sa.String(100), nullable=True),
        sa.Column(
            "status",
            sa.Enum("active", "terminated", name="franchisestatus", native_enum=False, length=20),
            nullable=False,
        ),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index("idx_franchise_status", "franchises", ["status"])

    # Franchise contracts table
    op.create_table(
        "franchise_contracts",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("franchise_id", sa.Integer(), sa.ForeignKey("franchises.id"), nullable=False, index=True),
        sa.Column("start_date", sa.Date(), nullable=False),
        sa.Column("duration_years", sa.Integer(), nullable=False),
        sa.Column("initial_fee", sa.Numeric(12, 2), nullable=False, server_default="0"),
        sa.Column("renewal_fee", sa.Numeric(12, 2), nullable=False, server_default="0"),
        sa.Column("royalty_amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("marketing_amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("annual_increase", sa.Numeric(6, 2), nullable=False, server_default="0"),
        sa.Column("grace_period_months", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("terminated", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("termination_date", sa.Date(), nullable=True),
        sa.Column("document_url", sa.String(500), nullable=True),
        sa.Column("renewed_from_id", sa.Integer(), sa.ForeignKey("franchise_contracts.id"), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )

    # Royalty payments table
    op.create_table(
        "royalty_payments",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("franchise_id", sa.Integer(), sa.ForeignKey("franchises.id"), nullable=False, index=True),
        sa.Column("contract_id", sa.Integer(), sa.ForeignKey("franchise_contracts.id"), nullable=False, index=True),
        sa.Column("due_date", sa.Date(), nullable=False),
        sa.Column("royalty_amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("marketing_amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("amount", sa.Numeric(12, 2), nullable=False),
        sa.Column(
            "status",
            sa.Enum(*PAYMENT_STATUSES, name="paymentstatus", native_enum=False, length=20),
            nullable=False,
        ),
        sa.Column("payment_date", sa.Date(), nullable=True),
        sa.Column("payment_method", sa.String(50), nullable=True),
        sa.Column("payment_reference", sa.String(100), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index("idx_royalty_status_due", "royalty_payments", ["status", "due_date"])
    op.create_index("idx_royalty_franchise_due", "royalty_payments", ["franchise_id", "due_date"])

    # Payment logs table
    op.create_table(
        "payment_logs",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "payment_id", sa.Integer(),
            sa.ForeignKey("royalty_payments.id", ondelete="CASCADE"),
            nullable=False, index=True,
        ),
        sa.Column(
            "status",
            sa.Enum(*PAYMENT_STATUSES, name="paymentstatus", native_enum=False, length=20),
            nullable=False,
        ),
        sa.Column("amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("payment_method", sa.String(50), nullable=True),
        sa.Column("payment_reference", sa.String(100), nullable=True),
        sa.Column("due_date", sa.Date(), nullable=False),
        sa.Column("payment_date", sa.Date(), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )


def downgrade() -> None:
    op.drop_table("payment_logs")
    op.drop_index("idx_royalty_franchise_due", table_name="royalty_payments")
    op.drop_index("idx_royalty_status_due", table_name="royalty_payments")
    op.drop_table("royalty_payments")
    op.drop_table("franchise_contracts")
    op.drop_index("idx_franchise_status", table_name="franchises")
    op.drop_table("franchises")

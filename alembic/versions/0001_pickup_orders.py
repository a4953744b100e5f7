"""pickup orders schema

Revision ID: 0001_pickup_orders
Revises:
Create Date: 2026-10-18
"""

from alembic import op
import sqlalchemy as sa

revision = "0001_pickup_orders"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "pickup_orders",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("order_number", sa.String(length=16), nullable=False),
        sa.Column("pickup_date", sa.Date(), nullable=False),
        sa.Column("pickup_time", sa.String(length=5), nullable=False),
        sa.Column("customer_name", sa.String(length=255), nullable=False),
        sa.Column("customer_email", sa.String(length=255), nullable=False),
        sa.Column("customer_phone", sa.String(length=32), nullable=True),
        sa.Column("note", sa.Text(), nullable=True),
        sa.Column("status", sa.String(length=16), nullable=False, server_default="pending"),
        sa.Column("total_cents", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("checkout_session_id", sa.String(length=64), nullable=True),
        sa.Column("checkout_url", sa.String(length=500), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("uq_pickup_orders_order_number", "pickup_orders", ["order_number"], unique=True)
    op.create_index("ix_pickup_orders_pickup_date_status", "pickup_orders", ["pickup_date", "status"])
    op.create_table(
        "pickup_order_lines",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("order_id", sa.Integer(), sa.ForeignKey("pickup_orders.id"), nullable=False),
        sa.Column("item_id", sa.String(length=64), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("quantity", sa.Integer(), nullable=False),
        sa.Column("unit_price_cents", sa.Integer(), nullable=False),
    )


def downgrade() -> None:
    op.drop_table("pickup_order_lines")
    op.drop_index("ix_pickup_orders_pickup_date_status", table_name="pickup_orders")
    op.drop_index("uq_pickup_orders_order_number", table_name="pickup_orders")
    op.drop_table("pickup_orders")

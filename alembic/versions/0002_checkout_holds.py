"""checkout holds and status timestamps

Revision ID: 0002_checkout_holds
Revises: 0001_pickup_orders
Create Date: 2026-10-19
"""

from alembic import op
import sqlalchemy as sa

revision = "0002_checkout_holds"
down_revision = "0001_pickup_orders"
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.add_column("pickup_orders", sa.Column("checkout_expires_at", sa.DateTime(timezone=True), nullable=True))
    op.add_column("pickup_orders", sa.Column("status_updated_at", sa.DateTime(timezone=True), nullable=True))


def downgrade() -> None:
    with op.batch_alter_table("pickup_orders") as batch_op:
        batch_op.drop_column("status_updated_at")
        batch_op.drop_column("checkout_expires_at")

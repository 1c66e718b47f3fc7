"""add amount_refunded to payments and sequence to store_credit_events

Revision ID: b71e0c5a9d24
Revises: 8d2b4e6f1c93
Create Date: 2026-10-19 14:00:00.000000

"""

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision = "b71e0c5a9d24"
down_revision = "8d2b4e6f1c93"
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.add_column(
        "payments",
        sa.Column(
            "amount_refunded",
            sa.Numeric(precision=12, scale=2),
            nullable=False,
            server_default="0",
        ),
    )
    op.add_column(
        "store_credit_events",
        sa.Column("sequence", sa.Integer(), nullable=False, server_default="0"),
    )
    op.create_index(
        "ix_store_credit_events_store_credit_id_sequence",
        "store_credit_events",
        ["store_credit_id", "sequence"],
    )


def downgrade() -> None:
    op.drop_index(
        "ix_store_credit_events_store_credit_id_sequence", table_name="store_credit_events"
    )
    op.drop_column("store_credit_events", "sequence")
    op.drop_column("payments", "amount_refunded")

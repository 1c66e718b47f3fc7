"""create order, payment and gift card tables

Revision ID: 8d2b4e6f1c93
Revises: 3f1a9c2e7b40
Create Date: 2026-10-19 09:30:00.000000

"""

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision = "8d2b4e6f1c93"
down_revision = "3f1a9c2e7b40"
branch_labels = None
depends_on = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("(CURRENT_TIMESTAMP)"),
            nullable=True,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("(CURRENT_TIMESTAMP)"),
            nullable=True,
        ),
    ]


def _created_at() -> sa.Column:
    return sa.Column(
        "created_at",
        sa.DateTime(timezone=True),
        server_default=sa.text("(CURRENT_TIMESTAMP)"),
        nullable=True,
    )


def upgrade() -> None:
    op.create_table(
        "orders",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("number", sa.String(length=32), nullable=False),
        sa.Column("user_id", sa.String(length=36), nullable=True),
        sa.Column("state", sa.String(length=20), nullable=False),
        sa.Column("total", sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column("currency", sa.String(length=3), nullable=False),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("canceled_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="RESTRICT"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_orders_number"), "orders", ["number"], unique=True)
    op.create_index(op.f("ix_orders_user_id"), "orders", ["user_id"])

    op.create_table(
        "line_items",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("order_id", sa.String(length=36), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("price", sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column("quantity", sa.Integer(), nullable=False),
        sa.Column("gift_card", sa.Boolean(), nullable=False),
        _created_at(),
        sa.ForeignKeyConstraint(["order_id"], ["orders.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_line_items_order_id"), "line_items", ["order_id"])

    op.create_table(
        "credit_cards",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("user_id", sa.String(length=36), nullable=True),
        sa.Column("name", sa.String(length=255), nullable=True),
        sa.Column("cc_type", sa.String(length=32), nullable=True),
        sa.Column("last_digits", sa.String(length=4), nullable=False),
        sa.Column("month", sa.String(length=2), nullable=True),
        sa.Column("year", sa.String(length=4), nullable=True),
        sa.Column("gateway_payment_profile_id", sa.String(length=255), nullable=True),
        _created_at(),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="RESTRICT"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_credit_cards_user_id"), "credit_cards", ["user_id"])

    op.create_table(
        "payments",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("order_id", sa.String(length=36), nullable=False),
        sa.Column("amount", sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column("state", sa.String(length=20), nullable=False),
        sa.Column("source_type", sa.String(length=20), nullable=False),
        sa.Column("store_credit_id", sa.String(length=36), nullable=True),
        sa.Column("credit_card_id", sa.String(length=36), nullable=True),
        sa.Column("response_code", sa.String(length=64), nullable=True),
        sa.Column("failure_reason", sa.Text(), nullable=True),
        *_timestamps(),
        sa.Column("captured_at", sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(["order_id"], ["orders.id"], ondelete="RESTRICT"),
        sa.ForeignKeyConstraint(["store_credit_id"], ["store_credits.id"], ondelete="RESTRICT"),
        sa.ForeignKeyConstraint(["credit_card_id"], ["credit_cards.id"], ondelete="RESTRICT"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_payments_order_id"), "payments", ["order_id"])
    op.create_index(op.f("ix_payments_state"), "payments", ["state"])
    op.create_index(op.f("ix_payments_store_credit_id"), "payments", ["store_credit_id"])
    op.create_index(op.f("ix_payments_response_code"), "payments", ["response_code"])

    op.create_table(
        "payment_capture_events",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("payment_id", sa.String(length=36), nullable=False),
        sa.Column("amount", sa.Numeric(precision=12, scale=2), nullable=False),
        _created_at(),
        sa.ForeignKeyConstraint(["payment_id"], ["payments.id"], ondelete="RESTRICT"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        op.f("ix_payment_capture_events_payment_id"), "payment_capture_events", ["payment_id"]
    )

    op.create_table(
        "gift_cards",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("order_id", sa.String(length=36), nullable=False),
        sa.Column("line_item_id", sa.String(length=36), nullable=True),
        sa.Column("purchaser_id", sa.String(length=36), nullable=True),
        sa.Column("amount", sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column("currency", sa.String(length=3), nullable=False),
        sa.Column("redemption_code", sa.String(length=32), nullable=False),
        sa.Column("redeemer_id", sa.String(length=36), nullable=True),
        sa.Column("redeemed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("store_credit_id", sa.String(length=36), nullable=True),
        _created_at(),
        sa.ForeignKeyConstraint(["order_id"], ["orders.id"], ondelete="RESTRICT"),
        sa.ForeignKeyConstraint(["line_item_id"], ["line_items.id"], ondelete="RESTRICT"),
        sa.ForeignKeyConstraint(["purchaser_id"], ["users.id"], ondelete="RESTRICT"),
        sa.ForeignKeyConstraint(["redeemer_id"], ["users.id"], ondelete="RESTRICT"),
        sa.ForeignKeyConstraint(["store_credit_id"], ["store_credits.id"], ondelete="RESTRICT"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_gift_cards_order_id"), "gift_cards", ["order_id"])
    op.create_index(
        op.f("ix_gift_cards_redemption_code"), "gift_cards", ["redemption_code"], unique=True
    )

    op.create_table(
        "notifications",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("category", sa.String(length=50), nullable=False),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("message", sa.String(length=1000), nullable=False),
        sa.Column("resource_type", sa.String(length=50), nullable=True),
        sa.Column("resource_id", sa.String(length=36), nullable=True),
        sa.Column("is_read", sa.Boolean(), nullable=False),
        _created_at(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_notifications_category"), "notifications", ["category"])
    op.create_index(op.f("ix_notifications_is_read"), "notifications", ["is_read"])


def downgrade() -> None:
    op.drop_index(op.f("ix_notifications_is_read"), table_name="notifications")
    op.drop_index(op.f("ix_notifications_category"), table_name="notifications")
    op.drop_table("notifications")
    op.drop_index(op.f("ix_gift_cards_redemption_code"), table_name="gift_cards")
    op.drop_index(op.f("ix_gift_cards_order_id"), table_name="gift_cards")
    op.drop_table("gift_cards")
    op.drop_index(
        op.f("ix_payment_capture_events_payment_id"), table_name="payment_capture_events"
    )
    op.drop_table("payment_capture_events")
    op.drop_index(op.f("ix_payments_response_code"), table_name="payments")
    op.drop_index(op.f("ix_payments_store_credit_id"), table_name="payments")
    op.drop_index(op.f("ix_payments_state"), table_name="payments")
    op.drop_index(op.f("ix_payments_order_id"), table_name="payments")
    op.drop_table("payments")
    op.drop_index(op.f("ix_credit_cards_user_id"), table_name="credit_cards")
    op.drop_table("credit_cards")
    op.drop_index(op.f("ix_line_items_order_id"), table_name="line_items")
    op.drop_table("line_items")
    op.drop_index(op.f("ix_orders_user_id"), table_name="orders")
    op.drop_index(op.f("ix_orders_number"), table_name="orders")
    op.drop_table("orders")

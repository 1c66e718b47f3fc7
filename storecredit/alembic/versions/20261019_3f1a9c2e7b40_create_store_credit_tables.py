"""create store credit tables

Revision ID: 3f1a9c2e7b40
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision = "3f1a9c2e7b40"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=True),
        sa.Column("is_admin", sa.Boolean(), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("(CURRENT_TIMESTAMP)"),
            nullable=True,
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_users_email"), "users", ["email"], unique=True)

    op.create_table(
        "store_credit_categories",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("(CURRENT_TIMESTAMP)"),
            nullable=True,
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("name"),
    )

    op.create_table(
        "store_credits",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("user_id", sa.String(length=36), nullable=False),
        sa.Column("category_id", sa.String(length=36), nullable=True),
        sa.Column("created_by_id", sa.String(length=36), nullable=True),
        sa.Column("amount", sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column("amount_used", sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column("amount_authorized", sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column("currency", sa.String(length=3), nullable=False),
        sa.Column("memo", sa.Text(), nullable=True),
        sa.Column("priority", sa.Integer(), nullable=False),
        sa.Column("invalidated_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("version_id", sa.Integer(), nullable=False),
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
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="RESTRICT"),
        sa.ForeignKeyConstraint(
            ["category_id"], ["store_credit_categories.id"], ondelete="RESTRICT"
        ),
        sa.ForeignKeyConstraint(["created_by_id"], ["users.id"], ondelete="RESTRICT"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_store_credits_user_id"), "store_credits", ["user_id"])
    op.create_index(op.f("ix_store_credits_created_at"), "store_credits", ["created_at"])

    op.create_table(
        "store_credit_events",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("store_credit_id", sa.String(length=36), nullable=False),
        sa.Column("action", sa.String(length=20), nullable=False),
        sa.Column("amount", sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column("user_total_amount", sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column("originator_type", sa.String(length=20), nullable=False),
        sa.Column("originator_id", sa.String(length=36), nullable=True),
        sa.Column("authorization_code", sa.String(length=64), nullable=True),
        sa.Column("deleted", sa.Boolean(), nullable=False),
        sa.Column("deleted_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("(CURRENT_TIMESTAMP)"),
            nullable=True,
        ),
        sa.ForeignKeyConstraint(["store_credit_id"], ["store_credits.id"], ondelete="RESTRICT"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        op.f("ix_store_credit_events_store_credit_id"), "store_credit_events", ["store_credit_id"]
    )
    op.create_index(op.f("ix_store_credit_events_action"), "store_credit_events", ["action"])
    op.create_index(
        op.f("ix_store_credit_events_authorization_code"),
        "store_credit_events",
        ["authorization_code"],
    )
    op.create_index(
        op.f("ix_store_credit_events_created_at"), "store_credit_events", ["created_at"]
    )


def downgrade() -> None:
    op.drop_index(op.f("ix_store_credit_events_created_at"), table_name="store_credit_events")
    op.drop_index(
        op.f("ix_store_credit_events_authorization_code"), table_name="store_credit_events"
    )
    op.drop_index(op.f("ix_store_credit_events_action"), table_name="store_credit_events")
    op.drop_index(
        op.f("ix_store_credit_events_store_credit_id"), table_name="store_credit_events"
    )
    op.drop_table("store_credit_events")
    op.drop_index(op.f("ix_store_credits_created_at"), table_name="store_credits")
    op.drop_index(op.f("ix_store_credits_user_id"), table_name="store_credits")
    op.drop_table("store_credits")
    op.drop_table("store_credit_categories")
    op.drop_index(op.f("ix_users_email"), table_name="users")
    op.drop_table("users")

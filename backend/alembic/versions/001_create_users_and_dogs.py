"""Create users and dogs tables

Revision ID: 001
Revises: None
Create Date: 2024-01-15 00:00:00.000000+00:00

What:  Creates `users` and `dogs` with the adoption CHECK constraints and the
       indexes used by the listing queries.
Rollback: downgrade() drops both tables (destructive, all data lost).
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("username", sa.String(100), nullable=False),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id", name="pk_users"),
    )
    op.create_index("ix_users_username", "users", ["username"], unique=True)

    op.create_table(
        "dogs",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("name", sa.String(50), nullable=False),
        sa.Column("description", sa.String(500), nullable=False),
        sa.Column("owner_id", sa.Uuid(), nullable=False),
        sa.Column(
            "status",
            sa.String(20),
            server_default=sa.text("'available'"),
            nullable=False,
        ),
        sa.Column("adopted_by_id", sa.Uuid(), nullable=True),
        sa.Column("adopted_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column(
            "thank_you_message",
            sa.String(200),
            server_default=sa.text("''"),
            nullable=False,
        ),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id", name="pk_dogs"),
        sa.ForeignKeyConstraint(["owner_id"], ["users.id"], name="fk_dogs_owner_id_users"),
        sa.ForeignKeyConstraint(
            ["adopted_by_id"], ["users.id"], name="fk_dogs_adopted_by_id_users"
        ),
        sa.CheckConstraint(
            "(status = 'available' AND adopted_by_id IS NULL AND adopted_at IS NULL) OR "
            "(status = 'adopted' AND adopted_by_id IS NOT NULL AND adopted_at IS NOT NULL)",
            name="ck_dogs_adoption_consistent",
        ),
        sa.CheckConstraint(
            "adopted_by_id IS NULL OR adopted_by_id <> owner_id",
            name="ck_dogs_no_self_adoption",
        ),
    )
    op.create_index("idx_dogs_owner_status", "dogs", ["owner_id", "status"])
    op.create_index("idx_dogs_adopted_by", "dogs", ["adopted_by_id"])
    op.create_index("idx_dogs_status", "dogs", ["status"])
    op.create_index("idx_dogs_created_at", "dogs", ["created_at"])


def downgrade() -> None:
    op.drop_index("idx_dogs_created_at", table_name="dogs")
    op.drop_index("idx_dogs_status", table_name="dogs")
    op.drop_index("idx_dogs_adopted_by", table_name="dogs")
    op.drop_index("idx_dogs_owner_status", table_name="dogs")
    op.drop_table("dogs")
    op.drop_index("ix_users_username", table_name="users")
    op.drop_table("users")

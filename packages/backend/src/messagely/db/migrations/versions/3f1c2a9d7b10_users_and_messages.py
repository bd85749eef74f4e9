"""users and messages tables

Creates the two tables the service needs: users keyed by username and
messages referencing sender and recipient by username.

Revision ID: 3f1c2a9d7b10
Revises:
Create Date: 2026-10-12 14:03:51.220418
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f1c2a9d7b10'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("username", sa.String(length=100), primary_key=True),
        sa.Column("password_hash", sa.Text(), nullable=False),
        sa.Column("first_name", sa.Text(), nullable=False),
        sa.Column("last_name", sa.Text(), nullable=False),
        sa.Column("phone", sa.Text(), nullable=False),
        sa.Column("joined_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("last_login_at", sa.DateTime(timezone=True), nullable=False),
    )

    op.create_table(
        "messages",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            "from_username",
            sa.String(length=100),
            sa.ForeignKey("users.username"),
            nullable=False,
        ),
        sa.Column(
            "to_username",
            sa.String(length=100),
            sa.ForeignKey("users.username"),
            nullable=False,
        ),
        sa.Column("body", sa.Text(), nullable=False),
        sa.Column("sent_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("read_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_messages_from_username", "messages", ["from_username"])
    op.create_index("ix_messages_to_username", "messages", ["to_username"])


def downgrade() -> None:
    op.drop_index("ix_messages_to_username", table_name="messages")
    op.drop_index("ix_messages_from_username", table_name="messages")
    op.drop_table("messages")
    op.drop_table("users")

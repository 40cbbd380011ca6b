"""Create users, acronyms, categories, pivot and tokens tables

Revision ID: 001
Revises: None
Create Date: 2026-10-18 00:00:00.000000+00:00

What:  Initial schema. See app/models/ for column documentation.
Rollback: downgrade() drops every table (destructive).
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
    """Create all tables, constraints and indexes, parents first."""
    op.create_table(
        "users",
        sa.Column("id", sa.Uuid(), nullable=False, comment="Unique identifier"),
        sa.Column("name", sa.String(255), nullable=False, comment="Display name"),
        sa.Column(
            "username", sa.String(255), nullable=False,
            comment="Login name, unique across users",
        ),
        sa.Column(
            "password_hash", sa.String(255), nullable=False,
            comment="PBKDF2-HMAC-SHA256 salt and digest, hex, '$'-separated",
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("username"),
    )

    op.create_table(
        "acronyms",
        sa.Column(
            "id", sa.Integer(), autoincrement=True, nullable=False,
            comment="Unique identifier, increasing with insertion order",
        ),
        sa.Column("short", sa.String(255), nullable=False, comment="Short form, e.g. OMG"),
        sa.Column(
            "long", sa.String(1024), nullable=False,
            comment="Expanded form, e.g. Oh My God",
        ),
        sa.Column("user_id", sa.Uuid(), nullable=False, comment="Owning user"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("idx_acronyms_short", "acronyms", ["short"])
    op.create_index("idx_acronyms_user_id", "acronyms", ["user_id"])

    op.create_table(
        "categories",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.String(255), nullable=False, comment="Category name, unique"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("name"),
    )

    op.create_table(
        "acronym_category_pivot",
        sa.Column(
            "id", sa.Integer(), autoincrement=True, nullable=False,
            comment="Increases with attachment order",
        ),
        sa.Column("acronym_id", sa.Integer(), nullable=False),
        sa.Column("category_id", sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(["acronym_id"], ["acronyms.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["category_id"], ["categories.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("acronym_id", "category_id", name="uq_acronym_category"),
    )

    op.create_table(
        "tokens",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column(
            "token", sa.String(128), nullable=False,
            comment="Base64 of random bytes; sent as 'Authorization: Bearer <token>'",
        ),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_tokens_token", "tokens", ["token"], unique=True)


def downgrade() -> None:
    """Drop every table, children first. All data is lost."""
    op.drop_index("ix_tokens_token", table_name="tokens")
    op.drop_table("tokens")
    op.drop_table("acronym_category_pivot")
    op.drop_table("categories")
    op.drop_index("idx_acronyms_user_id", table_name="acronyms")
    op.drop_index("idx_acronyms_short", table_name="acronyms")
    op.drop_table("acronyms")
    op.drop_table("users")

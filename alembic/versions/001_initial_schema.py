"""Initial schema: books, likes, profiles, followers, wishlist_items, rate_limit_hits.

Revision ID: 001_initial
Revises: None
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "books",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("user_id", sa.String(64), nullable=False),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("author", sa.String(255), nullable=False),
        sa.Column("description", sa.Text, nullable=False, server_default=""),
        sa.Column("genre", sa.String(255), nullable=False),
        sa.Column("img_src", sa.Text, nullable=False, server_default=""),
        sa.Column("rating", sa.Float, nullable=False, server_default="0"),
        sa.Column("date_started", sa.DateTime(timezone=True), nullable=False),
        sa.Column("date_finished", sa.DateTime(timezone=True), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_books_user_id", "books", ["user_id"])
    op.create_index("ix_books_created_at_id", "books", ["created_at", "id"])

    op.create_table(
        "likes",
        sa.Column("user_id", sa.String(64), primary_key=True),
        sa.Column(
            "book_id", sa.Uuid(),
            sa.ForeignKey("books.id", ondelete="CASCADE"), primary_key=True,
        ),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )

    op.create_table(
        "profiles",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("user_id", sa.String(64), nullable=False, unique=True),
        sa.Column("bio", sa.String(255), nullable=False, server_default=""),
        sa.Column("tags", sa.Text, nullable=False, server_default=""),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )

    op.create_table(
        "followers",
        sa.Column("user_id", sa.String(64), primary_key=True),
        sa.Column(
            "profile_id", sa.Uuid(),
            sa.ForeignKey("profiles.id", ondelete="CASCADE"), primary_key=True,
        ),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )

    op.create_table(
        "wishlist_items",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("user_id", sa.String(64), nullable=False),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("author", sa.String(255), nullable=False),
        sa.Column("description", sa.Text, nullable=False, server_default=""),
        sa.Column("link", sa.Text, nullable=False, server_default=""),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_wishlist_items_user_id", "wishlist_items", ["user_id"])

    op.create_table(
        "rate_limit_hits",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("key", sa.String(128), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index(
        "ix_rate_limit_hits_key_created_at", "rate_limit_hits", ["key", "created_at"],
    )


def downgrade() -> None:
    op.drop_table("rate_limit_hits")
    op.drop_table("wishlist_items")
    op.drop_table("followers")
    op.drop_table("profiles")
    op.drop_table("likes")
    op.drop_table("books")

"""Initial schema: the documents table behind every collection.

Revision ID: 001
Revises: None
Create Date: 2026-10-17
"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op

revision = "001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "documents",
        sa.Column("seq", sa.INTEGER(), nullable=False),
        sa.Column("collection", sa.VARCHAR(), nullable=False),
        sa.Column("id", sa.VARCHAR(), nullable=False),
        sa.Column("body", sa.JSON(), nullable=False),
        sa.Column("created_at", sa.DATETIME(), nullable=False),
        sa.Column("updated_at", sa.DATETIME(), nullable=False),
        sa.PrimaryKeyConstraint("seq"),
    )
    op.create_index("ix_documents_collection", "documents", ["collection"])
    op.create_index(
        "ix_documents_collection_id", "documents", ["collection", "id"], unique=True
    )


def downgrade() -> None:
    op.drop_index("ix_documents_collection_id", table_name="documents")
    op.drop_index("ix_documents_collection", table_name="documents")
    op.drop_table("documents")

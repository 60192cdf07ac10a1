"""initial document, sharing and revision schema

Revision ID: a1b2c3d4e5f6
Revises:
Create Date: 2026-10-18

Creates document (with trigger-maintained search_vector and pg_trgm index),
document_share, share_link and document_revision.
"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

revision: str = "a1b2c3d4e5f6"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("CREATE EXTENSION IF NOT EXISTS pg_trgm")

    op.create_table(
        "document",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("owner_id", sa.String(), nullable=False),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column(
            "tags",
            postgresql.ARRAY(sa.String()),
            server_default="{}",
            nullable=False,
        ),
        sa.Column("is_public", sa.Boolean(), server_default="false", nullable=False),
        sa.Column("status", sa.String(length=20), nullable=False),
        sa.Column("file_type", sa.String(length=20), nullable=False),
        sa.Column("original_filename", sa.String(length=255), nullable=False),
        sa.Column("mime_type", sa.String(length=255), nullable=False),
        sa.Column("file_size", sa.BigInteger(), nullable=False),
        sa.Column("storage_ref", sa.String(length=500), nullable=False),
        sa.Column("thumbnail_ref", sa.String(length=500), nullable=True),
        sa.Column("page_count", sa.Integer(), nullable=True),
        sa.Column("processed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("view_count", sa.Integer(), server_default="0", nullable=False),
        sa.Column("download_count", sa.Integer(), server_default="0", nullable=False),
        sa.Column("search_vector", postgresql.TSVECTOR(), nullable=True),
        sa.Column("version", sa.Integer(), server_default="1", nullable=False),
        sa.Column("deleted_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_document_owner_id", "document", ["owner_id"])
    op.create_index("ix_document_deleted_at", "document", ["deleted_at"])
    op.create_index("ix_document_owner_created", "document", ["owner_id", "created_at"])
    op.create_index(
        "ix_document_search_vector",
        "document",
        ["search_vector"],
        postgresql_using="gin",
    )
    op.create_index(
        "ix_document_title_trgm",
        "document",
        ["title"],
        postgresql_using="gin",
        postgresql_ops={"title": "gin_trgm_ops"},
    )
    op.create_index("ix_document_tags", "document", ["tags"], postgresql_using="gin")

    # 'simple' config: lexemes are lowercased words, no stemming or stopwords
    op.execute(
        """
        CREATE OR REPLACE FUNCTION document_search_vector_fn()
        RETURNS trigger AS $$
        BEGIN
          NEW.search_vector :=
            setweight(to_tsvector('simple', coalesce(NEW.title, '')), 'A')
            || setweight(to_tsvector('simple', coalesce(NEW.description, '')), 'B')
            || setweight(to_tsvector('simple',
                 coalesce(array_to_string(NEW.tags, ' '), '')), 'C')
            || setweight(to_tsvector('simple', coalesce(NEW.original_filename, '')), 'D');
          RETURN NEW;
        END;
        $$ LANGUAGE plpgsql;
        """
    )
    op.execute(
        """
        CREATE TRIGGER document_search_vector_trigger
        BEFORE INSERT OR UPDATE OF title, description, tags, original_filename
        ON document
        FOR EACH ROW EXECUTE FUNCTION document_search_vector_fn()
        """
    )

    op.create_table(
        "document_share",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("document_id", sa.String(), nullable=False),
        sa.Column("owner_id", sa.String(), nullable=False),
        sa.Column("recipient_id", sa.String(), nullable=False),
        sa.Column("access_level", sa.String(length=20), nullable=False),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("is_revoked", sa.Boolean(), server_default="false", nullable=False),
        sa.Column("accepted_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("last_accessed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("message", sa.Text(), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.ForeignKeyConstraint(["document_id"], ["document.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_document_share_owner_id", "document_share", ["owner_id"])
    op.create_index("ix_document_share_recipient_id", "document_share", ["recipient_id"])
    op.create_index(
        "ix_document_share_document_recipient",
        "document_share",
        ["document_id", "recipient_id"],
    )

    op.create_table(
        "share_link",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("document_id", sa.String(), nullable=False),
        sa.Column("owner_id", sa.String(), nullable=False),
        sa.Column("token", sa.String(length=128), nullable=False),
        sa.Column("access_level", sa.String(length=20), nullable=False),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("max_uses", sa.Integer(), nullable=True),
        sa.Column("use_count", sa.Integer(), server_default="0", nullable=False),
        sa.Column("is_revoked", sa.Boolean(), server_default="false", nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.ForeignKeyConstraint(["document_id"], ["document.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("token"),
    )
    op.create_index("ix_share_link_document_id", "share_link", ["document_id"])
    op.create_index("ix_share_link_owner_id", "share_link", ["owner_id"])

    op.create_table(
        "document_revision",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("document_id", sa.String(), nullable=False),
        sa.Column("version", sa.Integer(), nullable=False),
        sa.Column("actor_id", sa.String(), nullable=False),
        sa.Column("change_summary", postgresql.JSONB(), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.ForeignKeyConstraint(["document_id"], ["document.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("document_id", "version", name="uq_document_revision_version"),
    )
    op.create_index(
        "ix_document_revision_document_id", "document_revision", ["document_id"]
    )


def downgrade() -> None:
    op.drop_index("ix_document_revision_document_id", table_name="document_revision")
    op.drop_table("document_revision")
    op.drop_index("ix_share_link_owner_id", table_name="share_link")
    op.drop_index("ix_share_link_document_id", table_name="share_link")
    op.drop_table("share_link")
    op.drop_index("ix_document_share_document_recipient", table_name="document_share")
    op.drop_index("ix_document_share_recipient_id", table_name="document_share")
    op.drop_index("ix_document_share_owner_id", table_name="document_share")
    op.drop_table("document_share")
    op.execute("DROP TRIGGER IF EXISTS document_search_vector_trigger ON document")
    op.execute("DROP FUNCTION IF EXISTS document_search_vector_fn()")
    op.drop_index("ix_document_tags", table_name="document", postgresql_using="gin")
    op.drop_index("ix_document_title_trgm", table_name="document", postgresql_using="gin")
    op.drop_index("ix_document_search_vector", table_name="document", postgresql_using="gin")
    op.drop_index("ix_document_owner_created", table_name="document")
    op.drop_index("ix_document_deleted_at", table_name="document")
    op.drop_index("ix_document_owner_id", table_name="document")
    op.drop_table("document")

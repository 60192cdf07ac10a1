"""Document model: metadata, counters and the trigger-maintained search vector."""

from datetime import datetime

from sqlalchemy import BigInteger, Boolean, DateTime, Index, Integer, String, Text
from sqlalchemy.dialects.postgresql import ARRAY, TSVECTOR
from sqlalchemy.orm import Mapped, mapped_column

from docvault.domain.enums import DocumentStatus, FileType
from docvault.infrastructure.persistence.database import Base
from docvault.infrastructure.persistence.models.mixins import (
    CuidMixin,
    SoftDeleteMixin,
    TimestampMixin,
    VersionedMixin,
)


class Document(CuidMixin, TimestampMixin, SoftDeleteMixin, VersionedMixin, Base):
    """A stored document owned by one identity.

    search_vector is maintained by the document_search_vector_trigger
    (title A, description B, tags C, original_filename D).
    """

    __tablename__ = "document"

    owner_id: Mapped[str] = mapped_column(String, nullable=False, index=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    tags: Mapped[list[str]] = mapped_column(
        ARRAY(String), nullable=False, default=list, server_default="{}"
    )
    is_public: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default="false"
    )
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=DocumentStatus.PROCESSING.value
    )
    file_type: Mapped[str] = mapped_column(
        String(20), nullable=False, default=FileType.OTHER.value
    )
    original_filename: Mapped[str] = mapped_column(String(255), nullable=False)
    mime_type: Mapped[str] = mapped_column(String(255), nullable=False)
    file_size: Mapped[int] = mapped_column(BigInteger, nullable=False)
    storage_ref: Mapped[str] = mapped_column(String(500), nullable=False)
    thumbnail_ref: Mapped[str | None] = mapped_column(String(500), nullable=True)
    page_count: Mapped[int | None] = mapped_column(Integer, nullable=True)
    processed_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    view_count: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0, server_default="0"
    )
    download_count: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0, server_default="0"
    )
    search_vector: Mapped[str | None] = mapped_column(
        TSVECTOR, nullable=True, deferred=True
    )

    __table_args__ = (
        Index("ix_document_owner_created", "owner_id", "created_at"),
        Index("ix_document_search_vector", "search_vector", postgresql_using="gin"),
        Index(
            "ix_document_title_trgm",
            "title",
            postgresql_using="gin",
            postgresql_ops={"title": "gin_trgm_ops"},
        ),
        Index("ix_document_tags", "tags", postgresql_using="gin"),
    )

"""Targeted grant (document_share) and anonymous link (share_link) models.

Neither table is ever deleted from; revocation sets is_revoked.
"""

from datetime import datetime

from sqlalchemy import Boolean, DateTime, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from docvault.domain.access import AccessLevel
from docvault.infrastructure.persistence.database import Base
from docvault.infrastructure.persistence.models.mixins import CuidMixin, TimestampMixin


class DocumentShare(CuidMixin, TimestampMixin, Base):
    """Grant of an access level on a document to one recipient identity."""

    __tablename__ = "document_share"

    document_id: Mapped[str] = mapped_column(
        String, ForeignKey("document.id", ondelete="CASCADE"), nullable=False
    )
    owner_id: Mapped[str] = mapped_column(String, nullable=False, index=True)
    recipient_id: Mapped[str] = mapped_column(String, nullable=False, index=True)
    access_level: Mapped[str] = mapped_column(
        String(20), nullable=False, default=AccessLevel.VIEW.value
    )
    expires_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    is_revoked: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default="false"
    )
    accepted_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    last_accessed_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    message: Mapped[str | None] = mapped_column(Text, nullable=True)

    __table_args__ = (
        Index("ix_document_share_document_recipient", "document_id", "recipient_id"),
    )


class ShareLink(CuidMixin, TimestampMixin, Base):
    """Anonymous, token-addressed grant on a document."""

    __tablename__ = "share_link"

    document_id: Mapped[str] = mapped_column(
        String, ForeignKey("document.id", ondelete="CASCADE"), nullable=False, index=True
    )
    owner_id: Mapped[str] = mapped_column(String, nullable=False, index=True)
    token: Mapped[str] = mapped_column(String(128), nullable=False, unique=True)
    access_level: Mapped[str] = mapped_column(
        String(20), nullable=False, default=AccessLevel.DOWNLOAD.value
    )
    expires_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    max_uses: Mapped[int | None] = mapped_column(Integer, nullable=True)
    use_count: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0, server_default="0"
    )
    is_revoked: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default="false"
    )

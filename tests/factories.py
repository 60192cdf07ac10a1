"""Builders for DTOs used across unit and API tests, plus a row inserter for DB tests."""

from datetime import UTC, datetime

from docvault.application.dtos.document import DocumentResult
from docvault.application.dtos.share import LinkGrantResult, TargetedGrantResult
from docvault.domain.access import AccessLevel
from docvault.domain.enums import DocumentStatus, FileType

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=UTC)


def make_document(**overrides) -> DocumentResult:
    """DocumentResult with sensible defaults; owner is alice."""
    values = {
        "id": "doc-1",
        "owner_id": "alice",
        "title": "Quarterly invoice",
        "description": "March invoices",
        "tags": ("finance",),
        "is_public": False,
        "status": DocumentStatus.READY,
        "file_type": FileType.PDF,
        "original_filename": "invoice.pdf",
        "mime_type": "application/pdf",
        "file_size": 1024,
        "storage_ref": "documents/alice/doc-1/abc.pdf",
        "thumbnail_ref": None,
        "page_count": 2,
        "version": 1,
        "view_count": 0,
        "download_count": 0,
        "created_at": NOW,
        "updated_at": NOW,
        "deleted_at": None,
    }
    values.update(overrides)
    return DocumentResult(**values)


def make_grant(**overrides) -> TargetedGrantResult:
    """Active view grant from alice to bob on doc-1."""
    values = {
        "id": "share-1",
        "document_id": "doc-1",
        "owner_id": "alice",
        "recipient_id": "bob",
        "access_level": AccessLevel.VIEW,
        "expires_at": None,
        "is_revoked": False,
        "accepted_at": None,
        "last_accessed_at": None,
        "message": None,
        "created_at": NOW,
        "updated_at": NOW,
    }
    values.update(overrides)
    return TargetedGrantResult(**values)


def make_link(**overrides) -> LinkGrantResult:
    """Unlimited download link on doc-1."""
    values = {
        "id": "link-1",
        "document_id": "doc-1",
        "owner_id": "alice",
        "token": "a" * 64,
        "access_level": AccessLevel.DOWNLOAD,
        "expires_at": None,
        "max_uses": None,
        "use_count": 0,
        "is_revoked": False,
        "created_at": NOW,
    }
    values.update(overrides)
    return LinkGrantResult(**values)


async def insert_document(session, **overrides):
    """Flush a Document row (owner alice) and return its DocumentResult."""
    from docvault.infrastructure.persistence.models.document import Document
    from docvault.infrastructure.persistence.repositories.document_repo import (
        document_to_result,
    )

    values = {
        "owner_id": "alice",
        "title": "Quarterly invoice",
        "description": None,
        "tags": ["finance"],
        "status": DocumentStatus.READY.value,
        "file_type": FileType.PDF.value,
        "original_filename": "invoice.pdf",
        "mime_type": "application/pdf",
        "file_size": 1024,
        "storage_ref": "documents/alice/test.pdf",
    }
    values.update(overrides)
    row = Document(**values)
    session.add(row)
    await session.flush()
    await session.refresh(row)
    return document_to_result(row)

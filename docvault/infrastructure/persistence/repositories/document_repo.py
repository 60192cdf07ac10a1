"""Document repository. Returns application DTOs."""

from __future__ import annotations

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from docvault.application.dtos.document import DocumentFileReplacement, DocumentResult
from docvault.domain.enums import DocumentStatus, FileType
from docvault.domain.exceptions import DocumentVersionConflictException
from docvault.domain.revisions import DocumentSnapshot
from docvault.infrastructure.persistence.models.document import Document
from docvault.infrastructure.persistence.repositories.base import BaseRepository
from docvault.shared.utils import ensure_utc, utc_now


def document_to_result(d: Document) -> DocumentResult:
    """Map ORM Document to application DocumentResult."""
    return DocumentResult(
        id=d.id,
        owner_id=d.owner_id,
        title=d.title,
        description=d.description,
        tags=tuple(d.tags or ()),
        is_public=d.is_public,
        status=DocumentStatus(d.status),
        file_type=FileType(d.file_type),
        original_filename=d.original_filename,
        mime_type=d.mime_type,
        file_size=d.file_size,
        storage_ref=d.storage_ref,
        thumbnail_ref=d.thumbnail_ref,
        page_count=d.page_count,
        version=d.version,
        view_count=d.view_count,
        download_count=d.download_count,
        created_at=ensure_utc(d.created_at),
        updated_at=ensure_utc(d.updated_at),
        deleted_at=ensure_utc(d.deleted_at),
    )


class DocumentRepository(BaseRepository[Document]):
    """Document repository. Metadata updates go through apply_metadata_update (version-checked)."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, Document)

    async def get_by_id(self, document_id: str) -> DocumentResult | None:
        row = await self._get_orm(document_id)
        return document_to_result(row) if row else None

    async def get_for_update(self, document_id: str) -> DocumentResult | None:
        """Return document with FOR UPDATE lock (held until the transaction ends)."""
        result = await self.db.execute(
            select(Document)
            .where(Document.id == document_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        row = result.scalar_one_or_none()
        return document_to_result(row) if row else None

    async def apply_metadata_update(
        self,
        document_id: str,
        snapshot: DocumentSnapshot,
        *,
        expected_version: int,
        new_version: int,
        file: DocumentFileReplacement | None = None,
    ) -> DocumentResult:
        """Write metadata and bump version if the stored version still equals expected_version.

        Raises:
            DocumentVersionConflictException: a concurrent request won the update.
        """
        values: dict[str, object] = {
            "title": snapshot.title,
            "description": snapshot.description,
            "tags": sorted(snapshot.tags),
            "is_public": snapshot.is_public,
            "version": new_version,
        }
        if file is not None:
            values.update(
                storage_ref=file.storage_ref,
                original_filename=file.original_filename,
                mime_type=file.mime_type,
                file_size=file.file_size,
                file_type=file.file_type.value,
                thumbnail_ref=None,
                page_count=None,
                status=DocumentStatus.PROCESSING.value,
            )
        result = await self.db.execute(
            update(Document)
            .where(
                Document.id == document_id,
                Document.version == expected_version,
                Document.deleted_at.is_(None),
            )
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            raise DocumentVersionConflictException(
                document_id, expected_version=expected_version
            )
        updated = await self.db.execute(
            select(Document)
            .where(Document.id == document_id)
            .execution_options(populate_existing=True)
        )
        return document_to_result(updated.scalar_one())

    async def set_rendition(
        self, document_id: str, page_count: int | None, thumbnail_ref: str | None
    ) -> None:
        """Record preview output and mark the document ready."""
        await self.db.execute(
            update(Document)
            .where(Document.id == document_id)
            .values(
                page_count=page_count,
                thumbnail_ref=thumbnail_ref,
                processed_at=utc_now(),
                status=DocumentStatus.READY.value,
            )
            .execution_options(synchronize_session=False)
        )

    async def increment_view_count(self, document_id: str) -> None:
        await self.db.execute(
            update(Document)
            .where(Document.id == document_id)
            .values(view_count=Document.view_count + 1)
            .execution_options(synchronize_session=False)
        )

    async def increment_download_count(self, document_id: str) -> None:
        await self.db.execute(
            update(Document)
            .where(Document.id == document_id)
            .values(download_count=Document.download_count + 1)
            .execution_options(synchronize_session=False)
        )

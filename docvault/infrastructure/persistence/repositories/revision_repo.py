"""Append-only revision repository. Returns application DTOs."""

from __future__ import annotations

from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from docvault.application.dtos.revision import RevisionResult
from docvault.infrastructure.persistence.models.revision import DocumentRevision
from docvault.infrastructure.persistence.repositories.base import BaseRepository
from docvault.shared.utils import ensure_utc


def _revision_to_result(r: DocumentRevision) -> RevisionResult:
    return RevisionResult(
        id=r.id,
        document_id=r.document_id,
        version=r.version,
        actor_id=r.actor_id,
        change_summary=r.change_summary,
        created_at=ensure_utc(r.created_at),
    )


class RevisionRepository(BaseRepository[DocumentRevision]):
    """Insert and list revisions; there is no update or delete path."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, DocumentRevision)

    async def append(
        self,
        document_id: str,
        version: int,
        actor_id: str,
        change_summary: dict[str, Any],
    ) -> RevisionResult:
        row = await self._add(
            DocumentRevision(
                document_id=document_id,
                version=version,
                actor_id=actor_id,
                change_summary=change_summary,
            )
        )
        return _revision_to_result(row)

    async def list_for_document(self, document_id: str) -> list[RevisionResult]:
        result = await self.db.execute(
            select(DocumentRevision)
            .where(DocumentRevision.document_id == document_id)
            .order_by(DocumentRevision.version.desc())
        )
        return [_revision_to_result(r) for r in result.scalars().all()]

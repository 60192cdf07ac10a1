"""Targeted grant repository (document_share). Returns application DTOs."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from sqlalchemy import ColumnElement, and_, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from docvault.application.dtos.share import (
    SharedDocumentItem,
    TargetedGrantCreate,
    TargetedGrantResult,
)
from docvault.domain.access import AccessLevel
from docvault.domain.exceptions import ResourceNotFoundException
from docvault.infrastructure.persistence.models.document import Document
from docvault.infrastructure.persistence.models.share import DocumentShare
from docvault.infrastructure.persistence.repositories.base import BaseRepository
from docvault.shared.utils import ensure_utc


def _share_to_result(s: DocumentShare) -> TargetedGrantResult:
    """Map ORM DocumentShare to application TargetedGrantResult."""
    return TargetedGrantResult(
        id=s.id,
        document_id=s.document_id,
        owner_id=s.owner_id,
        recipient_id=s.recipient_id,
        access_level=AccessLevel(s.access_level),
        expires_at=ensure_utc(s.expires_at),
        is_revoked=s.is_revoked,
        accepted_at=ensure_utc(s.accepted_at),
        last_accessed_at=ensure_utc(s.last_accessed_at),
        message=s.message,
        created_at=ensure_utc(s.created_at),
        updated_at=ensure_utc(s.updated_at),
    )


def _active(now: datetime) -> ColumnElement[bool]:
    """Not revoked and not expired at `now`."""
    return and_(
        DocumentShare.is_revoked.is_(False),
        or_(DocumentShare.expires_at.is_(None), DocumentShare.expires_at > now),
    )


class TargetedGrantRepository(BaseRepository[DocumentShare]):
    """Targeted grants. Never deletes; revoke() is a soft transition."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, DocumentShare)

    async def list_for_recipient(
        self, document_id: str, recipient_id: str
    ) -> list[TargetedGrantResult]:
        result = await self.db.execute(
            select(DocumentShare).where(
                DocumentShare.document_id == document_id,
                DocumentShare.recipient_id == recipient_id,
                DocumentShare.is_revoked.is_(False),
            )
        )
        return [_share_to_result(s) for s in result.scalars().all()]

    async def get_by_id(self, grant_id: str) -> TargetedGrantResult | None:
        row = await self._get_orm(grant_id)
        return _share_to_result(row) if row else None

    async def find_active(
        self, document_id: str, owner_id: str, recipient_id: str, now: datetime
    ) -> TargetedGrantResult | None:
        result = await self.db.execute(
            select(DocumentShare)
            .where(
                DocumentShare.document_id == document_id,
                DocumentShare.owner_id == owner_id,
                DocumentShare.recipient_id == recipient_id,
                _active(now),
            )
            .order_by(DocumentShare.created_at.desc())
            .limit(1)
        )
        row = result.scalar_one_or_none()
        return _share_to_result(row) if row else None

    async def create(self, data: TargetedGrantCreate) -> TargetedGrantResult:
        row = await self._add(
            DocumentShare(
                document_id=data.document_id,
                owner_id=data.owner_id,
                recipient_id=data.recipient_id,
                access_level=data.access_level.value,
                expires_at=data.expires_at,
                message=data.message,
                is_revoked=False,
            )
        )
        return _share_to_result(row)

    async def update_level(
        self, grant_id: str, owner_id: str, access_level: AccessLevel
    ) -> TargetedGrantResult | None:
        row = await self._get_orm(
            grant_id,
            DocumentShare.owner_id == owner_id,
            DocumentShare.is_revoked.is_(False),
        )
        if row is None:
            return None
        row.access_level = access_level.value
        return _share_to_result(await self._save(row))

    async def refresh_terms(
        self,
        grant_id: str,
        access_level: AccessLevel,
        expires_at: datetime | None,
        message: str | None,
    ) -> TargetedGrantResult:
        row = await self._get_orm(grant_id)
        if row is None:
            raise ResourceNotFoundException("share", grant_id)
        row.access_level = access_level.value
        row.expires_at = expires_at
        if message is not None:
            row.message = message
        return _share_to_result(await self._save(row))

    async def revoke(self, grant_id: str, owner_id: str) -> TargetedGrantResult | None:
        row = await self._get_orm(
            grant_id,
            DocumentShare.owner_id == owner_id,
            DocumentShare.is_revoked.is_(False),
        )
        if row is None:
            return None
        row.is_revoked = True
        return _share_to_result(await self._save(row))

    async def accept(
        self, grant_id: str, recipient_id: str, now: datetime
    ) -> TargetedGrantResult | None:
        row = await self._get_orm(
            grant_id, DocumentShare.recipient_id == recipient_id, _active(now)
        )
        if row is None:
            return None
        if row.accepted_at is None:
            row.accepted_at = now
        return _share_to_result(await self._save(row))

    async def touch_last_accessed(
        self, document_id: str, recipient_id: str, now: datetime
    ) -> None:
        await self.db.execute(
            update(DocumentShare)
            .where(
                DocumentShare.document_id == document_id,
                DocumentShare.recipient_id == recipient_id,
                DocumentShare.is_revoked.is_(False),
            )
            .values(last_accessed_at=now)
            .execution_options(synchronize_session=False)
        )

    async def list_for_document(
        self, document_id: str, owner_id: str
    ) -> list[TargetedGrantResult]:
        result = await self.db.execute(
            select(DocumentShare)
            .where(
                DocumentShare.document_id == document_id,
                DocumentShare.owner_id == owner_id,
                DocumentShare.is_revoked.is_(False),
            )
            .order_by(DocumentShare.created_at.desc())
        )
        return [_share_to_result(s) for s in result.scalars().all()]

    async def list_shared_with(
        self, recipient_id: str, now: datetime
    ) -> list[SharedDocumentItem]:
        return await self._list_with_documents(
            DocumentShare.recipient_id == recipient_id, now
        )

    async def list_shared_by(
        self, owner_id: str, now: datetime
    ) -> list[SharedDocumentItem]:
        return await self._list_with_documents(DocumentShare.owner_id == owner_id, now)

    async def _list_with_documents(
        self, condition: Any, now: datetime
    ) -> list[SharedDocumentItem]:
        result = await self.db.execute(
            select(DocumentShare, Document.title, Document.file_type)
            .join(Document, Document.id == DocumentShare.document_id)
            .where(condition, _active(now), Document.deleted_at.is_(None))
            .order_by(DocumentShare.created_at.desc(), DocumentShare.id)
        )
        return [
            SharedDocumentItem(
                grant=_share_to_result(share),
                document_title=title,
                document_file_type=file_type,
            )
            for share, title, file_type in result.all()
        ]

"""Anonymous link repository (share_link). Returns application DTOs.

consume() is a single UPDATE ... WHERE <usable> RETURNING statement; under
concurrent redemption Postgres re-checks the WHERE clause against the row
version left by the winner, so max_uses cannot be exceeded.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from sqlalchemy import ColumnElement, and_, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from docvault.application.dtos.share import LinkGrantCreate, LinkGrantResult
from docvault.domain.access import AccessLevel
from docvault.infrastructure.persistence.models.document import Document
from docvault.infrastructure.persistence.models.share import ShareLink
from docvault.infrastructure.persistence.repositories.base import BaseRepository
from docvault.shared.utils import ensure_utc


def _link_to_result(link: Any) -> LinkGrantResult:
    """Map a ShareLink ORM object (or a RETURNING row with the same columns)."""
    return LinkGrantResult(
        id=link.id,
        document_id=link.document_id,
        owner_id=link.owner_id,
        token=link.token,
        access_level=AccessLevel(link.access_level),
        expires_at=ensure_utc(link.expires_at),
        max_uses=link.max_uses,
        use_count=link.use_count,
        is_revoked=link.is_revoked,
        created_at=ensure_utc(link.created_at),
    )


def usable_at(now: datetime) -> ColumnElement[bool]:
    """Not revoked, not expired, uses remaining."""
    return and_(
        ShareLink.is_revoked.is_(False),
        or_(ShareLink.expires_at.is_(None), ShareLink.expires_at > now),
        or_(ShareLink.max_uses.is_(None), ShareLink.use_count < ShareLink.max_uses),
    )


def consume_statement(token: str, now: datetime):
    """Conditional increment of use_count for a usable link on a live document."""
    table = ShareLink.__table__
    document_live = (
        select(Document.id)
        .where(Document.id == ShareLink.document_id, Document.deleted_at.is_(None))
        .exists()
    )
    return (
        update(table)
        .where(ShareLink.token == token, usable_at(now), document_live)
        .values(use_count=ShareLink.use_count + 1, updated_at=now)
        .returning(*table.c)
    )


class LinkGrantRepository(BaseRepository[ShareLink]):
    """Anonymous links. Never deletes; revoke() is a soft transition."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, ShareLink)

    async def create(self, data: LinkGrantCreate) -> LinkGrantResult:
        row = await self._add(
            ShareLink(
                document_id=data.document_id,
                owner_id=data.owner_id,
                token=data.token,
                access_level=data.access_level.value,
                expires_at=data.expires_at,
                max_uses=data.max_uses,
                use_count=0,
                is_revoked=False,
            )
        )
        return _link_to_result(row)

    async def get_by_token(self, token: str) -> LinkGrantResult | None:
        result = await self.db.execute(
            select(ShareLink)
            .where(ShareLink.token == token)
            .execution_options(populate_existing=True)
        )
        row = result.scalar_one_or_none()
        return _link_to_result(row) if row else None

    async def consume(self, token: str, now: datetime) -> LinkGrantResult | None:
        result = await self.db.execute(consume_statement(token, now))
        row = result.one_or_none()
        return _link_to_result(row) if row else None

    async def list_active_for_document(
        self, document_id: str, owner_id: str, now: datetime
    ) -> list[LinkGrantResult]:
        result = await self.db.execute(
            select(ShareLink)
            .where(
                ShareLink.document_id == document_id,
                ShareLink.owner_id == owner_id,
                usable_at(now),
            )
            .order_by(ShareLink.created_at.desc())
        )
        return [_link_to_result(link) for link in result.scalars().all()]

    async def revoke(self, link_id: str, owner_id: str) -> LinkGrantResult | None:
        row = await self._get_orm(
            link_id, ShareLink.owner_id == owner_id, ShareLink.is_revoked.is_(False)
        )
        if row is None:
            return None
        row.is_revoked = True
        return _link_to_result(await self._save(row))

"""Plain filtered listing: the answer when no strategy matched (or no query)."""

from __future__ import annotations

from typing import Any

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from docvault.application.dtos.search import (
    CorpusFilter,
    SearchHit,
    SearchRequest,
    StrategyPage,
)
from docvault.domain.enums import SortDirection, SortField
from docvault.infrastructure.persistence.models.document import Document
from docvault.infrastructure.persistence.repositories.document_repo import (
    document_to_result,
)
from docvault.infrastructure.search.corpus import corpus_conditions

SORT_COLUMNS: dict[SortField, Any] = {
    SortField.DATE: Document.created_at,
    SortField.TITLE: func.lower(Document.title),
    SortField.SIZE: Document.file_size,
    SortField.VIEWS: Document.view_count,
    SortField.DOWNLOADS: Document.download_count,
}


def listing_order(request: SearchRequest) -> list[Any]:
    """ORDER BY for the listing; ties broken by newest first, then id."""
    sort = request.sort.for_listing()
    column = SORT_COLUMNS[sort.field]
    primary = column.asc() if sort.direction == SortDirection.ASC else column.desc()
    order = [primary]
    if sort.field != SortField.DATE:
        order.append(Document.created_at.desc())
    order.append(Document.id.desc())
    return order


class DocumentListing:
    """Owner's live documents, filtered and sorted, one page at a time."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def list(self, request: SearchRequest, corpus: CorpusFilter) -> StrategyPage:
        conditions = corpus_conditions(corpus)
        total = await self.db.scalar(
            select(func.count()).select_from(Document).where(*conditions)
        )
        if not total:
            return StrategyPage.empty()
        result = await self.db.execute(
            select(Document)
            .where(*conditions)
            .order_by(*listing_order(request))
            .offset(request.offset)
            .limit(request.limit)
        )
        hits = tuple(SearchHit(document=document_to_result(d)) for d in result.scalars().all())
        return StrategyPage(hits=hits, total=int(total))

"""Document service dependencies (composition root).

Document reads bump view/download counters, so every document operation
runs on the transactional session.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from docvault.application.dtos.document import PendingPreview
from docvault.application.interfaces.services import (
    IActivitySink,
    IBroadcastChannel,
    IObjectStorage,
    IRasterizer,
)
from docvault.application.services import AccessResolver, RevisionTracker
from docvault.application.use_cases import DocumentRenditionService, DocumentService
from docvault.core.config import get_settings
from docvault.infrastructure.persistence import database
from docvault.infrastructure.persistence.database import get_db_transactional
from docvault.infrastructure.persistence.repositories import (
    DocumentRepository,
    RevisionRepository,
    TargetedGrantRepository,
)

from . import collaborators


async def get_document_service(
    db: Annotated[AsyncSession, Depends(get_db_transactional)],
    storage: Annotated[IObjectStorage | None, Depends(collaborators.get_object_storage)],
    activity_sink: Annotated[IActivitySink | None, Depends(collaborators.get_activity_sink)],
    broadcast: Annotated[IBroadcastChannel | None, Depends(collaborators.get_broadcast)],
) -> DocumentService:
    """Build DocumentService over one transactional session."""
    settings = get_settings()
    document_repo = DocumentRepository(db)
    grant_repo = TargetedGrantRepository(db)
    revision_repo = RevisionRepository(db)
    return DocumentService(
        resolver=AccessResolver(document_repo, grant_repo),
        document_repo=document_repo,
        grant_repo=grant_repo,
        revision_repo=revision_repo,
        revision_tracker=RevisionTracker(document_repo, revision_repo),
        storage=storage,
        activity_sink=activity_sink,
        broadcast=broadcast,
        commit=db.commit,
        storage_key_prefix=settings.storage_key_prefix,
        download_url_expire_seconds=settings.download_url_expire_seconds,
    )


PreviewRenderer = Callable[[PendingPreview], Awaitable[None]]


def get_preview_renderer(
    storage: Annotated[IObjectStorage | None, Depends(collaborators.get_object_storage)],
    rasterizer: Annotated[IRasterizer | None, Depends(collaborators.get_rasterizer)],
) -> PreviewRenderer:
    """Renderer for background tasks; each run opens its own transactional session."""

    async def render(pending: PendingPreview) -> None:
        async with database.transactional_session() as db:
            service = DocumentRenditionService(DocumentRepository(db), storage, rasterizer)
            await service.render(pending)

    return render

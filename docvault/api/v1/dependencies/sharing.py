"""Sharing service dependencies (composition root)."""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from docvault.application.interfaces.services import IActivitySink, IObjectStorage
from docvault.application.services import LinkValidator
from docvault.application.use_cases import SharingService
from docvault.core.config import get_settings
from docvault.infrastructure.persistence.database import get_db, get_db_transactional
from docvault.infrastructure.persistence.repositories import (
    DocumentRepository,
    LinkGrantRepository,
    TargetedGrantRepository,
)

from . import collaborators


def _build_sharing_service(
    db: AsyncSession,
    storage: IObjectStorage | None,
    activity_sink: IActivitySink | None,
) -> SharingService:
    settings = get_settings()
    document_repo = DocumentRepository(db)
    link_repo = LinkGrantRepository(db)
    return SharingService(
        document_repo=document_repo,
        grant_repo=TargetedGrantRepository(db),
        link_repo=link_repo,
        link_validator=LinkValidator(link_repo, document_repo),
        storage=storage,
        activity_sink=activity_sink,
        token_bytes=settings.share_link_token_bytes,
        max_expiry_days=settings.share_max_expiry_days,
        download_url_expire_seconds=settings.download_url_expire_seconds,
    )


async def get_sharing_service(
    db: Annotated[AsyncSession, Depends(get_db_transactional)],
    storage: Annotated[IObjectStorage | None, Depends(collaborators.get_object_storage)],
    activity_sink: Annotated[IActivitySink | None, Depends(collaborators.get_activity_sink)],
) -> SharingService:
    """SharingService for writes and link redemption (commits on success)."""
    return _build_sharing_service(db, storage, activity_sink)


async def get_sharing_query_service(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> SharingService:
    """SharingService for read-only listings."""
    return _build_sharing_service(db, None, None)

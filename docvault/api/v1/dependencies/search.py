"""Search orchestrator dependency (composition root)."""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from docvault.application.use_cases import SearchOrchestrator
from docvault.core.config import get_settings
from docvault.infrastructure.persistence.database import get_db
from docvault.infrastructure.search import DocumentListing, build_cascade


async def get_search_orchestrator(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> SearchOrchestrator:
    """Build the cascade (exact, prefix, trigram, pattern) plus listing fallback."""
    settings = get_settings()
    return SearchOrchestrator(
        build_cascade(db, settings),
        DocumentListing(db),
        default_limit=settings.search_default_limit,
        max_limit=settings.search_max_limit,
    )

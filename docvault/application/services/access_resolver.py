"""Access resolver: decides whether an identity may act on a document.

Owner short-circuits to OWNER. Otherwise the requester's targeted grants
are reduced to an effective level (see domain.access.effective_grant_level)
and compared with the required level. Anonymous links are resolved
separately by LinkValidator. Verdicts are never cached.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime
from typing import TYPE_CHECKING

from docvault.application.dtos.document import AuthorizedDocument, DocumentResult
from docvault.domain.access import (
    AccessLevel,
    AccessVerdict,
    effective_grant_level,
    satisfies,
)
from docvault.domain.exceptions import AccessDeniedException, DocumentNotFoundException
from docvault.shared.utils import utc_now

if TYPE_CHECKING:
    from docvault.application.interfaces.repositories import (
        IDocumentRepository,
        ITargetedGrantRepository,
    )

logger = logging.getLogger(__name__)


class AccessResolver:
    """Resolve (document, requester, required level) to a verdict."""

    def __init__(
        self,
        document_repo: IDocumentRepository,
        grant_repo: ITargetedGrantRepository,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.document_repo = document_repo
        self.grant_repo = grant_repo
        self._clock = clock

    async def resolve(
        self, document: DocumentResult, requester_id: str, required: AccessLevel
    ) -> AccessVerdict:
        """Adjudicate access to an existing document. Never raises for denial."""
        if requester_id == document.owner_id:
            return AccessVerdict.allow(AccessLevel.OWNER)
        grants = await self.grant_repo.list_for_recipient(document.id, requester_id)
        level = effective_grant_level(grants, self._clock())
        if level is not None and satisfies(level, required):
            return AccessVerdict.allow(level)
        return AccessVerdict.deny()

    async def resolve_access(
        self, document_id: str, requester_id: str, required: AccessLevel
    ) -> AccessVerdict:
        """Resolve by document ID; a missing or deleted document is a plain denial."""
        document = await self.document_repo.get_by_id(document_id)
        if document is None or document.is_deleted:
            return AccessVerdict.deny()
        return await self.resolve(document, requester_id, required)

    async def authorize(
        self, document_id: str, requester_id: str, required: AccessLevel
    ) -> AuthorizedDocument:
        """Load the document and require `required`, raising at the service boundary.

        Raises:
            DocumentNotFoundException: document missing or soft-deleted.
            AccessDeniedException: document exists but access is insufficient
                (serialized identically to DocumentNotFoundException).
        """
        document = await self.document_repo.get_by_id(document_id)
        if document is None or document.is_deleted:
            raise DocumentNotFoundException(document_id)
        verdict = await self.resolve(document, requester_id, required)
        if not verdict.allowed or verdict.level is None:
            logger.info(
                "Access denied: document=%s requester=%s required=%s",
                document_id,
                requester_id,
                required.value,
            )
            raise AccessDeniedException(document_id, requester_id, required.value)
        return AuthorizedDocument(document=document, access_level=verdict.level)

"""Anonymous link validation.

Consumption is a single conditional increment in the repository; when it
matches no row the link is re-read only to classify the denial reason
(revoked, then expired, then use limit).
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime
from typing import TYPE_CHECKING

from docvault.application.dtos.share import LinkVerdict
from docvault.domain.access import link_denial_reason
from docvault.domain.enums import LinkDenialReason
from docvault.shared.utils import utc_now

if TYPE_CHECKING:
    from docvault.application.interfaces.repositories import (
        IDocumentRepository,
        ILinkGrantRepository,
    )

logger = logging.getLogger(__name__)


class LinkValidator:
    """Validate and consume anonymous share links."""

    def __init__(
        self,
        link_repo: ILinkGrantRepository,
        document_repo: IDocumentRepository,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.link_repo = link_repo
        self.document_repo = document_repo
        self._clock = clock

    async def validate_link(self, token: str) -> LinkVerdict:
        now = self._clock()
        consumed = await self.link_repo.consume(token, now)
        if consumed is not None:
            document = await self.document_repo.get_by_id(consumed.document_id)
            if document is not None and not document.is_deleted:
                return LinkVerdict.allow(consumed, document)
            # Document went away after the increment; the caller's transaction rolls back.
            return LinkVerdict.deny(LinkDenialReason.NOT_FOUND)

        link = await self.link_repo.get_by_token(token)
        if link is None:
            return LinkVerdict.deny(LinkDenialReason.NOT_FOUND)
        document = await self.document_repo.get_by_id(link.document_id)
        if document is None or document.is_deleted:
            return LinkVerdict.deny(LinkDenialReason.NOT_FOUND)
        # A concurrent redemption may have taken the last use between the two reads.
        reason = link_denial_reason(link, now) or LinkDenialReason.USE_LIMIT_REACHED
        logger.info("Share link %s denied: %s", link.id, reason.value)
        return LinkVerdict.deny(reason)

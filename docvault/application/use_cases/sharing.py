"""Sharing use cases: targeted grants (share with a user) and anonymous links.

Only the owner may create, change or revoke grants and links. A caller who
does not own the document gets DocumentNotFoundException, and a caller who
does not own a grant or link gets ResourceNotFoundException, so neither
path reveals anything to non-owners.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime, timedelta
from typing import TYPE_CHECKING

from docvault.application.dtos.share import (
    LinkAccess,
    LinkGrantCreate,
    LinkGrantResult,
    SharedDocumentItem,
    TargetedGrantCreate,
    TargetedGrantResult,
)
from docvault.application.services.activity import emit_activity
from docvault.domain.access import AccessLevel, satisfies
from docvault.domain.enums import ActivityAction, LinkDenialReason
from docvault.domain.exceptions import (
    DocumentNotFoundException,
    LinkUnavailableException,
    ResourceNotFoundException,
    UpstreamUnavailableException,
    ValidationException,
)
from docvault.shared.utils import generate_share_token, utc_now

if TYPE_CHECKING:
    from docvault.application.dtos.document import DocumentResult
    from docvault.application.interfaces.repositories import (
        IDocumentRepository,
        ILinkGrantRepository,
        ITargetedGrantRepository,
    )
    from docvault.application.interfaces.services import IActivitySink, IObjectStorage
    from docvault.application.services.link_validator import LinkValidator

logger = logging.getLogger(__name__)

MAX_MESSAGE_LENGTH = 1000


class SharingService:
    """Owner-managed grants and links, recipient acceptance, link redemption."""

    def __init__(
        self,
        document_repo: IDocumentRepository,
        grant_repo: ITargetedGrantRepository,
        link_repo: ILinkGrantRepository,
        link_validator: LinkValidator,
        storage: IObjectStorage | None = None,
        activity_sink: IActivitySink | None = None,
        *,
        clock: Callable[[], datetime] = utc_now,
        token_bytes: int = 32,
        max_expiry_days: int = 365,
        download_url_expire_seconds: int = 3600,
    ) -> None:
        self.document_repo = document_repo
        self.grant_repo = grant_repo
        self.link_repo = link_repo
        self.link_validator = link_validator
        self.storage = storage
        self.activity_sink = activity_sink
        self._clock = clock
        self.token_bytes = token_bytes
        self.max_expiry_days = max_expiry_days
        self.download_url_expire_seconds = download_url_expire_seconds

    async def _owned_document(self, document_id: str, owner_id: str) -> DocumentResult:
        document = await self.document_repo.get_by_id(document_id)
        if document is None or document.is_deleted or document.owner_id != owner_id:
            raise DocumentNotFoundException(document_id)
        return document

    def _expiry(self, expires_in_days: int | None) -> datetime | None:
        if expires_in_days is None:
            return None
        if not 1 <= expires_in_days <= self.max_expiry_days:
            raise ValidationException(
                f"expires_in_days must be between 1 and {self.max_expiry_days}",
                field="expires_in_days",
            )
        return self._clock() + timedelta(days=expires_in_days)

    # ---- Targeted grants ----

    async def share_with_user(
        self,
        document_id: str,
        owner_id: str,
        recipient_id: str,
        access_level: AccessLevel,
        expires_in_days: int | None = None,
        message: str | None = None,
    ) -> TargetedGrantResult:
        """Create a grant, or refresh the recipient's active grant in place."""
        await self._owned_document(document_id, owner_id)
        recipient_id = recipient_id.strip()
        if not recipient_id:
            raise ValidationException("Recipient is required", field="recipient_id")
        if recipient_id == owner_id:
            raise ValidationException("Cannot share a document with its owner", field="recipient_id")
        if access_level not in AccessLevel.grantable():
            raise ValidationException(
                f"access_level must be one of {[lvl.value for lvl in AccessLevel.grantable()]}",
                field="access_level",
            )
        if message is not None and len(message) > MAX_MESSAGE_LENGTH:
            raise ValidationException(
                f"Message must be at most {MAX_MESSAGE_LENGTH} characters", field="message"
            )
        expires_at = self._expiry(expires_in_days)

        existing = await self.grant_repo.find_active(
            document_id, owner_id, recipient_id, self._clock()
        )
        if existing is not None:
            grant = await self.grant_repo.refresh_terms(
                existing.id, access_level, expires_at, message
            )
            action = ActivityAction.SHARE_UPDATED
        else:
            grant = await self.grant_repo.create(
                TargetedGrantCreate(
                    document_id=document_id,
                    owner_id=owner_id,
                    recipient_id=recipient_id,
                    access_level=access_level,
                    expires_at=expires_at,
                    message=message,
                )
            )
            action = ActivityAction.SHARE_CREATED
        await emit_activity(
            self.activity_sink,
            action,
            owner_id,
            document_id,
            recipient_id=recipient_id,
            access_level=access_level.value,
        )
        return grant

    async def update_share_level(
        self, grant_id: str, owner_id: str, access_level: AccessLevel
    ) -> TargetedGrantResult:
        if access_level not in AccessLevel.grantable():
            raise ValidationException("access_level must be view, download or edit", field="access_level")
        grant = await self.grant_repo.update_level(grant_id, owner_id, access_level)
        if grant is None:
            raise ResourceNotFoundException("share", grant_id)
        await emit_activity(
            self.activity_sink,
            ActivityAction.SHARE_UPDATED,
            owner_id,
            grant.document_id,
            recipient_id=grant.recipient_id,
            access_level=access_level.value,
        )
        return grant

    async def revoke_share(self, grant_id: str, owner_id: str) -> None:
        grant = await self.grant_repo.revoke(grant_id, owner_id)
        if grant is None:
            raise ResourceNotFoundException("share", grant_id)
        await emit_activity(
            self.activity_sink,
            ActivityAction.SHARE_REVOKED,
            owner_id,
            grant.document_id,
            recipient_id=grant.recipient_id,
        )

    async def accept_share(self, grant_id: str, recipient_id: str) -> TargetedGrantResult:
        grant = await self.grant_repo.accept(grant_id, recipient_id, self._clock())
        if grant is None:
            raise ResourceNotFoundException("share", grant_id)
        await emit_activity(
            self.activity_sink, ActivityAction.SHARE_ACCEPTED, recipient_id, grant.document_id
        )
        return grant

    async def list_document_shares(
        self, document_id: str, owner_id: str
    ) -> list[TargetedGrantResult]:
        await self._owned_document(document_id, owner_id)
        return await self.grant_repo.list_for_document(document_id, owner_id)

    async def list_shared_with_me(self, recipient_id: str) -> list[SharedDocumentItem]:
        return await self.grant_repo.list_shared_with(recipient_id, self._clock())

    async def list_shared_by_me(self, owner_id: str) -> list[SharedDocumentItem]:
        return await self.grant_repo.list_shared_by(owner_id, self._clock())

    # ---- Anonymous links ----

    async def create_link(
        self,
        document_id: str,
        owner_id: str,
        access_level: AccessLevel = AccessLevel.DOWNLOAD,
        expires_in_days: int | None = None,
        max_uses: int | None = None,
    ) -> LinkGrantResult:
        await self._owned_document(document_id, owner_id)
        if access_level not in AccessLevel.linkable():
            raise ValidationException("Links may grant view or download only", field="access_level")
        if max_uses is not None and max_uses < 1:
            raise ValidationException("max_uses must be at least 1", field="max_uses")
        link = await self.link_repo.create(
            LinkGrantCreate(
                document_id=document_id,
                owner_id=owner_id,
                token=generate_share_token(self.token_bytes),
                access_level=access_level,
                expires_at=self._expiry(expires_in_days),
                max_uses=max_uses,
            )
        )
        await emit_activity(
            self.activity_sink, ActivityAction.LINK_CREATED, owner_id, document_id, link_id=link.id
        )
        return link

    async def list_links(self, document_id: str, owner_id: str) -> list[LinkGrantResult]:
        await self._owned_document(document_id, owner_id)
        return await self.link_repo.list_active_for_document(document_id, owner_id, self._clock())

    async def revoke_link(self, link_id: str, owner_id: str) -> None:
        link = await self.link_repo.revoke(link_id, owner_id)
        if link is None:
            raise ResourceNotFoundException("link", link_id)
        await emit_activity(
            self.activity_sink, ActivityAction.LINK_REVOKED, owner_id, link.document_id, link_id=link_id
        )

    async def open_link(self, token: str) -> LinkAccess:
        """Redeem a link: consume one use and return what it grants.

        Raises:
            LinkUnavailableException: not found, revoked, expired or exhausted.
            UpstreamUnavailableException: download level but storage unavailable
                (the caller's transaction rolls back the consumed use).
        """
        verdict = await self.link_validator.validate_link(token)
        if not verdict.allowed or verdict.document is None or verdict.link is None:
            reason = verdict.reason or LinkDenialReason.NOT_FOUND
            logger.info("Share link redemption refused: %s", reason.value)
            raise LinkUnavailableException(reason)
        document = verdict.document
        level = verdict.link.access_level

        url: str | None = None
        expires_in: int | None = None
        if satisfies(level, AccessLevel.DOWNLOAD):
            if self.storage is None:
                raise UpstreamUnavailableException("object storage", "Object storage is not configured")
            try:
                url = await self.storage.presign(
                    document.storage_ref,
                    self.download_url_expire_seconds,
                    filename=document.original_filename,
                )
            except Exception as e:
                raise UpstreamUnavailableException("object storage") from e
            expires_in = self.download_url_expire_seconds
            await self.document_repo.increment_download_count(document.id)
        else:
            await self.document_repo.increment_view_count(document.id)

        await emit_activity(
            self.activity_sink,
            ActivityAction.LINK_REDEEMED,
            None,
            document.id,
            link_id=verdict.link.id,
            use_count=verdict.link.use_count,
        )
        return LinkAccess(
            document=document,
            access_level=level,
            download_url=url,
            expires_in_seconds=expires_in,
        )

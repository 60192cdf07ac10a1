"""Repository interfaces (ports) for the application layer.

Protocols define contracts that infrastructure implementations must fulfill (DIP).
All types reference application DTOs only; no infrastructure imports.
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from docvault.application.dtos.document import (
        DocumentFileReplacement,
        DocumentResult,
    )
    from docvault.application.dtos.revision import RevisionResult
    from docvault.application.dtos.share import (
        LinkGrantCreate,
        LinkGrantResult,
        SharedDocumentItem,
        TargetedGrantCreate,
        TargetedGrantResult,
    )
    from docvault.domain.access import AccessLevel
    from docvault.domain.revisions import DocumentSnapshot


class IDocumentRepository(Protocol):
    """Protocol for document repository (DIP)."""

    async def get_by_id(self, document_id: str) -> DocumentResult | None:
        """Return document by ID (including soft-deleted; callers check is_deleted)."""

    async def get_for_update(self, document_id: str) -> DocumentResult | None:
        """Return document by ID with a row lock held until the transaction ends."""

    async def apply_metadata_update(
        self,
        document_id: str,
        snapshot: DocumentSnapshot,
        *,
        expected_version: int,
        new_version: int,
        file: DocumentFileReplacement | None = None,
    ) -> DocumentResult:
        """Persist metadata (and file fields) if version still equals expected_version."""

    async def set_rendition(
        self, document_id: str, page_count: int | None, thumbnail_ref: str | None
    ) -> None:
        """Record rasterizer output (page count, thumbnail object key)."""

    async def increment_view_count(self, document_id: str) -> None:
        """Atomically add one to view_count."""

    async def increment_download_count(self, document_id: str) -> None:
        """Atomically add one to download_count."""


class ITargetedGrantRepository(Protocol):
    """Protocol for targeted (identity-bound) grants."""

    async def list_for_recipient(
        self, document_id: str, recipient_id: str
    ) -> list[TargetedGrantResult]:
        """Return non-revoked grants for (document, recipient); expiry is not filtered."""

    async def get_by_id(self, grant_id: str) -> TargetedGrantResult | None:
        """Return grant by ID."""

    async def find_active(
        self, document_id: str, owner_id: str, recipient_id: str, now: datetime
    ) -> TargetedGrantResult | None:
        """Return the newest active grant for (document, owner, recipient), if any."""

    async def create(self, data: TargetedGrantCreate) -> TargetedGrantResult:
        """Insert a grant."""

    async def update_level(
        self, grant_id: str, owner_id: str, access_level: AccessLevel
    ) -> TargetedGrantResult | None:
        """Change level on a non-revoked grant owned by owner_id; None when not found/not owned."""

    async def refresh_terms(
        self,
        grant_id: str,
        access_level: AccessLevel,
        expires_at: datetime | None,
        message: str | None,
    ) -> TargetedGrantResult:
        """Overwrite level, expiry and message on an existing grant (re-share)."""

    async def revoke(self, grant_id: str, owner_id: str) -> TargetedGrantResult | None:
        """Soft-revoke a grant owned by owner_id. None when not found/not owned/already revoked."""

    async def accept(
        self, grant_id: str, recipient_id: str, now: datetime
    ) -> TargetedGrantResult | None:
        """Stamp accepted_at on an active grant addressed to recipient_id."""

    async def touch_last_accessed(
        self, document_id: str, recipient_id: str, now: datetime
    ) -> None:
        """Stamp last_accessed_at on the recipient's non-revoked grants for the document."""

    async def list_for_document(
        self, document_id: str, owner_id: str
    ) -> list[TargetedGrantResult]:
        """Return non-revoked grants for a document owned by owner_id (newest first)."""

    async def list_shared_with(
        self, recipient_id: str, now: datetime
    ) -> list[SharedDocumentItem]:
        """Return active grants addressed to recipient_id on live documents."""

    async def list_shared_by(
        self, owner_id: str, now: datetime
    ) -> list[SharedDocumentItem]:
        """Return active grants created by owner_id on live documents."""


class ILinkGrantRepository(Protocol):
    """Protocol for anonymous link grants."""

    async def create(self, data: LinkGrantCreate) -> LinkGrantResult:
        """Insert a link."""

    async def get_by_token(self, token: str) -> LinkGrantResult | None:
        """Return link by token (any state)."""

    async def consume(self, token: str, now: datetime) -> LinkGrantResult | None:
        """Atomically increment use_count if the link is usable and its document live.

        Returns the updated link, or None when no row qualified. This single
        statement is the enforcement point for max_uses under concurrency.
        """

    async def list_active_for_document(
        self, document_id: str, owner_id: str, now: datetime
    ) -> list[LinkGrantResult]:
        """Return usable links for a document owned by owner_id (newest first)."""

    async def revoke(self, link_id: str, owner_id: str) -> LinkGrantResult | None:
        """Soft-revoke a link owned by owner_id. None when not found/not owned/already revoked."""


class IRevisionRepository(Protocol):
    """Protocol for the append-only revision log."""

    async def append(
        self,
        document_id: str,
        version: int,
        actor_id: str,
        change_summary: dict[str, Any],
    ) -> RevisionResult:
        """Insert one revision row."""

    async def list_for_document(self, document_id: str) -> list[RevisionResult]:
        """Return revisions newest version first."""

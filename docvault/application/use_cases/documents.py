"""Document use cases: read, download, update (with optional file replacement), history.

Every operation authorizes through AccessResolver before touching storage
or the revision tracker. Storage is an optional collaborator: a missing storage raises UpstreamUnavailableException only
for operations that need it. Preview rendering runs in DocumentRenditionService
after a file replacement has committed; its failures are logged and ignored.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Awaitable, Callable
from dataclasses import replace
from io import BytesIO
from typing import TYPE_CHECKING

from docvault.application.dtos.document import (
    AuthorizedDocument,
    DocumentFileReplacement,
    DocumentMetadataPatch,
    DownloadTicket,
    PendingPreview,
    UploadedFile,
)
from docvault.application.dtos.revision import DocumentUpdateOutcome, RevisionResult
from docvault.application.services.activity import emit_activity
from docvault.domain.access import AccessLevel
from docvault.domain.enums import ActivityAction, FileType
from docvault.domain.exceptions import (
    DocumentNotFoundException,
    UpstreamUnavailableException,
    ValidationException,
)
from docvault.domain.revisions import DocumentSnapshot
from docvault.shared.utils import generate_cuid, utc_now

if TYPE_CHECKING:
    from docvault.application.dtos.document import DocumentResult
    from docvault.application.interfaces.repositories import (
        IDocumentRepository,
        IRevisionRepository,
        ITargetedGrantRepository,
    )
    from docvault.application.interfaces.services import (
        IActivitySink,
        IBroadcastChannel,
        IObjectStorage,
        IRasterizer,
    )
    from docvault.application.services.access_resolver import AccessResolver
    from docvault.application.services.revision_tracker import RevisionTracker

logger = logging.getLogger(__name__)

MAX_TITLE_LENGTH = 255
MAX_TAGS = 50
MAX_TAG_LENGTH = 64


def normalize_tags(tags: list[str]) -> frozenset[str]:
    """Trim, lowercase, drop empties; cap count and length."""
    cleaned = {t.strip().lower() for t in tags if t and t.strip()}
    if len(cleaned) > MAX_TAGS:
        raise ValidationException(f"At most {MAX_TAGS} tags allowed", field="tags")
    for tag in cleaned:
        if len(tag) > MAX_TAG_LENGTH:
            raise ValidationException(
                f"Tags must be at most {MAX_TAG_LENGTH} characters", field="tags"
            )
    return frozenset(cleaned)


def _sanitize_filename(filename: str) -> str:
    """Return the basename without NUL bytes; reject empty names."""
    name = os.path.basename(filename.replace("\\", "/")).replace("\x00", "").strip()
    if not name or name in {".", ".."}:
        raise ValidationException("Filename is empty or invalid", field="file")
    return name


def apply_patch(current: DocumentSnapshot, patch: DocumentMetadataPatch) -> DocumentSnapshot:
    """Merge a partial patch over the current snapshot."""
    title = current.title
    if patch.title is not None:
        title = patch.title.strip()
        if not title:
            raise ValidationException("Title must not be blank", field="title")
        if len(title) > MAX_TITLE_LENGTH:
            raise ValidationException(
                f"Title must be at most {MAX_TITLE_LENGTH} characters", field="title"
            )
    description = current.description
    if patch.description is not None:
        description = patch.description.strip() or None
    tags = normalize_tags(patch.tags) if patch.tags is not None else current.tags
    is_public = patch.is_public if patch.is_public is not None else current.is_public
    return DocumentSnapshot(
        title=title,
        description=description,
        tags=tags,
        is_public=is_public,
        version=patch.expected_version,
    )


class DocumentService:
    """Authorized document operations (view, download, update, revision history)."""

    def __init__(
        self,
        resolver: AccessResolver,
        document_repo: IDocumentRepository,
        grant_repo: ITargetedGrantRepository,
        revision_repo: IRevisionRepository,
        revision_tracker: RevisionTracker,
        storage: IObjectStorage | None = None,
        activity_sink: IActivitySink | None = None,
        broadcast: IBroadcastChannel | None = None,
        *,
        commit: Callable[[], Awaitable[None]],
        storage_key_prefix: str = "documents",
        download_url_expire_seconds: int = 3600,
    ) -> None:
        self.resolver = resolver
        self.document_repo = document_repo
        self.grant_repo = grant_repo
        self.revision_repo = revision_repo
        self.revision_tracker = revision_tracker
        self.storage = storage
        self.activity_sink = activity_sink
        self.broadcast = broadcast
        self._commit = commit
        self.storage_key_prefix = storage_key_prefix
        self.download_url_expire_seconds = download_url_expire_seconds

    def _require_storage(self) -> IObjectStorage:
        if self.storage is None:
            raise UpstreamUnavailableException("object storage", "Object storage is not configured")
        return self.storage

    async def get_document(self, document_id: str, requester_id: str) -> AuthorizedDocument:
        """Return the document (view level) and count the view."""
        authorized = await self.resolver.authorize(document_id, requester_id, AccessLevel.VIEW)
        await self.document_repo.increment_view_count(document_id)
        document = authorized.document
        await emit_activity(
            self.activity_sink, ActivityAction.DOCUMENT_VIEWED, requester_id, document_id
        )
        return replace(
            authorized, document=replace(document, view_count=document.view_count + 1)
        )

    async def get_download(self, document_id: str, requester_id: str) -> DownloadTicket:
        """Presign a download (download level), count it and stamp the grant."""
        authorized = await self.resolver.authorize(
            document_id, requester_id, AccessLevel.DOWNLOAD
        )
        storage = self._require_storage()
        document = authorized.document
        try:
            url = await storage.presign(
                document.storage_ref,
                self.download_url_expire_seconds,
                filename=document.original_filename,
            )
        except Exception as e:
            raise UpstreamUnavailableException("object storage") from e
        await self.document_repo.increment_download_count(document_id)
        if authorized.access_level != AccessLevel.OWNER:
            await self.grant_repo.touch_last_accessed(document_id, requester_id, utc_now())
        await emit_activity(
            self.activity_sink, ActivityAction.DOCUMENT_DOWNLOADED, requester_id, document_id
        )
        return DownloadTicket(
            document_id=document_id,
            url=url,
            filename=document.original_filename,
            expires_in_seconds=self.download_url_expire_seconds,
        )

    async def list_revisions(self, document_id: str, requester_id: str) -> list[RevisionResult]:
        await self.resolver.authorize(document_id, requester_id, AccessLevel.VIEW)
        return await self.revision_repo.list_for_document(document_id)

    async def update_document(
        self,
        document_id: str,
        actor_id: str,
        patch: DocumentMetadataPatch,
        upload: UploadedFile | None = None,
    ) -> DocumentUpdateOutcome:
        """Update metadata and optionally replace the file (edit level).

        The new object is written before the database update; if the update
        fails the new object is deleted again. A file replacement is committed
        before the old objects are deleted, so a failed commit never leaves the
        row pointing at a removed object. PDF previews are not rendered here:
        the outcome carries a PendingPreview for DocumentRenditionService.

        Raises:
            DocumentNotFoundException / AccessDeniedException: not visible or not editable.
            DocumentVersionConflictException: patch.expected_version is stale.
            UpstreamUnavailableException: storage missing or the write failed.
        """
        authorized = await self.resolver.authorize(document_id, actor_id, AccessLevel.EDIT)
        current = authorized.document
        after = apply_patch(current.snapshot(), patch)

        replacement: DocumentFileReplacement | None = None
        if upload is not None:
            replacement = await self._store_upload(current, upload)

        try:
            revision = await self.revision_tracker.record_material_update(
                document_id,
                actor_id,
                before=replace(current.snapshot(), version=patch.expected_version),
                after=after,
                file_replaced=replacement is not None,
                file=replacement,
            )
            if replacement is not None and replacement.file_type != FileType.PDF:
                await self.document_repo.set_rendition(document_id, None, None)
            updated = await self.document_repo.get_by_id(document_id)
            if updated is None:
                raise DocumentNotFoundException(document_id)
            if replacement is not None:
                await self._commit()
        except Exception:
            if replacement is not None:
                await delete_quietly(self.storage, replacement.storage_ref)
            raise

        pending: PendingPreview | None = None
        if replacement is not None:
            await delete_quietly(self.storage, current.storage_ref)
            if current.thumbnail_ref:
                await delete_quietly(self.storage, current.thumbnail_ref)
            if replacement.file_type == FileType.PDF:
                pending = PendingPreview(document_id=document_id, storage_ref=replacement.storage_ref)

        if revision is not None:
            await emit_activity(
                self.activity_sink,
                ActivityAction.DOCUMENT_UPDATED,
                actor_id,
                document_id,
                version=revision.version,
                file_replaced=replacement is not None,
            )
            await self._publish(updated)
        return DocumentUpdateOutcome(document=updated, revision=revision, pending_preview=pending)

    async def _store_upload(
        self, document: DocumentResult, upload: UploadedFile
    ) -> DocumentFileReplacement:
        storage = self._require_storage()
        filename = _sanitize_filename(upload.filename)
        _, ext = os.path.splitext(filename)
        key = f"{self.storage_key_prefix}/{document.owner_id}/{document.id}/{generate_cuid()}{ext.lower()}"
        try:
            await storage.put(key, upload.data, upload.content_type, upload.size)
        except Exception as e:
            logger.error("Storage write failed for document %s key %s", document.id, key)
            await delete_quietly(storage, key)
            raise UpstreamUnavailableException("object storage", "Failed to store file") from e
        return DocumentFileReplacement(
            storage_ref=key,
            original_filename=filename,
            mime_type=upload.content_type,
            file_size=upload.size,
            file_type=FileType.from_filename(filename, upload.content_type),
        )

    async def _publish(self, document: DocumentResult) -> None:
        if self.broadcast is None:
            return
        try:
            await self.broadcast.publish(
                f"user:{document.owner_id}",
                {"type": "document.updated", "document_id": document.id, "version": document.version},
            )
        except Exception:
            logger.warning("Broadcast failed for document %s", document.id, exc_info=True)


class DocumentRenditionService:
    """Page count and thumbnail for a replaced PDF, run after the replacement committed.

    Failures leave the document ready without a preview.
    """

    def __init__(
        self,
        document_repo: IDocumentRepository,
        storage: IObjectStorage | None = None,
        rasterizer: IRasterizer | None = None,
    ) -> None:
        self.document_repo = document_repo
        self.storage = storage
        self.rasterizer = rasterizer

    async def render(self, pending: PendingPreview) -> None:
        document_id = pending.document_id
        if self.rasterizer is None or self.storage is None:
            await self.document_repo.set_rendition(document_id, None, None)
            return
        thumbnail_ref: str | None = None
        try:
            data = await self.storage.get(pending.storage_ref)
            preview = await self.rasterizer.rasterize(data)
            if preview.thumbnail_png:
                thumbnail_ref = f"{pending.storage_ref}.thumb.png"
                await self.storage.put(
                    thumbnail_ref,
                    BytesIO(preview.thumbnail_png),
                    "image/png",
                    len(preview.thumbnail_png),
                )
            await self.document_repo.set_rendition(document_id, preview.page_count, thumbnail_ref)
        except Exception:
            logger.warning("Preview generation failed for document %s", document_id, exc_info=True)
            if thumbnail_ref is not None:
                await delete_quietly(self.storage, thumbnail_ref)
            await self.document_repo.set_rendition(document_id, None, None)


async def delete_quietly(storage: IObjectStorage | None, key: str) -> None:
    """Best-effort object removal; failures are logged."""
    if storage is None:
        return
    try:
        await storage.delete(key)
    except Exception:
        logger.warning("Failed to delete storage object %s", key, exc_info=True)

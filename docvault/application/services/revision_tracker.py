"""Revision tracker: version bump plus append-only change record.

record_material_update runs inside the caller's transaction. It locks the
document row, diffs persisted state against the requested state, and on a
material change persists the metadata, increments version by one and
appends a revision, so the three land together or not at all. Identical
re-submissions are a no-op.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from docvault.application.dtos.revision import RevisionResult
from docvault.domain.exceptions import (
    DocumentNotFoundException,
    DocumentVersionConflictException,
)
from docvault.domain.revisions import DocumentSnapshot, detect_changes

if TYPE_CHECKING:
    from docvault.application.dtos.document import DocumentFileReplacement
    from docvault.application.interfaces.repositories import (
        IDocumentRepository,
        IRevisionRepository,
    )

logger = logging.getLogger(__name__)


class RevisionTracker:
    def __init__(
        self,
        document_repo: IDocumentRepository,
        revision_repo: IRevisionRepository,
    ) -> None:
        self.document_repo = document_repo
        self.revision_repo = revision_repo

    async def record_material_update(
        self,
        document_id: str,
        actor_id: str,
        before: DocumentSnapshot,
        after: DocumentSnapshot,
        file_replaced: bool = False,
        file: DocumentFileReplacement | None = None,
    ) -> RevisionResult | None:
        """Apply `after` if it differs materially from the stored document.

        Args:
            document_id: Document to update.
            actor_id: Identity performing the update (already authorized for edit).
            before: State the caller based its edit on; before.version, when set,
                must equal the stored version.
            after: Requested metadata.
            file_replaced: True when a new binary was written for this update.
            file: New file fields to persist alongside the metadata.

        Returns:
            The new revision, or None when nothing material changed.

        Raises:
            DocumentNotFoundException: document missing or deleted.
            DocumentVersionConflictException: stored version moved past before.version.
        """
        current = await self.document_repo.get_for_update(document_id)
        if current is None or current.is_deleted:
            raise DocumentNotFoundException(document_id)

        changes = detect_changes(current.snapshot(), after, file_replaced=file_replaced)
        if not changes.is_material:
            logger.debug("No material change for document %s; version stays %d", document_id, current.version)
            return None

        if before.version is not None and before.version != current.version:
            raise DocumentVersionConflictException(
                document_id, expected_version=before.version, current_version=current.version
            )

        new_version = current.version + 1
        await self.document_repo.apply_metadata_update(
            document_id,
            after,
            expected_version=current.version,
            new_version=new_version,
            file=file,
        )
        revision = await self.revision_repo.append(
            document_id=document_id,
            version=new_version,
            actor_id=actor_id,
            change_summary=changes.to_summary(),
        )
        logger.info(
            "Document %s updated to version %d by %s (fields=%s, file_replaced=%s)",
            document_id,
            new_version,
            actor_id,
            ",".join(changes.fields) or "-",
            file_replaced,
        )
        return revision

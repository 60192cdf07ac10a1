"""DTOs for revision history (no dependency on ORM)."""

from dataclasses import dataclass
from datetime import datetime
from typing import Any

from docvault.application.dtos.document import DocumentResult, PendingPreview


@dataclass(frozen=True)
class RevisionResult:
    """Immutable revision row: one per material update."""

    id: str
    document_id: str
    version: int
    actor_id: str
    change_summary: dict[str, Any]
    created_at: datetime


@dataclass(frozen=True)
class DocumentUpdateOutcome:
    """Result of a metadata/file update.

    revision is None when nothing material changed. pending_preview is set when
    a replaced PDF still needs its page count and thumbnail, to be rendered
    after the update is committed.
    """

    document: DocumentResult
    revision: RevisionResult | None
    pending_preview: PendingPreview | None = None

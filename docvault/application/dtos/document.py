"""DTOs for document use cases (no dependency on ORM)."""

from dataclasses import dataclass
from datetime import datetime
from typing import BinaryIO

from docvault.domain.access import AccessLevel
from docvault.domain.enums import DocumentStatus, FileType
from docvault.domain.revisions import DocumentSnapshot


@dataclass(frozen=True)
class DocumentResult:
    """Document read-model (result of get_by_id, get_for_update, search hits)."""

    id: str
    owner_id: str
    title: str
    description: str | None
    tags: tuple[str, ...]
    is_public: bool
    status: DocumentStatus
    file_type: FileType
    original_filename: str
    mime_type: str
    file_size: int
    storage_ref: str
    thumbnail_ref: str | None
    page_count: int | None
    version: int
    view_count: int
    download_count: int
    created_at: datetime
    updated_at: datetime
    deleted_at: datetime | None = None

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None or self.status == DocumentStatus.DELETED

    def snapshot(self) -> DocumentSnapshot:
        """Tracked metadata at the current version."""
        return DocumentSnapshot(
            title=self.title,
            description=self.description,
            tags=frozenset(self.tags),
            is_public=self.is_public,
            version=self.version,
        )


@dataclass(frozen=True)
class DocumentFileReplacement:
    """New binary already written to storage, to be recorded with the metadata update."""

    storage_ref: str
    original_filename: str
    mime_type: str
    file_size: int
    file_type: FileType


@dataclass(frozen=True)
class UploadedFile:
    """Incoming file for a document update (stream not yet stored)."""

    filename: str
    content_type: str
    data: BinaryIO
    size: int


@dataclass(frozen=True)
class DocumentMetadataPatch:
    """Partial metadata update; None means leave the field unchanged."""

    title: str | None = None
    description: str | None = None
    tags: list[str] | None = None
    is_public: bool | None = None
    expected_version: int | None = None


@dataclass(frozen=True)
class AuthorizedDocument:
    """A document together with the level the requester holds on it."""

    document: DocumentResult
    access_level: AccessLevel


@dataclass(frozen=True)
class DownloadTicket:
    """Presigned download for an authorized requester."""

    document_id: str
    url: str
    filename: str
    expires_in_seconds: int


@dataclass(frozen=True)
class PendingPreview:
    """Preview rendering owed for a committed file replacement."""

    document_id: str
    storage_ref: str

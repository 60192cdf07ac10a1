"""Document API schemas."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict

from docvault.domain.access import AccessLevel
from docvault.domain.enums import DocumentStatus, FileType


class DocumentItem(BaseModel):
    """Document metadata as returned by get, update and search."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    owner_id: str
    title: str
    description: str | None = None
    tags: list[str]
    is_public: bool
    status: DocumentStatus
    file_type: FileType
    original_filename: str
    mime_type: str
    file_size: int
    page_count: int | None = None
    has_thumbnail: bool = False
    version: int
    view_count: int
    download_count: int
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_result(cls, document: Any) -> "DocumentItem":
        item = cls.model_validate(document)
        item.has_thumbnail = document.thumbnail_ref is not None
        return item


class DocumentDetailResponse(BaseModel):
    """GET /documents/{id}: document plus the caller's effective level."""

    document: DocumentItem
    access_level: AccessLevel


class RevisionItem(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    version: int
    actor_id: str
    change_summary: dict[str, Any]
    created_at: datetime


class DocumentUpdateResponse(BaseModel):
    """PUT /documents/{id}: updated document; revision is null for a no-op update."""

    document: DocumentItem
    revision: RevisionItem | None = None


class DocumentDownloadResponse(BaseModel):
    """Response for GET /documents/{id}/download."""

    url: str
    filename: str
    expires_in_seconds: int

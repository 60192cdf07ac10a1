"""Targeted share and anonymous link schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from docvault.domain.access import AccessLevel
from docvault.schemas.document import DocumentItem


class ShareCreate(BaseModel):
    """Request body for POST /documents/{id}/shares."""

    recipient_id: str = Field(..., min_length=1, max_length=255)
    access_level: AccessLevel = AccessLevel.VIEW
    expires_in_days: int | None = Field(default=None, ge=1)
    message: str | None = Field(default=None, max_length=1000)


class ShareLevelUpdate(BaseModel):
    """Request body for PATCH /shares/{id}."""

    access_level: AccessLevel


class ShareItem(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    document_id: str
    owner_id: str
    recipient_id: str
    access_level: AccessLevel
    expires_at: datetime | None = None
    accepted_at: datetime | None = None
    last_accessed_at: datetime | None = None
    message: str | None = None
    created_at: datetime


class SharedDocumentEntry(BaseModel):
    """Row of GET /shares/with-me and /shares/by-me."""

    share: ShareItem
    document_title: str
    document_file_type: str


class LinkCreate(BaseModel):
    """Request body for POST /documents/{id}/links."""

    access_level: AccessLevel = AccessLevel.DOWNLOAD
    expires_in_days: int | None = Field(default=None, ge=1)
    max_uses: int | None = Field(default=None, ge=1)


class LinkItem(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    document_id: str
    token: str
    access_level: AccessLevel
    expires_at: datetime | None = None
    max_uses: int | None = None
    use_count: int
    created_at: datetime


class LinkAccessResponse(BaseModel):
    """GET /public/links/{token}: what the link grants."""

    document: DocumentItem
    access_level: AccessLevel
    download_url: str | None = None
    expires_in_seconds: int | None = None

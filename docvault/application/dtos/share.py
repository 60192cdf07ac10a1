"""DTOs for targeted grants and anonymous links (no dependency on ORM)."""

from dataclasses import dataclass
from datetime import datetime

from docvault.application.dtos.document import DocumentResult
from docvault.domain.access import AccessLevel
from docvault.domain.enums import LinkDenialReason


@dataclass(frozen=True)
class TargetedGrantCreate:
    """Input for creating a targeted grant (write-model)."""

    document_id: str
    owner_id: str
    recipient_id: str
    access_level: AccessLevel
    expires_at: datetime | None
    message: str | None = None


@dataclass(frozen=True)
class TargetedGrantResult:
    """Targeted grant read-model."""

    id: str
    document_id: str
    owner_id: str
    recipient_id: str
    access_level: AccessLevel
    expires_at: datetime | None
    is_revoked: bool
    accepted_at: datetime | None
    last_accessed_at: datetime | None
    message: str | None
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class SharedDocumentItem:
    """Row of a "shared with me" / "shared by me" listing."""

    grant: TargetedGrantResult
    document_title: str
    document_file_type: str


@dataclass(frozen=True)
class LinkGrantCreate:
    """Input for creating an anonymous link (write-model)."""

    document_id: str
    owner_id: str
    token: str
    access_level: AccessLevel
    expires_at: datetime | None
    max_uses: int | None


@dataclass(frozen=True)
class LinkGrantResult:
    """Anonymous link read-model."""

    id: str
    document_id: str
    owner_id: str
    token: str
    access_level: AccessLevel
    expires_at: datetime | None
    max_uses: int | None
    use_count: int
    is_revoked: bool
    created_at: datetime


@dataclass(frozen=True)
class LinkVerdict:
    """Outcome of validate_link: allowed with the document and level, or a denial reason."""

    allowed: bool
    reason: LinkDenialReason | None = None
    link: LinkGrantResult | None = None
    document: DocumentResult | None = None

    @property
    def level(self) -> AccessLevel | None:
        return self.link.access_level if self.link else None

    @classmethod
    def allow(cls, link: LinkGrantResult, document: DocumentResult) -> "LinkVerdict":
        return cls(allowed=True, link=link, document=document)

    @classmethod
    def deny(cls, reason: LinkDenialReason) -> "LinkVerdict":
        return cls(allowed=False, reason=reason)


@dataclass(frozen=True)
class LinkAccess:
    """What a redeemed link grants: the document, the level, and a URL when downloadable."""

    document: DocumentResult
    access_level: AccessLevel
    download_url: str | None
    expires_in_seconds: int | None

"""Domain enumerations for docvault.

Enums represent fixed sets of domain values (document lifecycle, file kinds,
sort options, link denial reasons).
"""

from enum import Enum


class DocumentStatus(str, Enum):
    """Document lifecycle status."""

    PROCESSING = "processing"
    READY = "ready"
    FAILED = "failed"
    DELETED = "deleted"

    @classmethod
    def values(cls) -> list[str]:
        """Return all valid status values as strings."""
        return [status.value for status in cls]


class FileType(str, Enum):
    """Coarse file kind derived from the uploaded file name / MIME type."""

    PDF = "pdf"
    DOCX = "docx"
    TXT = "txt"
    XLSX = "xlsx"
    PPTX = "pptx"
    OTHER = "other"

    @classmethod
    def values(cls) -> list[str]:
        """Return all valid file type values as strings."""
        return [file_type.value for file_type in cls]

    @classmethod
    def from_filename(cls, filename: str, mime_type: str | None = None) -> "FileType":
        """Classify by extension first, then by MIME type; OTHER when unknown."""
        _, dot, ext = filename.rpartition(".")
        ext = ext.lower() if dot else ""
        if ext in {"pdf", "docx", "txt", "xlsx", "pptx"}:
            return cls(ext)
        if mime_type == "application/pdf":
            return cls.PDF
        if mime_type == "text/plain":
            return cls.TXT
        return cls.OTHER


class SortField(str, Enum):
    """Sort keys accepted by document search/listing."""

    RELEVANCE = "relevance"
    DATE = "date"
    TITLE = "title"
    SIZE = "size"
    VIEWS = "views"
    DOWNLOADS = "downloads"


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"


class LinkDenialReason(str, Enum):
    """Why an anonymous link could not be used.

    Disclosable to the caller: holding the token already proves prior
    legitimate possession.
    """

    NOT_FOUND = "not_found"
    REVOKED = "revoked"
    EXPIRED = "expired"
    USE_LIMIT_REACHED = "use_limit_reached"


class ActivityAction(str, Enum):
    """Actions emitted to the activity sink after state changes."""

    DOCUMENT_VIEWED = "document.viewed"
    DOCUMENT_DOWNLOADED = "document.downloaded"
    DOCUMENT_UPDATED = "document.updated"
    SHARE_CREATED = "share.created"
    SHARE_UPDATED = "share.updated"
    SHARE_REVOKED = "share.revoked"
    SHARE_ACCEPTED = "share.accepted"
    LINK_CREATED = "link.created"
    LINK_REVOKED = "link.revoked"
    LINK_REDEEMED = "link.redeemed"

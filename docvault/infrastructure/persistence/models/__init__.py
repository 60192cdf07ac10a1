"""ORM models. Import here so Alembic autogenerate sees every table."""

from docvault.infrastructure.persistence.models.document import Document
from docvault.infrastructure.persistence.models.revision import DocumentRevision
from docvault.infrastructure.persistence.models.share import DocumentShare, ShareLink

__all__ = [
    "Document",
    "DocumentRevision",
    "DocumentShare",
    "ShareLink",
]

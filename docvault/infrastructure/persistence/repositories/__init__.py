"""SQLAlchemy repositories implementing the application ports."""

from docvault.infrastructure.persistence.repositories.document_repo import (
    DocumentRepository,
)
from docvault.infrastructure.persistence.repositories.link_grant_repo import (
    LinkGrantRepository,
)
from docvault.infrastructure.persistence.repositories.revision_repo import (
    RevisionRepository,
)
from docvault.infrastructure.persistence.repositories.targeted_grant_repo import (
    TargetedGrantRepository,
)

__all__ = [
    "DocumentRepository",
    "LinkGrantRepository",
    "RevisionRepository",
    "TargetedGrantRepository",
]

"""Application services (access resolution, link validation, revisions, query normalization)."""

from docvault.application.services.access_resolver import AccessResolver
from docvault.application.services.link_validator import LinkValidator
from docvault.application.services.revision_tracker import RevisionTracker

__all__ = [
    "AccessResolver",
    "LinkValidator",
    "RevisionTracker",
]

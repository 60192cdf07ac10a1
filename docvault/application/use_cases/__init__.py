"""Use cases: document operations, sharing, search."""

from docvault.application.use_cases.documents import (
    DocumentRenditionService,
    DocumentService,
)
from docvault.application.use_cases.search import SearchOrchestrator
from docvault.application.use_cases.sharing import SharingService

__all__ = [
    "DocumentRenditionService",
    "DocumentService",
    "SearchOrchestrator",
    "SharingService",
]

"""Presentation-layer dependency injection (composition root).

Routes depend only on these providers, never on repositories or sessions
directly.
"""

from docvault.api.v1.dependencies.auth import get_requester_id
from docvault.api.v1.dependencies.document import (
    PreviewRenderer,
    get_document_service,
    get_preview_renderer,
)
from docvault.api.v1.dependencies.search import get_search_orchestrator
from docvault.api.v1.dependencies.sharing import (
    get_sharing_query_service,
    get_sharing_service,
)

__all__ = [
    "PreviewRenderer",
    "get_document_service",
    "get_preview_renderer",
    "get_requester_id",
    "get_search_orchestrator",
    "get_sharing_query_service",
    "get_sharing_service",
]

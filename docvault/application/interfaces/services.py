"""Service interfaces (ports) for outbound collaborators and search strategies.

Object storage, rasterizer, activity sink and broadcast channel are provided
by the deployment; docvault ships only the contracts (plus a logging activity
sink). Search strategies are implemented in infrastructure.search.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, BinaryIO, Protocol

if TYPE_CHECKING:
    from docvault.application.dtos.activity import ActivityRecord
    from docvault.application.dtos.search import (
        CorpusFilter,
        SearchRequest,
        StrategyPage,
    )


class IObjectStorage(Protocol):
    """Binary object storage. Called only after authorization succeeds."""

    async def put(
        self, key: str, data: BinaryIO, content_type: str, size: int
    ) -> None:
        """Write an object; raise on failure."""
        ...

    async def get(self, key: str) -> bytes:
        """Read a whole object."""
        ...

    async def delete(self, key: str) -> None:
        """Delete an object; missing keys are not an error."""
        ...

    async def presign(self, key: str, expires_in_seconds: int, filename: str | None = None) -> str:
        """Return a time-limited download URL."""
        ...


class RasterizedPreview(Protocol):
    page_count: int | None
    thumbnail_png: bytes | None


class IRasterizer(Protocol):
    """Page count + first-page thumbnail for PDF documents (best-effort)."""

    async def rasterize(self, data: bytes) -> RasterizedPreview:
        ...


class IActivitySink(Protocol):
    """Append-only activity/audit sink, fire-and-forget for callers."""

    async def record(self, record: ActivityRecord) -> None:
        ...


class IBroadcastChannel(Protocol):
    """Push channel for progress updates (outside any DB transaction)."""

    async def publish(self, channel: str, message: dict[str, Any]) -> None:
        ...


class ISearchStrategy(Protocol):
    """One member of the search cascade."""

    name: str

    def can_handle(self, request: SearchRequest) -> bool:
        """Return True when the strategy's precondition holds for the request."""
        ...

    async def search(self, request: SearchRequest, corpus: CorpusFilter) -> StrategyPage:
        """Return one page of hits within corpus; raise SearchStrategyTimeoutError on timeout."""
        ...


class IDocumentListing(Protocol):
    """Plain filtered/sorted listing used when no strategy yields rows."""

    async def list(self, request: SearchRequest, corpus: CorpusFilter) -> StrategyPage:
        ...

"""DTOs for the search cascade (request-scoped; no dependency on ORM)."""

import math
from dataclasses import dataclass
from datetime import datetime

from docvault.application.dtos.document import DocumentResult
from docvault.domain.enums import DocumentStatus, FileType, SortDirection, SortField


@dataclass(frozen=True)
class NormalizedQuery:
    """Raw query plus its normalized text and tokens.

    is_phrase is True when the raw query was wrapped in double quotes.
    """

    raw: str
    text: str
    tokens: tuple[str, ...]
    is_phrase: bool = False

    @property
    def is_empty(self) -> bool:
        return not self.tokens


@dataclass(frozen=True)
class SearchFilters:
    """Structural filters, applied by every strategy and by the listing fallback."""

    file_type: FileType | None = None
    status: DocumentStatus | None = None
    tags: tuple[str, ...] = ()
    created_after: datetime | None = None
    created_before: datetime | None = None


@dataclass(frozen=True)
class SortSpec:
    field: SortField = SortField.RELEVANCE
    direction: SortDirection = SortDirection.DESC

    def for_listing(self) -> "SortSpec":
        """Relevance has no meaning without a query: list newest first."""
        if self.field == SortField.RELEVANCE:
            return SortSpec(SortField.DATE, SortDirection.DESC)
        return self


@dataclass(frozen=True)
class CorpusFilter:
    """Scope every strategy must stay within: the owner's live documents plus filters."""

    owner_id: str
    filters: SearchFilters = SearchFilters()


@dataclass(frozen=True)
class SearchRequest:
    """Normalized search request handed to each strategy."""

    requester_id: str
    query: NormalizedQuery
    filters: SearchFilters
    sort: SortSpec
    page: int
    limit: int

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


@dataclass(frozen=True)
class SearchHit:
    """A matched document and its strategy-specific score (None when unranked)."""

    document: DocumentResult
    score: float | None = None


@dataclass(frozen=True)
class StrategyPage:
    """One page of hits from a single strategy, with that strategy's total."""

    hits: tuple[SearchHit, ...]
    total: int

    @classmethod
    def empty(cls) -> "StrategyPage":
        return cls(hits=(), total=0)


@dataclass(frozen=True)
class SearchResult:
    """Search/listing response; strategy is "listing" for the plain fallback."""

    hits: tuple[SearchHit, ...]
    total: int
    page: int
    limit: int
    strategy: str
    query: str = ""

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.limit) if self.limit else 0

"""Search orchestrator: normalizes the query and walks the strategy cascade.

Strategies are tried in their fixed order. The first one whose precondition
holds and whose result is non-empty is returned as is (its own total drives
pagination). Strategies that time out count as empty. When nothing matches,
the plain filtered listing answers instead.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import TYPE_CHECKING

from docvault.application.dtos.search import (
    CorpusFilter,
    SearchFilters,
    SearchRequest,
    SearchResult,
    SortSpec,
    StrategyPage,
)
from docvault.application.services.query_normalizer import normalize_query
from docvault.domain.exceptions import SearchStrategyTimeoutError, ValidationException

if TYPE_CHECKING:
    from docvault.application.interfaces.services import (
        IDocumentListing,
        ISearchStrategy,
    )

logger = logging.getLogger(__name__)

LISTING_STRATEGY = "listing"


class SearchOrchestrator:
    """Owner-scoped document search over a fixed strategy cascade."""

    def __init__(
        self,
        strategies: Sequence[ISearchStrategy],
        listing: IDocumentListing,
        *,
        default_limit: int = 20,
        max_limit: int = 100,
    ) -> None:
        self.strategies = tuple(strategies)
        self.listing = listing
        self.default_limit = default_limit
        self.max_limit = max_limit

    def build_request(
        self,
        requester_id: str,
        query: str | None,
        filters: SearchFilters | None = None,
        sort: SortSpec | None = None,
        page: int = 1,
        page_size: int | None = None,
    ) -> SearchRequest:
        if page < 1:
            raise ValidationException("page must be >= 1", field="page")
        limit = page_size if page_size is not None else self.default_limit
        if limit < 1:
            raise ValidationException("page_size must be >= 1", field="page_size")
        return SearchRequest(
            requester_id=requester_id,
            query=normalize_query(query),
            filters=filters or SearchFilters(),
            sort=sort or SortSpec(),
            page=page,
            limit=min(limit, self.max_limit),
        )

    async def search(
        self,
        requester_id: str,
        query: str | None,
        filters: SearchFilters | None = None,
        sort: SortSpec | None = None,
        page: int = 1,
        page_size: int | None = None,
    ) -> SearchResult:
        """Search the requester's corpus.

        Returns:
            SearchResult with the hits of exactly one strategy (or the listing).
        """
        request = self.build_request(requester_id, query, filters, sort, page, page_size)
        corpus = CorpusFilter(owner_id=requester_id, filters=request.filters)

        for strategy in self.strategies:
            if not strategy.can_handle(request):
                continue
            try:
                found = await strategy.search(request, corpus)
            except SearchStrategyTimeoutError:
                logger.warning(
                    "Search strategy %s timed out for requester %s; trying next",
                    strategy.name,
                    requester_id,
                )
                continue
            if found.total > 0:
                logger.debug(
                    "Search strategy %s matched %d documents for %r",
                    strategy.name,
                    found.total,
                    request.query.text,
                )
                return self._result(request, found, strategy.name)

        listed = await self.listing.list(request, corpus)
        return self._result(request, listed, LISTING_STRATEGY)

    def _result(
        self, request: SearchRequest, page: StrategyPage, strategy: str
    ) -> SearchResult:
        return SearchResult(
            hits=page.hits,
            total=page.total,
            page=request.page,
            limit=request.limit,
            strategy=strategy,
            query=request.query.raw,
        )

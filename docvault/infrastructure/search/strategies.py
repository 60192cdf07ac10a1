"""Search cascade strategies over the document table (PostgreSQL).

Order (see build_cascade): exact full-text, prefix full-text, trigram
similarity, substring pattern. Each strategy counts and pages its own
matches within the corpus filter and runs inside a savepoint with a
statement timeout; a cancelled statement becomes SearchStrategyTimeoutError.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

from sqlalchemy import ColumnElement, func, literal_column, or_, select, text
from sqlalchemy.exc import DBAPIError
from sqlalchemy.ext.asyncio import AsyncSession

from docvault.application.dtos.search import (
    CorpusFilter,
    SearchHit,
    SearchRequest,
    StrategyPage,
)
from docvault.application.services.query_normalizer import exact_terms, prefix_terms
from docvault.core.config import Settings
from docvault.domain.exceptions import SearchStrategyTimeoutError
from docvault.infrastructure.persistence.models.document import Document
from docvault.infrastructure.persistence.repositories.document_repo import (
    document_to_result,
)
from docvault.infrastructure.search.corpus import (
    corpus_conditions,
    escape_like,
    searchable_text_columns,
)
from docvault.infrastructure.search.tsquery import exact_tsquery, prefix_tsquery

logger = logging.getLogger(__name__)

T = TypeVar("T")

QUERY_CANCELED_SQLSTATE = "57014"
MIN_FUZZY_QUERY_LENGTH = 3

_SET_STATEMENT_TIMEOUT = text("SELECT set_config('statement_timeout', :value, true)")
_SHOW_STATEMENT_TIMEOUT = text("SELECT current_setting('statement_timeout')")


def is_query_canceled(exc: DBAPIError) -> bool:
    """True when the driver error carries SQLSTATE 57014 (statement timeout)."""
    orig = exc.orig
    code = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
    return code == QUERY_CANCELED_SQLSTATE


class SqlSearchStrategy:
    """Shared count/page/timeout machinery. Subclasses define the match and score."""

    name = "base"

    def __init__(self, db: AsyncSession, settings: Settings) -> None:
        self.db = db
        self.settings = settings
        self.text_config = literal_column(f"'{settings.search_text_config}'::regconfig")

    def can_handle(self, request: SearchRequest) -> bool:
        raise NotImplementedError

    async def search(self, request: SearchRequest, corpus: CorpusFilter) -> StrategyPage:
        raise NotImplementedError

    async def _page(
        self,
        request: SearchRequest,
        corpus: CorpusFilter,
        match: ColumnElement[bool],
        score: Any | None,
    ) -> StrategyPage:
        """Count matches, then fetch one page ordered by score desc, newest first."""
        conditions = [*corpus_conditions(corpus), match]
        total = await self.db.scalar(
            select(func.count()).select_from(Document).where(*conditions)
        )
        if not total:
            return StrategyPage.empty()
        order_by: list[Any] = []
        columns: list[Any] = [Document]
        if score is not None:
            columns.append(score.label("score"))
            order_by.append(literal_column("score").desc())
        order_by.extend([Document.created_at.desc(), Document.id.desc()])
        result = await self.db.execute(
            select(*columns)
            .where(*conditions)
            .order_by(*order_by)
            .offset(request.offset)
            .limit(request.limit)
        )
        hits = tuple(
            SearchHit(
                document=document_to_result(row[0]),
                score=float(row[1]) if score is not None and row[1] is not None else None,
            )
            for row in result.all()
        )
        return StrategyPage(hits=hits, total=int(total))

    async def _bounded(self, work: Callable[[], Awaitable[T]]) -> T:
        """Run work in a savepoint with SET LOCAL statement_timeout; restore afterwards."""
        previous = await self.db.scalar(_SHOW_STATEMENT_TIMEOUT)
        try:
            async with self.db.begin_nested():
                await self.db.execute(
                    _SET_STATEMENT_TIMEOUT,
                    {"value": f"{self.settings.search_strategy_timeout_ms}ms"},
                )
                outcome = await work()
        except DBAPIError as e:
            if is_query_canceled(e):
                raise SearchStrategyTimeoutError(self.name) from e
            raise
        await self.db.execute(_SET_STATEMENT_TIMEOUT, {"value": previous})
        return outcome


class ExactStrategy(SqlSearchStrategy):
    """Exact lexical match on search_vector, ranked by ts_rank_cd.

    A raw query in double quotes is matched as a phrase; otherwise every
    remaining term must be present.
    """

    name = "exact"

    def _terms(self, request: SearchRequest) -> list[str]:
        return exact_terms(request.query.tokens, self.settings.search_max_tokens)

    def can_handle(self, request: SearchRequest) -> bool:
        return bool(self._terms(request))

    def tsquery(self, request: SearchRequest) -> ColumnElement[Any]:
        if request.query.is_phrase:
            return func.phraseto_tsquery(self.text_config, " ".join(self._terms(request)))
        return func.to_tsquery(self.text_config, exact_tsquery(self._terms(request)))

    async def search(self, request: SearchRequest, corpus: CorpusFilter) -> StrategyPage:
        query = self.tsquery(request)
        match = Document.search_vector.op("@@")(query)
        score = func.ts_rank_cd(Document.search_vector, query, 32)
        return await self._bounded(lambda: self._page(request, corpus, match, score))


class PrefixStrategy(SqlSearchStrategy):
    """Prefix full-text match: each term of 3+ chars as term:*, any may match."""

    name = "prefix"

    def can_handle(self, request: SearchRequest) -> bool:
        return len(request.query.text) >= MIN_FUZZY_QUERY_LENGTH and bool(
            prefix_terms(request.query.tokens, MIN_FUZZY_QUERY_LENGTH)
        )

    def tsquery(self, request: SearchRequest) -> ColumnElement[Any]:
        terms = prefix_terms(request.query.tokens, MIN_FUZZY_QUERY_LENGTH)
        return func.to_tsquery(self.text_config, prefix_tsquery(terms))

    async def search(self, request: SearchRequest, corpus: CorpusFilter) -> StrategyPage:
        query = self.tsquery(request)
        match = Document.search_vector.op("@@")(query)
        score = func.ts_rank_cd(Document.search_vector, query, 32)
        return await self._bounded(lambda: self._page(request, corpus, match, score))


class TrigramStrategy(SqlSearchStrategy):
    """pg_trgm similarity over title, description and filename.

    Tries the primary threshold first, then the looser fallback threshold.
    Score is the best similarity across the fields.
    """

    name = "trigram"

    def can_handle(self, request: SearchRequest) -> bool:
        return len(request.query.text) >= MIN_FUZZY_QUERY_LENGTH

    def similarity_terms(self, request: SearchRequest) -> list[ColumnElement[Any]]:
        return [func.similarity(column, request.query.text) for column in searchable_text_columns()]

    def match(self, request: SearchRequest, threshold: float) -> ColumnElement[bool]:
        return or_(*(term > threshold for term in self.similarity_terms(request)))

    async def search(self, request: SearchRequest, corpus: CorpusFilter) -> StrategyPage:
        score = func.greatest(*self.similarity_terms(request))
        thresholds = [self.settings.search_trigram_threshold]
        if self.settings.search_trigram_fallback_threshold < thresholds[0]:
            thresholds.append(self.settings.search_trigram_fallback_threshold)
        for threshold in thresholds:
            match = self.match(request, threshold)
            found = await self._bounded(lambda: self._page(request, corpus, match, score))
            if found.total:
                return found
        return StrategyPage.empty()


class PatternStrategy(SqlSearchStrategy):
    """Substring ILIKE on raw fields (title, description, tags, filename), newest first."""

    name = "pattern"

    def can_handle(self, request: SearchRequest) -> bool:
        return not request.query.is_empty

    def match(self, request: SearchRequest) -> ColumnElement[bool]:
        columns = [*searchable_text_columns(), func.array_to_string(Document.tags, " ")]
        clauses = [
            column.ilike(f"%{escape_like(token)}%", escape="\\")
            for token in request.query.tokens
            for column in columns
        ]
        return or_(*clauses)

    async def search(self, request: SearchRequest, corpus: CorpusFilter) -> StrategyPage:
        match = self.match(request)
        return await self._bounded(lambda: self._page(request, corpus, match, None))


def build_cascade(db: AsyncSession, settings: Settings) -> list[SqlSearchStrategy]:
    """Strategies in cascade order."""
    return [
        ExactStrategy(db, settings),
        PrefixStrategy(db, settings),
        TrigramStrategy(db, settings),
        PatternStrategy(db, settings),
    ]

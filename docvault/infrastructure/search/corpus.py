"""Corpus scoping and structural filters shared by every strategy and the listing."""

from __future__ import annotations

from typing import Any

from sqlalchemy import ColumnElement, func

from docvault.application.dtos.search import CorpusFilter
from docvault.infrastructure.persistence.models.document import Document


def escape_like(value: str) -> str:
    """Escape ILIKE wildcards % and _ (and the escape char) so value is literal."""
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def corpus_conditions(corpus: CorpusFilter) -> list[ColumnElement[bool]]:
    """Owner scope, soft-delete exclusion and structural filters as WHERE terms."""
    conditions: list[ColumnElement[bool]] = [
        Document.owner_id == corpus.owner_id,
        Document.deleted_at.is_(None),
    ]
    filters = corpus.filters
    if filters.file_type is not None:
        conditions.append(Document.file_type == filters.file_type.value)
    if filters.status is not None:
        conditions.append(Document.status == filters.status.value)
    for tag in filters.tags:
        conditions.append(Document.tags.contains([tag]))
    if filters.created_after is not None:
        conditions.append(Document.created_at >= filters.created_after)
    if filters.created_before is not None:
        conditions.append(Document.created_at < filters.created_before)
    return conditions


def searchable_text_columns() -> list[Any]:
    """Raw text fields matched by the trigram and pattern strategies."""
    return [
        Document.title,
        func.coalesce(Document.description, ""),
        Document.original_filename,
    ]

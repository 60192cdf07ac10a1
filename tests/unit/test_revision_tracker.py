"""Unit tests for RevisionTracker: version bump, idempotence and conflicts."""

from dataclasses import replace
from typing import Any

import pytest

from docvault.application.dtos.document import DocumentResult
from docvault.application.dtos.revision import RevisionResult
from docvault.application.services import RevisionTracker
from docvault.domain.exceptions import (
    DocumentNotFoundException,
    DocumentVersionConflictException,
)
from docvault.domain.revisions import DocumentSnapshot
from tests.factories import NOW, make_document


class InMemoryDocumentRepo:
    def __init__(self, document: DocumentResult | None) -> None:
        self.document = document

    async def get_for_update(self, document_id: str) -> DocumentResult | None:
        return self.document

    async def apply_metadata_update(
        self,
        document_id: str,
        snapshot: DocumentSnapshot,
        *,
        expected_version: int,
        new_version: int,
        file=None,
    ) -> DocumentResult:
        if self.document is None or self.document.version != expected_version:
            raise DocumentVersionConflictException(document_id)
        self.document = replace(
            self.document,
            title=snapshot.title,
            description=snapshot.description,
            tags=tuple(sorted(snapshot.tags)),
            is_public=snapshot.is_public,
            version=new_version,
        )
        return self.document


class InMemoryRevisionRepo:
    def __init__(self) -> None:
        self.rows: list[RevisionResult] = []

    async def append(
        self, document_id: str, version: int, actor_id: str, change_summary: dict[str, Any]
    ) -> RevisionResult:
        row = RevisionResult(
            id=f"rev-{version}",
            document_id=document_id,
            version=version,
            actor_id=actor_id,
            change_summary=change_summary,
            created_at=NOW,
        )
        self.rows.append(row)
        return row


@pytest.fixture
def documents() -> InMemoryDocumentRepo:
    return InMemoryDocumentRepo(make_document(title="Draft", description=None, tags=()))


@pytest.fixture
def revisions() -> InMemoryRevisionRepo:
    return InMemoryRevisionRepo()


@pytest.fixture
def tracker(documents, revisions) -> RevisionTracker:
    return RevisionTracker(documents, revisions)


def _after(document: DocumentResult, **overrides) -> DocumentSnapshot:
    return replace(document.snapshot(), **overrides)


class TestRecordMaterialUpdate:
    async def test_title_change_bumps_version_and_appends(self, tracker, documents, revisions) -> None:
        before = documents.document.snapshot()
        revision = await tracker.record_material_update(
            "doc-1", "alice", before=before, after=_after(documents.document, title="Final")
        )
        assert revision.version == 2
        assert documents.document.version == 2
        assert documents.document.title == "Final"
        assert revision.change_summary["fields"] == {"title": {"old": "Draft", "new": "Final"}}
        assert len(revisions.rows) == 1

    async def test_description_only_change_records_exact_diff(
        self, tracker, documents, revisions
    ) -> None:
        before = documents.document.snapshot()
        revision = await tracker.record_material_update(
            "doc-1",
            "alice",
            before=before,
            after=_after(documents.document, description="Signed copy"),
        )
        assert revision.change_summary == {
            "fields": {"description": {"old": None, "new": "Signed copy"}},
            "file_replaced": False,
        }
        assert documents.document.version == 2
        assert documents.document.title == "Draft"
        assert revisions.rows == [revision]

    async def test_identical_resubmission_is_noop(self, tracker, documents, revisions) -> None:
        before = documents.document.snapshot()
        after = _after(documents.document, title="Final")
        await tracker.record_material_update("doc-1", "alice", before=before, after=after)

        # Same request again, still based on version 1
        again = await tracker.record_material_update("doc-1", "alice", before=before, after=after)
        assert again is None
        assert documents.document.version == 2
        assert len(revisions.rows) == 1

    async def test_stale_base_version_conflicts(self, tracker, documents) -> None:
        stale = documents.document.snapshot()
        await tracker.record_material_update(
            "doc-1", "alice", before=stale, after=_after(documents.document, title="One")
        )
        with pytest.raises(DocumentVersionConflictException):
            await tracker.record_material_update(
                "doc-1", "bob", before=stale, after=_after(documents.document, title="Two")
            )
        assert documents.document.title == "One"

    async def test_no_base_version_skips_check(self, tracker, documents) -> None:
        revision = await tracker.record_material_update(
            "doc-1",
            "alice",
            before=replace(documents.document.snapshot(), version=None),
            after=_after(documents.document, is_public=True),
        )
        assert revision.version == 2

    async def test_file_replacement_is_material(self, tracker, documents) -> None:
        snapshot = documents.document.snapshot()
        revision = await tracker.record_material_update(
            "doc-1", "alice", before=snapshot, after=snapshot, file_replaced=True
        )
        assert revision.change_summary == {"fields": {}, "file_replaced": True}

    async def test_deleted_document(self, revisions) -> None:
        tracker = RevisionTracker(InMemoryDocumentRepo(make_document(deleted_at=NOW)), revisions)
        snapshot = make_document().snapshot()
        with pytest.raises(DocumentNotFoundException):
            await tracker.record_material_update(
                "doc-1", "alice", before=snapshot, after=replace(snapshot, title="x")
            )

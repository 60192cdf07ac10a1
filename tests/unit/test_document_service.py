"""Unit tests for DocumentService with mocked repositories and collaborators."""

from io import BytesIO
from unittest.mock import AsyncMock, MagicMock

import pytest

from docvault.application.dtos.document import (
    AuthorizedDocument,
    DocumentMetadataPatch,
    PendingPreview,
    UploadedFile,
)
from docvault.application.dtos.revision import RevisionResult
from docvault.application.use_cases import DocumentRenditionService, DocumentService
from docvault.application.use_cases.documents import (
    _sanitize_filename,
    apply_patch,
    normalize_tags,
)
from docvault.domain.access import AccessLevel
from docvault.domain.enums import ActivityAction, FileType
from docvault.domain.exceptions import (
    AccessDeniedException,
    DocumentVersionConflictException,
    UpstreamUnavailableException,
    ValidationException,
)
from tests.factories import NOW, make_document


def _revision(version: int = 2) -> RevisionResult:
    return RevisionResult(
        id="rev",
        document_id="doc-1",
        version=version,
        actor_id="alice",
        change_summary={"fields": {}, "file_replaced": True},
        created_at=NOW,
    )


@pytest.fixture
def deps():
    resolver = AsyncMock()
    resolver.authorize.return_value = AuthorizedDocument(make_document(), AccessLevel.OWNER)
    document_repo = AsyncMock()
    document_repo.get_by_id.return_value = make_document(version=2)
    tracker = AsyncMock()
    tracker.record_material_update.return_value = _revision()
    storage = AsyncMock()
    storage.presign.return_value = "https://storage.example/signed"
    return {
        "resolver": resolver,
        "document_repo": document_repo,
        "grant_repo": AsyncMock(),
        "revision_repo": AsyncMock(),
        "revision_tracker": tracker,
        "storage": storage,
        "activity_sink": AsyncMock(),
        "broadcast": AsyncMock(),
        "commit": AsyncMock(),
    }


@pytest.fixture
def service(deps) -> DocumentService:
    return DocumentService(**deps)


def _upload(name: str = "new report.pdf", content_type: str = "application/pdf") -> UploadedFile:
    return UploadedFile(filename=name, content_type=content_type, data=BytesIO(b"%PDF-1.7"), size=8)


class TestHelpers:
    def test_tags_normalized(self) -> None:
        assert normalize_tags([" Tax ", "tax", "", "2024"]) == frozenset({"tax", "2024"})

    def test_too_many_tags(self) -> None:
        with pytest.raises(ValidationException, match="At most"):
            normalize_tags([f"t{i}" for i in range(51)])

    def test_filename_path_stripped(self) -> None:
        assert _sanitize_filename("C:\\docs\\a.pdf") == "a.pdf"

    def test_empty_filename_rejected(self) -> None:
        with pytest.raises(ValidationException, match="empty or invalid"):
            _sanitize_filename("../")

    def test_patch_keeps_unset_fields(self) -> None:
        current = make_document().snapshot()
        after = apply_patch(current, DocumentMetadataPatch(title="  New  "))
        assert after.title == "New"
        assert after.description == current.description
        assert after.tags == current.tags

    def test_blank_title_rejected(self) -> None:
        with pytest.raises(ValidationException, match="blank"):
            apply_patch(make_document().snapshot(), DocumentMetadataPatch(title="  "))


class TestGetDocument:
    async def test_counts_view(self, service, deps) -> None:
        authorized = await service.get_document("doc-1", "alice")
        deps["document_repo"].increment_view_count.assert_awaited_once_with("doc-1")
        assert authorized.document.view_count == 1

    async def test_denied_propagates(self, service, deps) -> None:
        deps["resolver"].authorize.side_effect = AccessDeniedException("doc-1", "bob", "view")
        with pytest.raises(AccessDeniedException):
            await service.get_document("doc-1", "bob")
        deps["document_repo"].increment_view_count.assert_not_awaited()


class TestGetDownload:
    async def test_owner_download(self, service, deps) -> None:
        ticket = await service.get_download("doc-1", "alice")
        assert ticket.url == "https://storage.example/signed"
        assert ticket.filename == "invoice.pdf"
        deps["document_repo"].increment_download_count.assert_awaited_once_with("doc-1")
        deps["grant_repo"].touch_last_accessed.assert_not_awaited()

    async def test_grantee_download_touches_grant(self, service, deps) -> None:
        deps["resolver"].authorize.return_value = AuthorizedDocument(
            make_document(), AccessLevel.DOWNLOAD
        )
        await service.get_download("doc-1", "bob")
        deps["grant_repo"].touch_last_accessed.assert_awaited_once()

    async def test_storage_not_called_when_denied(self, service, deps) -> None:
        deps["resolver"].authorize.side_effect = AccessDeniedException("doc-1", "bob", "download")
        with pytest.raises(AccessDeniedException):
            await service.get_download("doc-1", "bob")
        deps["storage"].presign.assert_not_awaited()

    async def test_presign_failure_is_upstream_unavailable(self, service, deps) -> None:
        deps["storage"].presign.side_effect = RuntimeError("s3 down")
        with pytest.raises(UpstreamUnavailableException):
            await service.get_download("doc-1", "alice")
        deps["document_repo"].increment_download_count.assert_not_awaited()

    async def test_missing_storage(self, deps) -> None:
        deps["storage"] = None
        with pytest.raises(UpstreamUnavailableException, match="not configured"):
            await DocumentService(**deps).get_download("doc-1", "alice")


class TestUpdateDocument:
    async def test_metadata_only(self, service, deps) -> None:
        deps["revision_tracker"].record_material_update.return_value = _revision()
        outcome = await service.update_document(
            "doc-1", "alice", DocumentMetadataPatch(title="Renamed", expected_version=1)
        )
        kwargs = deps["revision_tracker"].record_material_update.await_args.kwargs
        assert kwargs["after"].title == "Renamed"
        assert kwargs["before"].version == 1
        assert kwargs["file_replaced"] is False
        assert outcome.revision.version == 2
        deps["storage"].put.assert_not_awaited()
        record = deps["activity_sink"].record.await_args.args[0]
        assert record.action == ActivityAction.DOCUMENT_UPDATED
        deps["broadcast"].publish.assert_awaited_once()
        assert deps["broadcast"].publish.await_args.args[0] == "user:alice"

    async def test_no_op_update(self, service, deps) -> None:
        deps["revision_tracker"].record_material_update.return_value = None
        outcome = await service.update_document("doc-1", "alice", DocumentMetadataPatch())
        assert outcome.revision is None
        deps["activity_sink"].record.assert_not_awaited()
        deps["broadcast"].publish.assert_not_awaited()

    async def test_file_replacement_stores_then_cleans_old(self, service, deps) -> None:
        outcome = await service.update_document(
            "doc-1", "alice", DocumentMetadataPatch(), _upload()
        )

        key = deps["storage"].put.await_args_list[0].args[0]
        assert key.startswith("documents/alice/doc-1/")
        assert key.endswith(".pdf")
        replacement = deps["revision_tracker"].record_material_update.await_args.kwargs["file"]
        assert replacement.original_filename == "new report.pdf"
        assert replacement.file_type == FileType.PDF
        deps["storage"].delete.assert_awaited_once_with("documents/alice/doc-1/abc.pdf")
        assert outcome.pending_preview == PendingPreview(document_id="doc-1", storage_ref=key)
        deps["document_repo"].set_rendition.assert_not_awaited()

    async def test_old_object_deleted_only_after_commit(self, service, deps) -> None:
        events: list[tuple[str, ...]] = []
        deps["commit"].side_effect = lambda: events.append(("commit",))
        deps["storage"].delete.side_effect = lambda key: events.append(("delete", key))
        deps["resolver"].authorize.return_value = AuthorizedDocument(
            make_document(thumbnail_ref="documents/alice/doc-1/abc.pdf.thumb.png"),
            AccessLevel.OWNER,
        )

        await service.update_document("doc-1", "alice", DocumentMetadataPatch(), _upload())

        assert events == [
            ("commit",),
            ("delete", "documents/alice/doc-1/abc.pdf"),
            ("delete", "documents/alice/doc-1/abc.pdf.thumb.png"),
        ]

    async def test_commit_failure_keeps_old_object(self, service, deps) -> None:
        deps["commit"].side_effect = ConnectionError("connection lost")
        with pytest.raises(ConnectionError):
            await service.update_document("doc-1", "alice", DocumentMetadataPatch(), _upload())
        new_key = deps["storage"].put.await_args.args[0]
        deps["storage"].delete.assert_awaited_once_with(new_key)
        deps["activity_sink"].record.assert_not_awaited()

    async def test_metadata_only_update_leaves_commit_to_caller(self, service, deps) -> None:
        await service.update_document("doc-1", "alice", DocumentMetadataPatch(title="x"))
        deps["commit"].assert_not_awaited()

    async def test_conflict_removes_new_object(self, service, deps) -> None:
        deps["revision_tracker"].record_material_update.side_effect = (
            DocumentVersionConflictException("doc-1", 1, 2)
        )
        with pytest.raises(DocumentVersionConflictException):
            await service.update_document(
                "doc-1", "alice", DocumentMetadataPatch(expected_version=1), _upload()
            )
        new_key = deps["storage"].put.await_args.args[0]
        deps["storage"].delete.assert_awaited_once_with(new_key)

    async def test_storage_failure_aborts_before_database(self, service, deps) -> None:
        deps["storage"].put.side_effect = OSError("disk full")
        with pytest.raises(UpstreamUnavailableException):
            await service.update_document("doc-1", "alice", DocumentMetadataPatch(), _upload())
        deps["revision_tracker"].record_material_update.assert_not_awaited()

    async def test_non_pdf_clears_rendition(self, service, deps) -> None:
        outcome = await service.update_document(
            "doc-1", "alice", DocumentMetadataPatch(), _upload("notes.txt", "text/plain")
        )
        assert outcome.pending_preview is None
        deps["document_repo"].set_rendition.assert_awaited_once_with("doc-1", None, None)

    async def test_activity_sink_failure_ignored(self, service, deps) -> None:
        deps["activity_sink"].record.side_effect = RuntimeError("sink down")
        outcome = await service.update_document(
            "doc-1", "alice", DocumentMetadataPatch(title="x")
        )
        assert outcome.document.version == 2


class TestDocumentRenditionService:
    @pytest.fixture
    def rendition(self):
        storage = AsyncMock()
        storage.get.return_value = b"%PDF-1.7"
        rasterizer = AsyncMock()
        rasterizer.rasterize.return_value = MagicMock(page_count=3, thumbnail_png=b"png")
        document_repo = AsyncMock()
        return DocumentRenditionService(document_repo, storage, rasterizer)

    async def test_renders_page_count_and_thumbnail(self, rendition) -> None:
        await rendition.render(PendingPreview(document_id="doc-1", storage_ref="k.pdf"))
        rendition.storage.get.assert_awaited_once_with("k.pdf")
        assert rendition.storage.put.await_args.args[0] == "k.pdf.thumb.png"
        rendition.document_repo.set_rendition.assert_awaited_once_with(
            "doc-1", 3, "k.pdf.thumb.png"
        )

    async def test_rasterizer_failure_is_not_fatal(self, rendition) -> None:
        rendition.rasterizer.rasterize.side_effect = RuntimeError("bad pdf")
        await rendition.render(PendingPreview(document_id="doc-1", storage_ref="k.pdf"))
        rendition.document_repo.set_rendition.assert_awaited_once_with("doc-1", None, None)

    async def test_thumbnail_removed_when_recording_fails(self, rendition) -> None:
        rendition.document_repo.set_rendition.side_effect = [RuntimeError("db"), None]
        await rendition.render(PendingPreview(document_id="doc-1", storage_ref="k.pdf"))
        rendition.storage.delete.assert_awaited_once_with("k.pdf.thumb.png")
        rendition.document_repo.set_rendition.assert_awaited_with("doc-1", None, None)

    async def test_without_rasterizer_marks_ready(self) -> None:
        document_repo = AsyncMock()
        await DocumentRenditionService(document_repo, AsyncMock(), None).render(
            PendingPreview(document_id="doc-1", storage_ref="k.pdf")
        )
        document_repo.set_rendition.assert_awaited_once_with("doc-1", None, None)

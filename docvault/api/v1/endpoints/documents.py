"""Document API: thin routes delegating to DocumentService, SearchOrchestrator and SharingService."""

from datetime import datetime
from typing import Annotated

from fastapi import (
    APIRouter,
    BackgroundTasks,
    Depends,
    File,
    Form,
    Query,
    Request,
    UploadFile,
)

from docvault.api.v1.dependencies import (
    PreviewRenderer,
    get_document_service,
    get_preview_renderer,
    get_requester_id,
    get_search_orchestrator,
    get_sharing_query_service,
    get_sharing_service,
)
from docvault.application.dtos.document import DocumentMetadataPatch, UploadedFile
from docvault.application.dtos.search import SearchFilters, SortSpec
from docvault.application.use_cases import (
    DocumentService,
    SearchOrchestrator,
    SharingService,
)
from docvault.core.limiter import limit_upload, limit_writes
from docvault.domain.enums import DocumentStatus, FileType, SortDirection, SortField
from docvault.schemas.document import (
    DocumentDetailResponse,
    DocumentDownloadResponse,
    DocumentItem,
    DocumentUpdateResponse,
    RevisionItem,
)
from docvault.schemas.search import SearchHitItem, SearchResponse
from docvault.schemas.share import LinkCreate, LinkItem, ShareCreate, ShareItem

router = APIRouter()


def _split_tags(raw: str | None) -> list[str] | None:
    if raw is None:
        return None
    return [t.strip() for t in raw.split(",") if t.strip()]


def _upload_size(file: UploadFile) -> int:
    if file.size is not None:
        return file.size
    file.file.seek(0, 2)
    size = file.file.tell()
    file.file.seek(0)
    return size


@router.get("", response_model=SearchResponse)
async def search_documents(
    requester_id: Annotated[str, Depends(get_requester_id)],
    search: Annotated[SearchOrchestrator, Depends(get_search_orchestrator)],
    q: str | None = Query(None, max_length=500),
    file_type: FileType | None = None,
    status: DocumentStatus | None = None,
    tags: Annotated[list[str] | None, Query()] = None,
    created_after: datetime | None = None,
    created_before: datetime | None = None,
    sort: SortField = SortField.RELEVANCE,
    direction: SortDirection = SortDirection.DESC,
    page: int = Query(1, ge=1),
    page_size: int | None = Query(None, ge=1),
):
    """Search (or list, without q) the caller's own documents."""
    filters = SearchFilters(
        file_type=file_type,
        status=status,
        tags=tuple(t.strip().lower() for t in tags or [] if t.strip()),
        created_after=created_after,
        created_before=created_before,
    )
    result = await search.search(
        requester_id,
        q,
        filters=filters,
        sort=SortSpec(sort, direction),
        page=page,
        page_size=page_size,
    )
    return SearchResponse(
        items=[
            SearchHitItem(document=DocumentItem.from_result(h.document), score=h.score)
            for h in result.hits
        ],
        total=result.total,
        page=result.page,
        page_size=result.limit,
        total_pages=result.total_pages,
        strategy=result.strategy,
        query=result.query,
    )


@router.get("/{document_id}", response_model=DocumentDetailResponse)
async def get_document(
    document_id: str,
    requester_id: Annotated[str, Depends(get_requester_id)],
    documents: Annotated[DocumentService, Depends(get_document_service)],
):
    """Document metadata for anyone holding view access (404 otherwise)."""
    authorized = await documents.get_document(document_id, requester_id)
    return DocumentDetailResponse(
        document=DocumentItem.from_result(authorized.document),
        access_level=authorized.access_level,
    )


@router.put("/{document_id}", response_model=DocumentUpdateResponse)
@limit_upload
async def update_document(
    request: Request,
    document_id: str,
    requester_id: Annotated[str, Depends(get_requester_id)],
    documents: Annotated[DocumentService, Depends(get_document_service)],
    render_preview: Annotated[PreviewRenderer, Depends(get_preview_renderer)],
    background_tasks: BackgroundTasks,
    title: str | None = Form(None),
    description: str | None = Form(None),
    tags: str | None = Form(None, description="Comma-separated; a lone comma clears all tags"),
    is_public: bool | None = Form(None),
    expected_version: int | None = Form(None, ge=1),
    file: UploadFile | None = File(None),
):
    """Update metadata and optionally replace the file (edit access).

    Send expected_version to detect concurrent edits (409 when stale).
    A replaced PDF gets its page count and thumbnail after the response.
    """
    patch = DocumentMetadataPatch(
        title=title,
        description=description,
        tags=_split_tags(tags),
        is_public=is_public,
        expected_version=expected_version,
    )
    upload = None
    if file is not None and file.filename:
        upload = UploadedFile(
            filename=file.filename,
            content_type=file.content_type or "application/octet-stream",
            data=file.file,
            size=_upload_size(file),
        )
    outcome = await documents.update_document(document_id, requester_id, patch, upload)
    if outcome.pending_preview is not None:
        background_tasks.add_task(render_preview, outcome.pending_preview)
    return DocumentUpdateResponse(
        document=DocumentItem.from_result(outcome.document),
        revision=RevisionItem.model_validate(outcome.revision) if outcome.revision else None,
    )


@router.get("/{document_id}/revisions", response_model=list[RevisionItem])
async def list_revisions(
    document_id: str,
    requester_id: Annotated[str, Depends(get_requester_id)],
    documents: Annotated[DocumentService, Depends(get_document_service)],
):
    """Revision history, newest first (view access)."""
    revisions = await documents.list_revisions(document_id, requester_id)
    return [RevisionItem.model_validate(r) for r in revisions]


@router.get("/{document_id}/download", response_model=DocumentDownloadResponse)
async def download_document(
    document_id: str,
    requester_id: Annotated[str, Depends(get_requester_id)],
    documents: Annotated[DocumentService, Depends(get_document_service)],
):
    """Presigned download URL (download access)."""
    ticket = await documents.get_download(document_id, requester_id)
    return DocumentDownloadResponse(
        url=ticket.url,
        filename=ticket.filename,
        expires_in_seconds=ticket.expires_in_seconds,
    )


@router.post("/{document_id}/shares", response_model=ShareItem, status_code=201)
@limit_writes
async def share_document(
    request: Request,
    document_id: str,
    body: ShareCreate,
    requester_id: Annotated[str, Depends(get_requester_id)],
    sharing: Annotated[SharingService, Depends(get_sharing_service)],
):
    """Grant a level to another identity; re-sharing refreshes the active grant."""
    grant = await sharing.share_with_user(
        document_id,
        requester_id,
        body.recipient_id,
        body.access_level,
        expires_in_days=body.expires_in_days,
        message=body.message,
    )
    return ShareItem.model_validate(grant)


@router.get("/{document_id}/shares", response_model=list[ShareItem])
async def list_document_shares(
    document_id: str,
    requester_id: Annotated[str, Depends(get_requester_id)],
    sharing: Annotated[SharingService, Depends(get_sharing_query_service)],
):
    """Active grants on an owned document."""
    grants = await sharing.list_document_shares(document_id, requester_id)
    return [ShareItem.model_validate(g) for g in grants]


@router.post("/{document_id}/links", response_model=LinkItem, status_code=201)
@limit_writes
async def create_link(
    request: Request,
    document_id: str,
    body: LinkCreate,
    requester_id: Annotated[str, Depends(get_requester_id)],
    sharing: Annotated[SharingService, Depends(get_sharing_service)],
):
    """Create an anonymous link (view or download) on an owned document."""
    link = await sharing.create_link(
        document_id,
        requester_id,
        access_level=body.access_level,
        expires_in_days=body.expires_in_days,
        max_uses=body.max_uses,
    )
    return LinkItem.model_validate(link)


@router.get("/{document_id}/links", response_model=list[LinkItem])
async def list_links(
    document_id: str,
    requester_id: Annotated[str, Depends(get_requester_id)],
    sharing: Annotated[SharingService, Depends(get_sharing_query_service)],
):
    """Usable links on an owned document."""
    links = await sharing.list_links(document_id, requester_id)
    return [LinkItem.model_validate(link) for link in links]

"""Targeted share API: recipient and owner views of grants."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request, Response

from docvault.api.v1.dependencies import (
    get_requester_id,
    get_sharing_query_service,
    get_sharing_service,
)
from docvault.application.dtos.share import SharedDocumentItem
from docvault.application.use_cases import SharingService
from docvault.core.limiter import limit_writes
from docvault.schemas.share import SharedDocumentEntry, ShareItem, ShareLevelUpdate

router = APIRouter()


def _entry(item: SharedDocumentItem) -> SharedDocumentEntry:
    return SharedDocumentEntry(
        share=ShareItem.model_validate(item.grant),
        document_title=item.document_title,
        document_file_type=item.document_file_type,
    )


@router.get("/with-me", response_model=list[SharedDocumentEntry])
async def list_shared_with_me(
    requester_id: Annotated[str, Depends(get_requester_id)],
    sharing: Annotated[SharingService, Depends(get_sharing_query_service)],
):
    """Documents other identities shared with the caller (active grants only)."""
    return [_entry(i) for i in await sharing.list_shared_with_me(requester_id)]


@router.get("/by-me", response_model=list[SharedDocumentEntry])
async def list_shared_by_me(
    requester_id: Annotated[str, Depends(get_requester_id)],
    sharing: Annotated[SharingService, Depends(get_sharing_query_service)],
):
    """Active grants the caller created."""
    return [_entry(i) for i in await sharing.list_shared_by_me(requester_id)]


@router.patch("/{share_id}", response_model=ShareItem)
@limit_writes
async def update_share_level(
    request: Request,
    share_id: str,
    body: ShareLevelUpdate,
    requester_id: Annotated[str, Depends(get_requester_id)],
    sharing: Annotated[SharingService, Depends(get_sharing_service)],
):
    grant = await sharing.update_share_level(share_id, requester_id, body.access_level)
    return ShareItem.model_validate(grant)


@router.delete("/{share_id}", status_code=204)
@limit_writes
async def revoke_share(
    request: Request,
    share_id: str,
    requester_id: Annotated[str, Depends(get_requester_id)],
    sharing: Annotated[SharingService, Depends(get_sharing_service)],
) -> Response:
    """Revoke a grant; effective immediately for the recipient."""
    await sharing.revoke_share(share_id, requester_id)
    return Response(status_code=204)


@router.post("/{share_id}/accept", response_model=ShareItem)
@limit_writes
async def accept_share(
    request: Request,
    share_id: str,
    requester_id: Annotated[str, Depends(get_requester_id)],
    sharing: Annotated[SharingService, Depends(get_sharing_service)],
):
    """Recipient acknowledges a grant addressed to them."""
    grant = await sharing.accept_share(share_id, requester_id)
    return ShareItem.model_validate(grant)

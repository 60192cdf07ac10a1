"""Anonymous link API: owner revocation and public redemption."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request, Response

from docvault.api.v1.dependencies import get_requester_id, get_sharing_service
from docvault.application.use_cases import SharingService
from docvault.core.limiter import limit_link_redemption, limit_writes
from docvault.schemas.document import DocumentItem
from docvault.schemas.share import LinkAccessResponse

router = APIRouter()
public_router = APIRouter()


@router.delete("/{link_id}", status_code=204)
@limit_writes
async def revoke_link(
    request: Request,
    link_id: str,
    requester_id: Annotated[str, Depends(get_requester_id)],
    sharing: Annotated[SharingService, Depends(get_sharing_service)],
) -> Response:
    """Revoke a link; later redemptions answer 410."""
    await sharing.revoke_link(link_id, requester_id)
    return Response(status_code=204)


@public_router.get("/{token}", response_model=LinkAccessResponse)
@limit_link_redemption
async def open_link(
    request: Request,
    token: str,
    sharing: Annotated[SharingService, Depends(get_sharing_service)],
):
    """Redeem an anonymous link (no authentication). Each call consumes one use."""
    access = await sharing.open_link(token)
    return LinkAccessResponse(
        document=DocumentItem.from_result(access.document),
        access_level=access.access_level,
        download_url=access.download_url,
        expires_in_seconds=access.expires_in_seconds,
    )

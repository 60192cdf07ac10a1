"""Search and listing schemas."""

from pydantic import BaseModel

from docvault.schemas.document import DocumentItem


class SearchHitItem(BaseModel):
    document: DocumentItem
    score: float | None = None


class SearchResponse(BaseModel):
    """Search/listing page. strategy names the cascade member that answered."""

    items: list[SearchHitItem]
    total: int
    page: int
    page_size: int
    total_pages: int
    strategy: str
    query: str

"""API v1 router aggregation.

Includes all endpoint modules with consistent prefix and tags. All routes
use dependencies from docvault.api.v1.dependencies.
"""

from fastapi import APIRouter

from docvault.api.v1.endpoints import documents, health, links, shares

api_router = APIRouter()

api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(documents.router, prefix="/documents", tags=["documents"])
api_router.include_router(shares.router, prefix="/shares", tags=["shares"])
api_router.include_router(links.router, prefix="/links", tags=["links"])
api_router.include_router(links.public_router, prefix="/public/links", tags=["public"])

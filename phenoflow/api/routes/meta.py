"""Meta/system API routes."""

from typing import Any

from fastapi import APIRouter
from fastapi.responses import PlainTextResponse

from phenoflow import __version__
from phenoflow.config import get_settings
from phenoflow.persistence.factory import get_content_store

router = APIRouter(tags=["meta"])


@router.get("/", response_class=PlainTextResponse)
async def root() -> str:
    """Check if the server is running."""
    return "Server is running"


@router.get("/health")
async def health() -> dict[str, Any]:
    """Health check endpoint."""
    settings = get_settings()
    return {
        "status": "healthy",
        "version": __version__,
        "store": get_content_store().kind,
        "owner": settings.owner or None,
    }


@router.get("/rate")
async def rate() -> dict[str, Any]:
    """GitHub API quota for the configured token."""
    return await get_content_store().rate_limit()

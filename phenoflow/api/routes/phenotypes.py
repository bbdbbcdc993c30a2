"""Phenotype API routes.

Phenotypes are GitHub repositories. Deletion is gated on the claimed
author having made the repository's initial README commit.
"""

import logging
from typing import Any, Optional

from fastapi import APIRouter, Query, Response
from fastapi.responses import PlainTextResponse

from phenoflow.api.services import get_catalog, get_orchestrator, get_step_resolver
from phenoflow.config import get_settings
from phenoflow.persistence.factory import get_content_store
from phenoflow.phenotypes.schemas import (
    AuthorClaim,
    BulkDeleteRequest,
    ContentNode,
    DescriptionUpdate,
    PhenotypeCreateRequest,
    StepSummary,
)
from phenoflow.phenotypes.seed import load_static_phenotypes, seed_phenotypes

logger = logging.getLogger(__name__)

router = APIRouter(tags=["phenotypes"])


# ── Read ─────────────────────────────────────────────────


@router.get("/phenotypes")
async def list_phenotypes(
    author: Optional[str] = Query(None, description="Initial README commit author"),
    name: Optional[str] = Query(None, description="Substring of the phenotype name"),
) -> list[dict[str, Any]]:
    """List phenotypes, optionally filtered by author and/or name substring."""
    return await get_catalog().list_phenotypes(author=author, name=name)


@router.get("/phenotype/{name}")
async def get_phenotype(name: str) -> dict[str, Any]:
    """Get repository metadata of a single phenotype."""
    return await get_catalog().get(name)


@router.get("/phenotype/{name}/contents", response_model=list[ContentNode])
async def get_phenotype_contents(name: str) -> list[ContentNode]:
    """Every file in the phenotype repository, flattened."""
    return await get_catalog().contents(name)


@router.get("/phenotype/{name}/description", response_class=PlainTextResponse)
async def get_phenotype_description(name: str) -> str:
    """Description text from the phenotype's README."""
    return await get_catalog().description(name)


@router.get("/phenotype/{name}/steps", response_model=list[StepSummary])
async def list_phenotype_steps(name: str) -> list[StepSummary]:
    """Numbered steps of the phenotype's root workflow."""
    steps = await get_step_resolver().list_steps(name)
    return [StepSummary(number=s.number, target_path=s.target_path) for s in steps]


# ── Create ───────────────────────────────────────────────


@router.post("/initialise")
async def initialise_phenotypes() -> dict[str, Any]:
    """Create the static example phenotypes missing from the organisation.

    Intended for development and test environments.
    """
    phenotypes = load_static_phenotypes(get_settings().static_phenotypes_path)
    created = await seed_phenotypes(get_content_store(), get_orchestrator(), phenotypes)
    return {"created": created}


@router.post("/phenotype")
async def create_phenotype(request: PhenotypeCreateRequest) -> Response:
    """Create a phenotype with README, LICENSE and optional files."""
    await get_orchestrator().create(request)
    return Response(status_code=200)


# ── Update ───────────────────────────────────────────────


@router.put("/phenotype/{name}/description")
async def update_phenotype_description(name: str, body: DescriptionUpdate) -> Response:
    """Replace the description inside the phenotype's README."""
    await get_catalog().update_description(name, body.description)
    return Response(status_code=200)


# ── Delete ───────────────────────────────────────────────


@router.delete("/phenotypes/all")
async def delete_all_phenotypes() -> list[dict[str, Any]]:
    """Delete every repository in the organisation except the keep-list.

    USE WITH CAUTION.
    """
    keep = get_settings().keep_repositories
    return await get_orchestrator().delete_all(keep)


@router.delete("/phenotypes")
async def delete_phenotypes(body: BulkDeleteRequest) -> Response:
    """Delete the listed phenotypes (all when none listed) created by author."""
    await get_orchestrator().delete_many(body.author, body.repos)
    return Response(status_code=200)


@router.delete("/phenotype/{name}")
async def delete_phenotype(name: str, body: AuthorClaim) -> Response:
    """Delete a phenotype created by author."""
    await get_orchestrator().delete(name, body.author)
    return Response(status_code=200)

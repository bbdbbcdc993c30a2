"""Step API routes.

Steps are addressed by their 1-based number in the phenotype's root
workflow (<repo>.cwl); the repository comes from the request body.
"""

from typing import Any

from fastapi import APIRouter, Response
from fastapi.responses import PlainTextResponse

from phenoflow.api.services import get_step_resolver
from phenoflow.phenotypes.schemas import RepoRef, StepDescriptionUpdate

router = APIRouter(prefix="/step", tags=["steps"])


@router.get("/{step}")
async def get_step(step: int, body: RepoRef) -> dict[str, Any]:
    """Step file metadata and base64 content."""
    return await get_step_resolver().step_file(body.repo, step)


@router.get("/{step}/contents", response_class=PlainTextResponse)
async def get_step_contents(step: int, body: RepoRef) -> str:
    """Decoded step file."""
    return await get_step_resolver().step_contents(body.repo, step)


@router.get("/{step}/description", response_class=PlainTextResponse)
async def get_step_description(step: int, body: RepoRef) -> str:
    """The step file's doc text."""
    return await get_step_resolver().step_description(body.repo, step)


@router.get("/{step}/implementation")
async def get_step_implementations(step: int, body: RepoRef) -> list[dict[str, Any]]:
    """JavaScript and/or Python implementation files of the step."""
    return await get_step_resolver().implementations(body.repo, step)


@router.put("/{step}/description")
async def update_step_description(step: int, body: StepDescriptionUpdate) -> Response:
    """Replace the step file's doc text in place."""
    await get_step_resolver().update_step_description(body.repo, step, body.description)
    return Response(status_code=200)

"""File API routes.

File content crosses the API as base64, the same encoding the GitHub
contents API uses.
"""

from typing import Any, Union

from fastapi import APIRouter, Response
from fastapi.responses import JSONResponse, PlainTextResponse

from phenoflow.api.services import get_file_service
from phenoflow.phenotypes.schemas import FileRef, FileWrite

router = APIRouter(tags=["files"])


@router.get("/file")
async def get_file(body: FileRef) -> Union[dict[str, Any], list[dict[str, Any]]]:
    """Raw file (base64 content and sha) or directory listing."""
    return await get_file_service().get(body.repo, body.path)


@router.get("/file/contents")
async def get_file_contents(body: FileRef) -> Response:
    """Decoded text of a file; the listing for a directory."""
    contents = await get_file_service().contents(body.repo, body.path)
    if isinstance(contents, str):
        return PlainTextResponse(contents)
    return JSONResponse(contents)


@router.post("/file")
async def create_file(body: FileWrite) -> Response:
    await get_file_service().create(body.repo, body.path, body.content)
    return Response(status_code=200)


@router.post("/files")
async def create_files(body: list[FileWrite]) -> Response:
    """Create files across one or more phenotypes, in order."""
    await get_file_service().create_many(body)
    return Response(status_code=200)


@router.put("/file")
async def update_file(body: FileWrite) -> Response:
    """Overwrite a file; its current sha is fetched internally."""
    await get_file_service().update(body.repo, body.path, body.content)
    return Response(status_code=200)


@router.delete("/file")
async def delete_file(body: FileRef) -> Response:
    await get_file_service().delete(body.repo, body.path)
    return Response(status_code=200)


@router.delete("/files")
async def delete_files(body: list[FileRef]) -> Response:
    """Delete files across one or more phenotypes, in order."""
    await get_file_service().delete_many(body)
    return Response(status_code=200)

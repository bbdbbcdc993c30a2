"""File CRUD inside phenotype repositories.

Updates and deletes fetch the file's current sha right before writing.
If another writer lands in between, the store rejects the stale sha and
the ConflictError propagates; nothing is retried.
"""

import logging
from typing import Any, Union

from phenoflow.core.exceptions import MalformedDocumentError
from phenoflow.persistence.base import ContentStore
from phenoflow.phenotypes import documents
from phenoflow.phenotypes.schemas import FileRef, FileWrite

logger = logging.getLogger(__name__)


class FileService:
    """Single and bulk file operations against the content store."""

    def __init__(self, store: ContentStore):
        self.store = store

    async def get(self, repo: str, path: str) -> Union[dict[str, Any], list[dict[str, Any]]]:
        """Raw file (with base64 content) or directory listing."""
        return await self.store.get_contents(repo, path)

    async def contents(self, repo: str, path: str) -> Union[str, list[dict[str, Any]]]:
        """Decoded text for a file; the listing for a directory."""
        data = await self.get(repo, path)
        if isinstance(data, dict) and data.get("content") is not None:
            return documents.base64_to_text(data["content"])
        return data

    async def _current_sha(self, repo: str, path: str) -> str:
        data = await self.get(repo, path)
        if not isinstance(data, dict) or not data.get("sha"):
            raise MalformedDocumentError(f"{repo}/{path} is not a file")
        return data["sha"]

    async def create(self, repo: str, path: str, content: str) -> str:
        sha = await self.store.put_file(repo, path, content, f"Created {path}")
        logger.info(f"Created {repo}/{path} file")
        return sha

    async def create_many(self, items: list[FileWrite]) -> list[str]:
        """Create files in order; the first failure aborts the rest."""
        created = []
        for item in items:
            await self.create(item.repo, item.path, item.content)
            created.append(f"{item.repo}/{item.path}")
        return created

    async def update(self, repo: str, path: str, content: str) -> str:
        sha = await self._current_sha(repo, path)
        new_sha = await self.store.put_file(repo, path, content, f"Updated {path}", sha=sha)
        logger.info(f"Updated {repo}/{path} file")
        return new_sha

    async def delete(self, repo: str, path: str) -> None:
        sha = await self._current_sha(repo, path)
        await self.store.delete_file(repo, path, sha, f"Deleted {path}")
        logger.info(f"Deleted {repo}/{path} file")

    async def delete_many(self, items: list[FileRef]) -> list[str]:
        """Delete files in order; the first failure aborts the rest."""
        deleted = []
        for item in items:
            await self.delete(item.repo, item.path)
            deleted.append(f"{item.repo}/{item.path}")
        return deleted

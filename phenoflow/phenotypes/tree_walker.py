"""Flatten a phenotype repository into a list of files.

GitHub's contents API lists one directory at a time. The walker keeps a
FIFO frontier of directories still to list and a set of visited paths,
so every directory at every level is visited exactly once (including
sibling directories) and symlink loops cannot recurse forever.
"""

import logging
from collections import deque
from typing import Any, Optional, Union

from phenoflow.core.exceptions import MalformedDocumentError
from phenoflow.persistence.base import ContentStore
from phenoflow.phenotypes.schemas import ContentNode

logger = logging.getLogger(__name__)


def _as_listing(data: Union[dict[str, Any], list[dict[str, Any]]], path: str) -> list[dict[str, Any]]:
    if isinstance(data, list):
        return data
    # A directory path that resolved to a single file (or a symlink target)
    if isinstance(data, dict) and data.get("type") in ("file", "symlink"):
        return [data]
    raise MalformedDocumentError(f"Unexpected listing for {path!r}")


class ContentTreeWalker:
    """Recursively enumerates every file under a repository root."""

    def __init__(self, store: ContentStore):
        self.store = store

    async def walk(
        self,
        repo: str,
        root_listing: Optional[list[dict[str, Any]]] = None,
    ) -> list[ContentNode]:
        """Return every file in the repository, each path exactly once.

        Args:
            repo: Repository name
            root_listing: Already-fetched root listing (fetched if omitted)

        Returns:
            Files only; directories are traversed but not returned.
            Order: root files first, then breadth-first by directory.

        Raises:
            Any store error; no partial listing is returned.
        """
        if root_listing is None:
            root_listing = _as_listing(await self.store.get_contents(repo, ""), "")

        files: dict[str, ContentNode] = {}
        visited: set[str] = {""}
        frontier: deque[ContentNode] = deque()

        def absorb(listing: list[dict[str, Any]]) -> None:
            for item in listing:
                node = ContentNode.from_api(item)
                if node.is_directory:
                    if node.path not in visited:
                        visited.add(node.path)
                        frontier.append(node)
                elif node.path not in files:
                    files[node.path] = node

        absorb(root_listing)
        while frontier:
            directory = frontier.popleft()
            logger.debug(f"Listing {repo}/{directory.path}")
            listing = await self.store.get_contents(repo, directory.path)
            absorb(_as_listing(listing, directory.path))

        logger.info(f"Walked {repo}: {len(files)} files in {len(visited) - 1} directories")
        return list(files.values())

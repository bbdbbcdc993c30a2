"""Read-side phenotype queries and README description edits."""

import logging
from typing import Any, Optional

from phenoflow.core.exceptions import NotFoundError
from phenoflow.persistence.base import ContentStore
from phenoflow.phenotypes import documents
from phenoflow.phenotypes.authorship import AuthorGate
from phenoflow.phenotypes.schemas import ContentNode
from phenoflow.phenotypes.tree_walker import ContentTreeWalker

logger = logging.getLogger(__name__)


class PhenotypeCatalog:
    """Lists, fetches and describes phenotypes."""

    def __init__(
        self,
        store: ContentStore,
        gate: Optional[AuthorGate] = None,
        walker: Optional[ContentTreeWalker] = None,
    ):
        self.store = store
        self.gate = gate or AuthorGate(store)
        self.walker = walker or ContentTreeWalker(store)

    async def list_phenotypes(
        self,
        author: Optional[str] = None,
        name: Optional[str] = None,
    ) -> list[dict[str, Any]]:
        """List phenotypes, optionally filtered by name substring and author.

        Raises:
            NotFoundError: If a filter was given and nothing matched
        """
        phenotypes = await self.store.list_repositories()
        if author is None and name is None:
            return phenotypes

        if name is not None:
            phenotypes = [p for p in phenotypes if name in p["name"]]
        if author is not None:
            phenotypes = [p for p in phenotypes if await self.gate.is_author(p["name"], author)]

        if not phenotypes:
            raise NotFoundError(
                "No phenotypes match the query",
                details={"author": author, "name": name},
            )
        return phenotypes

    async def get(self, name: str) -> dict[str, Any]:
        return await self.store.get_repository(name)

    async def contents(self, name: str) -> list[ContentNode]:
        return await self.walker.walk(name)

    async def description(self, name: str) -> str:
        readme = await self.store.get_readme(name)
        return documents.extract_description(readme["content"])

    async def update_description(self, name: str, description: str) -> str:
        """Replace the README description in place. Returns the new sha."""
        readme = await self.store.get_readme(name)
        content = documents.replace_description(readme["content"], description)
        sha = await self.store.put_file(
            name,
            readme.get("path", documents.README_PATH),
            content,
            "Updated description.",
            sha=readme["sha"],
        )
        logger.info(f"Updated {name} description")
        return sha

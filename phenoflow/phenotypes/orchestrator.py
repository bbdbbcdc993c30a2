"""Multi-step phenotype provisioning and bulk deletion.

Creating a phenotype is a chain of separate store calls:
1. Create the repository
2. Write README.md (commit "Initial README.md", which records the author)
3. Write LICENSE.md
4. Write each supplied file, in order

Each completed step registers a compensation. If a later step fails the
compensations run newest-first (deleting the repository undoes every file
write), then the original error is re-raised. Bulk operations process
items sequentially and stop at the first failing item; items already
processed stay applied.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Optional

from phenoflow.persistence.base import ContentStore
from phenoflow.phenotypes import documents
from phenoflow.phenotypes.authorship import AuthorGate
from phenoflow.phenotypes.files import FileService
from phenoflow.phenotypes.schemas import PhenotypeCreateRequest, PhenotypeCreateResult

logger = logging.getLogger(__name__)


@dataclass
class Compensation:
    description: str
    action: Callable[[], Awaitable[None]]


@dataclass
class CompensationLog:
    """Undo actions for the steps completed so far."""

    entries: list[Compensation] = field(default_factory=list)

    def record(self, description: str, action: Callable[[], Awaitable[None]]) -> None:
        self.entries.append(Compensation(description=description, action=action))

    async def unwind(self) -> list[str]:
        """Run compensations newest-first. Returns the ones that failed."""
        failed = []
        for compensation in reversed(self.entries):
            try:
                await compensation.action()
                logger.info(f"Compensated: {compensation.description}")
            except Exception as e:
                logger.error(f"Compensation failed ({compensation.description}): {e}")
                failed.append(compensation.description)
        self.entries.clear()
        return failed


class PhenotypeOrchestrator:
    """Creates and deletes whole phenotypes."""

    def __init__(
        self,
        store: ContentStore,
        creator: str,
        gate: Optional[AuthorGate] = None,
        files: Optional[FileService] = None,
    ):
        self.store = store
        self.creator = creator
        self.gate = gate or AuthorGate(store)
        self.files = files or FileService(store)

    # ── Create ───────────────────────────────────────────────

    async def create(self, request: PhenotypeCreateRequest) -> PhenotypeCreateResult:
        """Provision a phenotype repository with README, LICENSE and files."""
        name = request.name
        compensations = CompensationLog()

        await self.store.create_repository(
            name, f"{name} phenotype. Created by {self.creator}."
        )
        logger.info(f"Created {name} phenotype")
        compensations.record(
            f"delete repository {name}", lambda: self.store.delete_repository(name)
        )

        try:
            await self.store.put_file(
                name,
                documents.README_PATH,
                documents.text_to_base64(documents.render_readme(name, request.about)),
                documents.README_COMMIT_MESSAGE,
            )
            logger.info(f"Initialised {name}/{documents.README_PATH} file")

            await self.store.put_file(
                name,
                documents.LICENSE_PATH,
                documents.text_to_base64(documents.license_text()),
                documents.LICENSE_COMMIT_MESSAGE,
            )
            logger.info(f"Created {name}/{documents.LICENSE_PATH} file")

            created = []
            for phenotype_file in request.files:
                await self.files.create(name, phenotype_file.path, phenotype_file.content)
                created.append(phenotype_file.path)
        except Exception as e:
            logger.error(f"Creating phenotype {name} failed, rolling back: {e}")
            await compensations.unwind()
            raise

        return PhenotypeCreateResult(name=name, files_created=created)

    async def create_many(
        self, requests: list[PhenotypeCreateRequest]
    ) -> list[PhenotypeCreateResult]:
        """Create phenotypes in order; stop at the first failure."""
        results = []
        for request in requests:
            results.append(await self.create(request))
        return results

    # ── Delete ───────────────────────────────────────────────

    async def delete(self, name: str, author: str) -> None:
        """Delete a phenotype if author created it."""
        await self.gate.authorize(name, author)
        await self.store.delete_repository(name)
        logger.info(f"Deleted {name} phenotype")

    async def delete_many(
        self, author: str, names: Optional[list[str]] = None
    ) -> list[str]:
        """Delete the named phenotypes, or every phenotype when names is empty.

        Every target must be authored by author; the first target that is
        not (or that fails to delete) aborts the remaining ones.
        """
        if names:
            targets = [(await self.store.get_repository(n))["name"] for n in names]
        else:
            targets = [r["name"] for r in await self.store.list_repositories()]

        deleted = []
        for name in targets:
            await self.delete(name, author)
            deleted.append(name)
        return deleted

    async def delete_all(self, keep: list[str]) -> list[dict[str, Any]]:
        """Delete every organisation repository not listed in keep.

        Returns the repository listing taken before deletion.
        """
        repositories = await self.store.list_repositories()
        for repository in repositories:
            if repository["name"] in keep:
                continue
            await self.store.delete_repository(repository["name"])
            logger.info(f"Deleted {repository['name']} phenotype")
        return repositories

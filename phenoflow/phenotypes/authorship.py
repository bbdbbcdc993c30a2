"""Phenotype authorship from commit history.

The author of a phenotype is the author of the commit that initialised
its README. The same predicate filters listings (is_author) and gates
deletion (authorize). It compares a caller-supplied name against commit
metadata, so it identifies, it does not authenticate.
"""

import logging

from phenoflow.core.exceptions import AuthorizationError
from phenoflow.persistence.base import ContentStore
from phenoflow.phenotypes.documents import README_COMMIT_MESSAGE
from phenoflow.phenotypes.schemas import CommitRecord

logger = logging.getLogger(__name__)

INITIAL_COMMIT_MESSAGE = README_COMMIT_MESSAGE


class AuthorGate:
    """Checks claimed authors against a repository's initialising commit."""

    def __init__(self, store: ContentStore):
        self.store = store

    async def history(self, repo: str) -> list[CommitRecord]:
        commits = await self.store.list_commits(repo)
        return [CommitRecord.from_api(c) for c in commits]

    async def initial_authors(self, repo: str) -> list[str]:
        """Author names of every initialising commit (normally one)."""
        return [
            c.author_name
            for c in await self.history(repo)
            if c.message == INITIAL_COMMIT_MESSAGE
        ]

    async def is_author(self, repo: str, claimed_author: str) -> bool:
        """True iff claimed_author exactly matches an initialising commit's author."""
        if not claimed_author:
            return False
        for commit in await self.history(repo):
            if commit.message == INITIAL_COMMIT_MESSAGE and commit.author_name == claimed_author:
                return True
        return False

    async def authorize(self, repo: str, claimed_author: str) -> bool:
        """Return True or raise AuthorizationError."""
        if await self.is_author(repo, claimed_author):
            return True
        logger.warning(f"{claimed_author!r} is not the author of {repo}")
        raise AuthorizationError(
            f"{claimed_author!r} did not create phenotype {repo}",
            details={"repo": repo, "author": claimed_author},
        )

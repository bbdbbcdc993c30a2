"""Content store factory.

Resolves the process-wide ContentStore from settings: GitHub when both
AUTH_TOKEN and OWNER are set, otherwise an in-memory store whose contents
are lost on restart.
"""

import logging
from typing import Optional

from phenoflow.config import Settings, get_settings
from phenoflow.persistence.base import ContentStore
from phenoflow.persistence.github_client import GitHubContentStore
from phenoflow.persistence.memory_store import InMemoryContentStore

logger = logging.getLogger(__name__)


def build_content_store(settings: Settings) -> ContentStore:
    """Build the store selected by settings."""
    if settings.github_enabled:
        return GitHubContentStore(
            token=settings.auth_token,
            owner=settings.owner,
            committer=settings.committer,
            base_url=settings.github_api_url,
            timeout=settings.store_timeout,
        )

    if not settings.auth_token:
        logger.warning("AUTH_TOKEN not set — phenotypes will be kept in memory only")
    if not settings.owner:
        logger.warning("OWNER not set — phenotypes will be kept in memory only")
    return InMemoryContentStore(
        owner=settings.owner or "phenoflow",
        committer=settings.committer,
    )


# Singleton instance
_store: Optional[ContentStore] = None


def get_content_store() -> ContentStore:
    """Get or create the global ContentStore instance."""
    global _store
    if _store is None:
        _store = build_content_store(get_settings())
    return _store


def set_content_store(store: Optional[ContentStore]) -> None:
    """Install a specific store (tests, embedding); None forgets it."""
    global _store
    _store = store


async def close_content_store() -> None:
    """Close and forget the global store."""
    global _store
    if _store is not None:
        await _store.close()
        _store = None

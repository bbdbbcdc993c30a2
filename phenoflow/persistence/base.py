"""Content store protocol.

The phenotype service treats the remote version-controlled store as a
single collaborator. Payloads keep the GitHub REST JSON shapes (plain
dicts) so the HTTP layer can return repository and file metadata as-is.

Implementations must raise:
    NotFoundError          when a repository, path or readme does not exist
    ConflictError          when a write carries a stale or missing sha
    StoreUnavailableError  on transport, auth or unexpected server failures
"""

from typing import Any, Optional, Protocol, Union, runtime_checkable

JSON = dict[str, Any]


@runtime_checkable
class ContentStore(Protocol):
    """Protocol for phenotype repository storage backends."""

    @property
    def kind(self) -> str: ...

    async def create_repository(
        self, name: str, description: str, private: bool = False
    ) -> JSON: ...

    async def delete_repository(self, name: str) -> None: ...

    async def get_repository(self, name: str) -> JSON: ...

    async def list_repositories(self) -> list[JSON]: ...

    async def get_contents(self, repo: str, path: str = "") -> Union[JSON, list[JSON]]:
        """Return a file dict (with base64 content and sha) or a directory listing."""
        ...

    async def get_readme(self, repo: str) -> JSON: ...

    async def put_file(
        self,
        repo: str,
        path: str,
        content: str,
        message: str,
        sha: Optional[str] = None,
    ) -> str:
        """Create or update a file from base64 content. Returns the new sha."""
        ...

    async def delete_file(self, repo: str, path: str, sha: str, message: str) -> None: ...

    async def list_commits(self, repo: str) -> list[JSON]:
        """Return commits newest first, GitHub commit JSON shape."""
        ...

    async def rate_limit(self) -> JSON: ...

    async def close(self) -> None: ...

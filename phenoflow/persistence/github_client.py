"""GitHub content store: phenotype repositories in a GitHub organisation.

Every phenotype is a repository in the configured organisation (OWNER).
Files are read and written one at a time through the Contents API, each
write carrying the committer identity and, for updates and deletes, the
file's current sha. GitHub rejects stale shas, which is the only
concurrency control in the system.

Requires environment variables:
    AUTH_TOKEN: Token with repo + delete_repo scopes on the organisation
    OWNER: Organisation login (e.g., phenoflow)
    USER_NAME / USER_EMAIL: Committer identity
"""

import logging
from typing import Any, Optional, Union
from urllib.parse import quote

import httpx

from phenoflow.core.exceptions import (
    ConflictError,
    NotFoundError,
    StoreUnavailableError,
)

logger = logging.getLogger(__name__)

API_VERSION = "2022-11-28"
PAGE_SIZE = 100


class GitHubContentStore:
    """ContentStore backed by the GitHub REST API.

    Every call has an explicit timeout; a stalled request fails with
    StoreUnavailableError instead of hanging the whole HTTP request.
    """

    kind = "github"

    def __init__(
        self,
        token: str,
        owner: str,
        committer: dict[str, str],
        base_url: str = "https://api.github.com",
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.owner = owner
        self.committer = committer
        self._client = httpx.AsyncClient(
            base_url=base_url,
            headers={
                "Authorization": f"Bearer {token}",
                "Accept": "application/vnd.github+json",
                "X-GitHub-Api-Version": API_VERSION,
            },
            timeout=timeout,
            transport=transport,
        )
        logger.info(f"GitHub content store enabled for organisation {owner}")

    # ── Transport ────────────────────────────────────────────

    async def _request(
        self,
        method: str,
        url: str,
        *,
        context: str,
        conflict_statuses: tuple[int, ...] = (409,),
        **kwargs: Any,
    ) -> httpx.Response:
        try:
            response = await self._client.request(method, url, **kwargs)
            response.raise_for_status()
            return response
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            error_body = e.response.text[:500]
            details = {"status_code": status, "url": url, "body": error_body}
            if status == 404:
                raise NotFoundError(f"{context}: not found", details=details) from e
            if status in conflict_statuses:
                raise ConflictError(
                    f"{context}: version conflict ({status})", details=details
                ) from e
            logger.error(f"GitHub API error during {context}: {status} — {error_body}")
            raise StoreUnavailableError(
                f"{context}: GitHub API error {status}", details=details
            ) from e
        except httpx.HTTPError as e:
            logger.error(f"GitHub HTTP error during {context}: {e}")
            raise StoreUnavailableError(f"{context}: {e}", details={"url": url}) from e

    async def _paginate(self, url: str, *, context: str) -> list[dict[str, Any]]:
        """Follow Link: rel="next" headers and concatenate all pages."""
        items: list[dict[str, Any]] = []
        next_url: Optional[str] = url
        params: Optional[dict[str, Any]] = {"per_page": PAGE_SIZE}
        while next_url:
            response = await self._request("GET", next_url, context=context, params=params)
            items.extend(response.json())
            next_url = response.links.get("next", {}).get("url")
            # The next link already carries the query string
            params = None
        return items

    @staticmethod
    def _path(path: str) -> str:
        return quote(path.strip("/"), safe="/")

    # ── Repositories ─────────────────────────────────────────

    async def create_repository(
        self, name: str, description: str, private: bool = False
    ) -> dict[str, Any]:
        response = await self._request(
            "POST",
            f"/orgs/{self.owner}/repos",
            context=f"create repository {name}",
            conflict_statuses=(409, 422),
            json={
                "name": name,
                "description": description,
                "private": private,
                "has_issues": True,
                "has_projects": True,
                "has_wiki": True,
            },
        )
        return response.json()

    async def delete_repository(self, name: str) -> None:
        await self._request(
            "DELETE",
            f"/repos/{self.owner}/{name}",
            context=f"delete repository {name}",
        )

    async def get_repository(self, name: str) -> dict[str, Any]:
        response = await self._request(
            "GET",
            f"/repos/{self.owner}/{name}",
            context=f"get repository {name}",
        )
        return response.json()

    async def list_repositories(self) -> list[dict[str, Any]]:
        return await self._paginate(
            f"/orgs/{self.owner}/repos",
            context=f"list repositories of {self.owner}",
        )

    # ── Contents ─────────────────────────────────────────────

    async def get_contents(
        self, repo: str, path: str = ""
    ) -> Union[dict[str, Any], list[dict[str, Any]]]:
        url = f"/repos/{self.owner}/{repo}/contents"
        if path.strip("/"):
            url = f"{url}/{self._path(path)}"
        response = await self._request(
            "GET", url, context=f"get {repo}/{path or '<root>'}"
        )
        return response.json()

    async def get_readme(self, repo: str) -> dict[str, Any]:
        response = await self._request(
            "GET",
            f"/repos/{self.owner}/{repo}/readme",
            context=f"get {repo} readme",
        )
        return response.json()

    async def put_file(
        self,
        repo: str,
        path: str,
        content: str,
        message: str,
        sha: Optional[str] = None,
    ) -> str:
        body: dict[str, Any] = {
            "message": message,
            "committer": self.committer,
            "content": content,
        }
        if sha is not None:
            body["sha"] = sha
        response = await self._request(
            "PUT",
            f"/repos/{self.owner}/{repo}/contents/{self._path(path)}",
            context=f"put {repo}/{path}",
            # 422 is returned when a sha is missing for an existing file
            conflict_statuses=(409, 422),
            json=body,
        )
        return response.json()["content"]["sha"]

    async def delete_file(self, repo: str, path: str, sha: str, message: str) -> None:
        await self._request(
            "DELETE",
            f"/repos/{self.owner}/{repo}/contents/{self._path(path)}",
            context=f"delete {repo}/{path}",
            conflict_statuses=(409, 422),
            json={"message": message, "committer": self.committer, "sha": sha},
        )

    # ── History ──────────────────────────────────────────────

    async def list_commits(self, repo: str) -> list[dict[str, Any]]:
        try:
            return await self._paginate(
                f"/repos/{self.owner}/{repo}/commits",
                context=f"list commits of {repo}",
            )
        except ConflictError as e:
            # GitHub answers 409 for an empty repository
            logger.warning(f"Repository {repo} has no commits: {e}")
            return []

    async def rate_limit(self) -> dict[str, Any]:
        response = await self._request("GET", "/rate_limit", context="rate limit")
        return response.json()

    async def close(self) -> None:
        """Close the HTTP client."""
        await self._client.aclose()



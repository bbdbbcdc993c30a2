"""In-memory content store.

Used for local development (no AUTH_TOKEN/OWNER configured) and by the
test suite. Mirrors the GitHub semantics the service relies on:
- Git blob shas as version tokens; stale or missing shas are rejected
- A commit is recorded for every file write/delete (newest first)
- Directories are never stored, only inferred from file paths
"""

import base64
import hashlib
import logging
import uuid
from dataclasses import dataclass, field
from typing import Any, Optional, Union

from phenoflow.core.exceptions import ConflictError, NotFoundError

logger = logging.getLogger(__name__)


def blob_sha(content: bytes) -> str:
    """Git blob sha1 of the content, as GitHub reports it."""
    header = f"blob {len(content)}\0".encode("ascii")
    return hashlib.sha1(header + content).hexdigest()


@dataclass
class _Repository:
    metadata: dict[str, Any]
    files: dict[str, bytes] = field(default_factory=dict)
    commits: list[dict[str, Any]] = field(default_factory=list)


class InMemoryContentStore:
    """ContentStore keeping repositories in process memory."""

    kind = "memory"

    def __init__(
        self,
        owner: str = "phenoflow",
        committer: Optional[dict[str, str]] = None,
    ):
        self.owner = owner
        self.committer = committer or {"name": "phenoflow", "email": "phenoflow@localhost"}
        self._repos: dict[str, _Repository] = {}

    def _repo(self, name: str) -> _Repository:
        repo = self._repos.get(name)
        if repo is None:
            raise NotFoundError(f"Repository not found: {self.owner}/{name}")
        return repo

    def _record_commit(self, repo: _Repository, message: str) -> None:
        identity = dict(self.committer)
        repo.commits.insert(
            0,
            {
                "sha": uuid.uuid4().hex + uuid.uuid4().hex[:8],
                "commit": {
                    "message": message,
                    "author": identity,
                    "committer": identity,
                },
            },
        )

    def _file_entry(self, repo_name: str, path: str, content: bytes) -> dict[str, Any]:
        return {
            "type": "file",
            "name": path.rsplit("/", 1)[-1],
            "path": path,
            "sha": blob_sha(content),
            "size": len(content),
            "encoding": "base64",
            "content": base64.b64encode(content).decode("ascii"),
            "html_url": f"https://github.com/{self.owner}/{repo_name}/blob/main/{path}",
        }

    # ── Repositories ─────────────────────────────────────────

    async def create_repository(
        self, name: str, description: str, private: bool = False
    ) -> dict[str, Any]:
        if name in self._repos:
            raise ConflictError(f"Repository already exists: {self.owner}/{name}")
        metadata = {
            "name": name,
            "full_name": f"{self.owner}/{name}",
            "description": description,
            "private": private,
            "owner": {"login": self.owner},
            "html_url": f"https://github.com/{self.owner}/{name}",
            "default_branch": "main",
        }
        self._repos[name] = _Repository(metadata=metadata)
        return dict(metadata)

    async def delete_repository(self, name: str) -> None:
        self._repo(name)
        del self._repos[name]

    async def get_repository(self, name: str) -> dict[str, Any]:
        return dict(self._repo(name).metadata)

    async def list_repositories(self) -> list[dict[str, Any]]:
        return [dict(r.metadata) for r in self._repos.values()]

    # ── Contents ─────────────────────────────────────────────

    async def get_contents(
        self, repo: str, path: str = ""
    ) -> Union[dict[str, Any], list[dict[str, Any]]]:
        stored = self._repo(repo)
        path = path.strip("/")

        if path in stored.files:
            return self._file_entry(repo, path, stored.files[path])

        prefix = f"{path}/" if path else ""
        entries: dict[str, dict[str, Any]] = {}
        for file_path, content in stored.files.items():
            if not file_path.startswith(prefix):
                continue
            child, _, rest = file_path[len(prefix):].partition("/")
            child_path = f"{prefix}{child}"
            if rest:
                entries.setdefault(
                    child_path,
                    {
                        "type": "dir",
                        "name": child,
                        "path": child_path,
                        "sha": hashlib.sha1(child_path.encode("utf-8")).hexdigest(),
                        "size": 0,
                    },
                )
            else:
                entry = self._file_entry(repo, file_path, content)
                # Directory listings do not carry file content
                entry.pop("content")
                entry.pop("encoding")
                entries[child_path] = entry

        if path and not entries:
            raise NotFoundError(f"Path not found: {self.owner}/{repo}/{path}")
        return sorted(entries.values(), key=lambda e: e["name"])

    async def get_readme(self, repo: str) -> dict[str, Any]:
        stored = self._repo(repo)
        for file_path, content in stored.files.items():
            if "/" not in file_path and file_path.lower().startswith("readme"):
                return self._file_entry(repo, file_path, content)
        raise NotFoundError(f"No README in {self.owner}/{repo}")

    async def put_file(
        self,
        repo: str,
        path: str,
        content: str,
        message: str,
        sha: Optional[str] = None,
    ) -> str:
        stored = self._repo(repo)
        path = path.strip("/")
        current = stored.files.get(path)

        if current is not None and sha is None:
            raise ConflictError(f"{repo}/{path} exists; sha required to update it")
        if current is not None and sha != blob_sha(current):
            raise ConflictError(
                f"{repo}/{path} does not match sha {sha}",
                details={"expected": blob_sha(current), "received": sha},
            )
        if current is None and sha is not None:
            raise ConflictError(f"{repo}/{path} does not exist; sha {sha} is stale")

        data = base64.b64decode(content)
        stored.files[path] = data
        self._record_commit(stored, message)
        return blob_sha(data)

    async def delete_file(self, repo: str, path: str, sha: str, message: str) -> None:
        stored = self._repo(repo)
        path = path.strip("/")
        current = stored.files.get(path)
        if current is None:
            raise NotFoundError(f"File not found: {self.owner}/{repo}/{path}")
        if sha != blob_sha(current):
            raise ConflictError(f"{repo}/{path} does not match sha {sha}")
        del stored.files[path]
        self._record_commit(stored, message)

    # ── History ──────────────────────────────────────────────

    async def list_commits(self, repo: str) -> list[dict[str, Any]]:
        return list(self._repo(repo).commits)

    async def rate_limit(self) -> dict[str, Any]:
        core = {"limit": 0, "remaining": 0, "reset": 0, "used": 0}
        return {"resources": {"core": core}, "rate": core}

    async def close(self) -> None:
        return None

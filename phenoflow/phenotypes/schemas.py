"""Phenotype schemas.

ContentNode and CommitRecord normalise the store's GitHub-shaped JSON;
the request models describe the HTTP bodies accepted by the API.
"""

from dataclasses import dataclass
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class ContentNode(BaseModel):
    """A file or directory inside a phenotype repository."""

    model_config = ConfigDict(extra="allow")

    name: str = Field(..., description="Base name of the file or directory")
    path: str = Field(..., description="Path relative to the repository root")
    type: Optional[str] = Field(
        default=None, description="'file' or 'dir' when the store reports it"
    )
    sha: Optional[str] = Field(default=None, description="Version token")
    size: int = Field(default=0)
    content: Optional[str] = Field(default=None, description="Base64 file content")
    encoding: Optional[str] = Field(default=None)

    @property
    def is_directory(self) -> bool:
        """Directory if the store says so; otherwise a name without a '.'."""
        if self.type is not None:
            return self.type == "dir"
        return "." not in self.name

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "ContentNode":
        return cls.model_validate(data)


class CommitRecord(BaseModel):
    """A commit in a phenotype repository's history."""

    sha: str = ""
    message: str
    author_name: str = ""
    author_email: str = ""

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "CommitRecord":
        commit = data.get("commit", {})
        author = commit.get("author") or {}
        return cls(
            sha=data.get("sha", ""),
            message=commit.get("message", ""),
            author_name=author.get("name") or "",
            author_email=author.get("email") or "",
        )


@dataclass(frozen=True)
class StepReference:
    """A workflow step and the .cwl file it delegates to."""

    number: int
    target_path: str


# ── Request bodies ───────────────────────────────────────


class PhenotypeFile(BaseModel):
    """A file to commit into a new phenotype."""

    path: str
    content: str = Field(..., description="Base64 file content")


class PhenotypeCreateRequest(BaseModel):
    name: str = Field(..., description="Repository name", examples=["covid19"])
    about: str = Field(
        ...,
        description="'<Phenotype ID> - <Phenotype description>'",
        examples=["COVID19 - Confirmed COVID-19 infection"],
    )
    files: list[PhenotypeFile] = Field(default_factory=list)


class PhenotypeCreateResult(BaseModel):
    name: str
    files_created: list[str] = Field(default_factory=list)


class DescriptionUpdate(BaseModel):
    description: str


class RepoRef(BaseModel):
    repo: str


class StepDescriptionUpdate(BaseModel):
    repo: str
    description: str


class FileRef(BaseModel):
    repo: str
    path: str


class FileWrite(BaseModel):
    repo: str
    path: str
    content: str = Field(..., description="Base64 file content")


class AuthorClaim(BaseModel):
    author: str = ""


class BulkDeleteRequest(BaseModel):
    author: str = ""
    repos: Optional[list[str]] = None


class StepSummary(BaseModel):
    number: int
    target_path: str

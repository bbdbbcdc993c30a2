"""Step resolution for phenotype workflows.

A phenotype's root workflow is "<repo>.cwl". Its steps are keyed by
quoted 1-based numbers and each delegates to a step file:

    steps:
      '1':
        run: read-potential-cases-disc.cwl
        ...

Resolution for one request runs in sequence:
    step number → target path (marker lookup in the root workflow)
                → step file (store read)
                → description (marker lookup) or implementations
                  (tree walk + naming convention)
"""

import logging
from typing import Any, Optional

import yaml

from phenoflow.core.exceptions import MalformedDocumentError, RegionNotFound
from phenoflow.persistence.base import ContentStore
from phenoflow.phenotypes import documents
from phenoflow.phenotypes.schemas import StepReference
from phenoflow.phenotypes.tree_walker import ContentTreeWalker
from phenoflow.text import hexcodec, locator

logger = logging.getLogger(__name__)

IMPLEMENTATION_EXTENSIONS = (".js", ".py")

# Phenotypes built with the default connector name their first step file
# "-disc" while the implementations keep the plain name.
IMPLEMENTATION_ALIASES = {
    "read-potential-cases-disc.cwl": "read-potential-cases.cwl",
}

# Workflow files written on Windows use CRLF line endings
_LINE_ENDINGS = ("\n", "\r\n")


def step_marker(number: int, newline: str = "\n") -> str:
    """Start marker preceding the run target of a step."""
    return f"'{number}':{newline}    run: "


def implementation_base(target_path: str) -> str:
    """Step base name used to match implementation files."""
    name = target_path.rsplit("/", 1)[-1]
    name = IMPLEMENTATION_ALIASES.get(name, name)
    if name.endswith(documents.CWL_EXTENSION):
        name = name[: -len(documents.CWL_EXTENSION)]
    return name


def locate_step_target(workflow_content: str, number: int) -> str:
    """Find the .cwl path a step delegates to inside base64 workflow content.

    Raises:
        RegionNotFound: If the step has no marker or the target is not a path
    """
    if number < 1:
        raise RegionNotFound(f"Step numbers start at 1, got {number}")

    buffer = hexcodec.from_base64(workflow_content)
    for newline in _LINE_ENDINGS:
        try:
            target = locator.extract(
                buffer,
                step_marker(number, newline),
                documents.CWL_EXTENSION,
                include_end_marker=True,
            )
        except RegionNotFound:
            continue
        target = target.strip("'\"")
        if target == documents.CWL_EXTENSION or any(c.isspace() for c in target):
            raise RegionNotFound(
                f"Step {number} does not run a .cwl file",
                details={"target": target},
            )
        return target

    raise RegionNotFound(f"Step {number} not found in workflow")


class StepResolver:
    """Resolves phenotype steps to files, descriptions and implementations."""

    def __init__(self, store: ContentStore, walker: Optional[ContentTreeWalker] = None):
        self.store = store
        self.walker = walker or ContentTreeWalker(store)

    @staticmethod
    def workflow_path(repo: str) -> str:
        return f"{repo}{documents.CWL_EXTENSION}"

    async def _file(self, repo: str, path: str) -> dict[str, Any]:
        data = await self.store.get_contents(repo, path)
        if not isinstance(data, dict) or "content" not in data:
            raise MalformedDocumentError(f"{repo}/{path} is not a file")
        return data

    async def step_reference(self, repo: str, number: int) -> StepReference:
        workflow = await self._file(repo, self.workflow_path(repo))
        target = locate_step_target(workflow["content"], number)
        logger.debug(f"{repo} step {number} runs {target}")
        return StepReference(number=number, target_path=target)

    async def step_file(self, repo: str, number: int) -> dict[str, Any]:
        """Step file metadata, base64 content and sha."""
        reference = await self.step_reference(repo, number)
        return await self._file(repo, reference.target_path)

    async def step_contents(self, repo: str, number: int) -> str:
        step = await self.step_file(repo, number)
        return documents.base64_to_text(step["content"])

    async def step_description(self, repo: str, number: int) -> str:
        step = await self.step_file(repo, number)
        return documents.extract_step_description(step["content"])

    async def update_step_description(
        self, repo: str, number: int, description: str
    ) -> str:
        """Rewrite the step's doc field in place. Returns the new sha."""
        reference = await self.step_reference(repo, number)
        step = await self._file(repo, reference.target_path)
        content = documents.replace_step_description(step["content"], description)
        sha = await self.store.put_file(
            repo,
            reference.target_path,
            content,
            f"Updated step {number} description.",
            sha=step["sha"],
        )
        logger.info(f"Updated {repo}/{reference.target_path} description")
        return sha

    async def implementations(self, repo: str, number: int) -> list[dict[str, Any]]:
        """JavaScript and/or Python implementation files of a step.

        Languages without a matching file are skipped.
        """
        files = await self.walker.walk(repo)
        by_name: dict[str, str] = {}
        for node in files:
            by_name.setdefault(node.name, node.path)

        reference = await self.step_reference(repo, number)
        base = implementation_base(reference.target_path)

        implementations = []
        for extension in IMPLEMENTATION_EXTENSIONS:
            path = by_name.get(f"{base}{extension}")
            if path is None:
                continue
            implementations.append(await self._file(repo, path))
        return implementations

    async def list_steps(self, repo: str) -> list[StepReference]:
        """All numbered steps of the root workflow, in order."""
        workflow = await self._file(repo, self.workflow_path(repo))
        try:
            document = yaml.safe_load(documents.base64_to_text(workflow["content"]))
        except yaml.YAMLError as e:
            raise MalformedDocumentError(f"{repo} workflow is not valid YAML: {e}") from e

        steps = document.get("steps") if isinstance(document, dict) else None
        if isinstance(steps, list):
            steps = {str(s.get("id", "")): s for s in steps if isinstance(s, dict)}
        if not isinstance(steps, dict):
            raise MalformedDocumentError(f"{repo} workflow has no steps")

        references = []
        for key, step in steps.items():
            try:
                number = int(str(key).lstrip("#"))
            except ValueError:
                continue
            run = step.get("run") if isinstance(step, dict) else None
            if isinstance(run, str):
                references.append(StepReference(number=number, target_path=run))
        return sorted(references, key=lambda r: r.number)

"""Static example phenotypes for development and test environments.

POST /initialise reads a JSON array of phenotypes (the same shape as the
POST /phenotype body) and creates every one whose name is not already in
the organisation:

    [{"name": "covid19", "about": "COVID19 - ...", "files": [{"path": ..., "content": <base64>}]}]
"""

import json
import logging
from pathlib import Path
from typing import Union

from pydantic import TypeAdapter

from phenoflow.persistence.base import ContentStore
from phenoflow.phenotypes.orchestrator import PhenotypeOrchestrator
from phenoflow.phenotypes.schemas import PhenotypeCreateRequest

logger = logging.getLogger(__name__)

_phenotype_list = TypeAdapter(list[PhenotypeCreateRequest])


def load_static_phenotypes(path: Union[str, Path]) -> list[PhenotypeCreateRequest]:
    """Load phenotype definitions from a JSON file. Missing file → empty list."""
    source = Path(path) if path else None
    if source is None or not source.exists():
        logger.warning(f"Static phenotypes file not found: {path!r}")
        return []
    with open(source, "r", encoding="utf-8") as f:
        data = json.load(f)
    return _phenotype_list.validate_python(data)


async def seed_phenotypes(
    store: ContentStore,
    orchestrator: PhenotypeOrchestrator,
    phenotypes: list[PhenotypeCreateRequest],
) -> list[str]:
    """Create the phenotypes missing from the store. Returns created names."""
    existing = {r["name"].lower() for r in await store.list_repositories()}
    missing = [p for p in phenotypes if p.name.lower() not in existing]

    results = await orchestrator.create_many(missing)
    logger.info(f"Seeded {len(results)} of {len(phenotypes)} static phenotypes")
    return [r.name for r in results]

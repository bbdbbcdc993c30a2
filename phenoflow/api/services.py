"""Service construction for route handlers.

Services are cheap wrappers around the process-wide content store, so
they are built per request; swapping the store (tests) takes effect
immediately.
"""

from phenoflow.config import get_settings
from phenoflow.persistence.factory import get_content_store
from phenoflow.phenotypes.catalog import PhenotypeCatalog
from phenoflow.phenotypes.files import FileService
from phenoflow.phenotypes.orchestrator import PhenotypeOrchestrator
from phenoflow.phenotypes.steps import StepResolver


def get_catalog() -> PhenotypeCatalog:
    return PhenotypeCatalog(get_content_store())


def get_orchestrator() -> PhenotypeOrchestrator:
    return PhenotypeOrchestrator(get_content_store(), creator=get_settings().user_name)


def get_step_resolver() -> StepResolver:
    return StepResolver(get_content_store())


def get_file_service() -> FileService:
    return FileService(get_content_store())

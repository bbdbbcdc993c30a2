"""
Shared Test Fixtures for Phenoflow
====================================

Fixtures are organized by layer:

    1. Sample documents (workflow, step files, implementations)
    2. Persistence fixtures (InMemoryContentStore)
    3. Phenotype service fixtures
    4. API fixtures (TestClient over an in-memory store)

All stores are in memory; nothing talks to GitHub.
"""

import base64

import pytest
from fastapi.testclient import TestClient

from phenoflow.persistence.factory import set_content_store
from phenoflow.persistence.memory_store import InMemoryContentStore
from phenoflow.phenotypes.authorship import AuthorGate
from phenoflow.phenotypes.orchestrator import PhenotypeOrchestrator
from phenoflow.phenotypes.schemas import PhenotypeCreateRequest, PhenotypeFile


AUTHOR = "alice"
OTHER_AUTHOR = "bob"


def b64(text: str) -> str:
    """Base64-encode text the way API clients send file content."""
    return base64.b64encode(text.encode("utf-8")).decode("ascii")


def unb64(content: str) -> str:
    return base64.b64decode(content).decode("utf-8")


# =============================================================================
# Sample documents
# =============================================================================

def workflow_cwl(newline: str = "\n") -> str:
    lines = [
        "cwlVersion: v1.0",
        "class: Workflow",
        "inputs: {}",
        "outputs: {}",
        "steps:",
        "  '1':",
        "    run: read-potential-cases-disc.cwl",
        "    out:",
        "    - output",
        "  '2':",
        "    run: covid-case.cwl",
        "    out:",
        "    - output",
        "",
    ]
    return newline.join(lines)


def step_cwl(doc: str, step_id: str) -> str:
    return (
        "cwlVersion: v1.0\n"
        "class: CommandLineTool\n"
        f"doc: {doc}\n"
        f"id: {step_id}\n"
        "inputs: {}\n"
        "outputs: {}\n"
    )


DEMO_FILES = {
    "demo.cwl": workflow_cwl(),
    "read-potential-cases-disc.cwl": step_cwl("Read potential cases", "read-potential-cases"),
    "covid-case.cwl": step_cwl("Identify COVID-19 cases", "covid-case"),
    "js/read-potential-cases.js": "console.log('read');\n",
    "python/read-potential-cases.py": "print('read')\n",
    "python/covid-case.py": "print('covid')\n",
}


def demo_request(name: str = "demo") -> PhenotypeCreateRequest:
    """A phenotype whose README description is 'a test'."""
    files = DEMO_FILES
    if name != "demo":
        files = {(f"{name}.cwl" if p == "demo.cwl" else p): c for p, c in DEMO_FILES.items()}
    return PhenotypeCreateRequest(
        name=name,
        about="Demo - a test",
        files=[PhenotypeFile(path=p, content=b64(c)) for p, c in files.items()],
    )


# =============================================================================
# Persistence
# =============================================================================

@pytest.fixture
def store():
    """Fresh InMemoryContentStore committing as AUTHOR."""
    return InMemoryContentStore(
        owner="phenoflow",
        committer={"name": AUTHOR, "email": f"{AUTHOR}@example.org"},
    )


# =============================================================================
# Phenotype services
# =============================================================================

@pytest.fixture
def gate(store):
    return AuthorGate(store)


@pytest.fixture
def orchestrator(store):
    return PhenotypeOrchestrator(store, creator="phenoflow")


@pytest.fixture
async def demo(store, orchestrator):
    """Store holding the 'demo' phenotype authored by AUTHOR."""
    await orchestrator.create(demo_request())
    return store


# =============================================================================
# API
# =============================================================================

@pytest.fixture
def client(store):
    """TestClient whose handlers use the in-memory store."""
    from phenoflow.api.main import app

    set_content_store(store)
    # Errors are answered by the app's handlers, not re-raised into the test
    yield TestClient(app, raise_server_exceptions=False)
    set_content_store(None)


@pytest.fixture
def demo_client(client):
    """TestClient with the 'demo' phenotype created through the API."""
    response = client.post("/phenotype", json=demo_request().model_dump())
    assert response.status_code == 200
    return client

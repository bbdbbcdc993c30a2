"""
Tests for phenoflow.phenotypes.orchestrator
=============================================

Covers phenotype provisioning, rollback of a partially created phenotype,
the author gate on deletion, and stop-at-first-failure bulk operations.
"""

import pytest

from phenoflow.core.exceptions import (
    AuthorizationError,
    ConflictError,
    NotFoundError,
    StoreUnavailableError,
)
from phenoflow.persistence.memory_store import InMemoryContentStore
from phenoflow.phenotypes.orchestrator import CompensationLog, PhenotypeOrchestrator
from phenoflow.phenotypes.schemas import PhenotypeCreateRequest, PhenotypeFile
from tests.conftest import AUTHOR, OTHER_AUTHOR, b64, demo_request, unb64


class FailingStore(InMemoryContentStore):
    """Fails every write to one path."""

    def __init__(self, fail_path, **kwargs):
        super().__init__(**kwargs)
        self.fail_path = fail_path

    async def put_file(self, repo, path, content, message, sha=None):
        if path == self.fail_path:
            raise StoreUnavailableError(f"write to {path} failed")
        return await super().put_file(repo, path, content, message, sha)


class TestCreate:
    async def test_creates_repository_with_documents(self, store, orchestrator):
        result = await orchestrator.create(demo_request())
        assert result.name == "demo"
        assert "demo.cwl" in result.files_created

        repo = await store.get_repository("demo")
        assert repo["description"] == "demo phenotype. Created by phenoflow."
        readme = unb64((await store.get_readme("demo"))["content"])
        assert readme.startswith("# demo\n\nDemo - a test\n\n## ")
        license_file = await store.get_contents("demo", "LICENSE.md")
        assert "MIT License" in unb64(license_file["content"])

    async def test_commit_messages(self, store, orchestrator):
        request = PhenotypeCreateRequest(
            name="demo",
            about="Demo - a test",
            files=[PhenotypeFile(path="demo.cwl", content=b64("class: Workflow\n"))],
        )
        await orchestrator.create(request)
        messages = [c["commit"]["message"] for c in await store.list_commits("demo")]
        assert messages == ["Created demo.cwl", "Initial LICENSE.md", "Initial README.md"]

    async def test_duplicate_name(self, store, orchestrator):
        await orchestrator.create(demo_request())
        with pytest.raises(ConflictError):
            await orchestrator.create(demo_request())
        # The existing phenotype is untouched
        assert await store.get_readme("demo")

    @pytest.mark.parametrize("fail_path", ["README.md", "LICENSE.md", "covid-case.cwl"])
    async def test_rollback_on_failure(self, fail_path):
        store = FailingStore(fail_path)
        orchestrator = PhenotypeOrchestrator(store, creator="phenoflow")
        with pytest.raises(StoreUnavailableError):
            await orchestrator.create(demo_request())
        assert await store.list_repositories() == []

    async def test_create_many_stops_at_first_failure(self, store, orchestrator):
        await orchestrator.create(demo_request("second"))
        with pytest.raises(ConflictError):
            await orchestrator.create_many(
                [demo_request("first"), demo_request("second"), demo_request("third")]
            )
        names = sorted(r["name"] for r in await store.list_repositories())
        assert names == ["first", "second"]


class TestCompensationLog:
    async def test_unwinds_newest_first(self):
        order = []
        log = CompensationLog()

        async def undo_a():
            order.append("a")

        async def undo_b():
            order.append("b")

        log.record("a", undo_a)
        log.record("b", undo_b)
        assert await log.unwind() == []
        assert order == ["b", "a"]
        assert log.entries == []

    async def test_failed_compensation_reported(self):
        log = CompensationLog()

        async def broken():
            raise RuntimeError("gone")

        log.record("broken", broken)
        assert await log.unwind() == ["broken"]


class TestDelete:
    async def test_author_can_delete(self, demo, orchestrator):
        await orchestrator.delete("demo", AUTHOR)
        with pytest.raises(NotFoundError):
            await demo.get_repository("demo")

    async def test_other_author_cannot_delete(self, demo, orchestrator):
        with pytest.raises(AuthorizationError):
            await orchestrator.delete("demo", OTHER_AUTHOR)
        assert (await demo.get_repository("demo"))["name"] == "demo"

    async def test_missing_phenotype(self, store, orchestrator):
        with pytest.raises(NotFoundError):
            await orchestrator.delete("nope", AUTHOR)


class TestDeleteMany:
    async def _create(self, store, orchestrator, name, author):
        store.committer = {"name": author, "email": f"{author}@example.org"}
        await orchestrator.create(demo_request(name))

    async def test_deletes_named(self, store, orchestrator):
        await self._create(store, orchestrator, "a", AUTHOR)
        await self._create(store, orchestrator, "b", AUTHOR)
        assert await orchestrator.delete_many(AUTHOR, ["a", "b"]) == ["a", "b"]
        assert await store.list_repositories() == []

    async def test_stops_at_first_unauthorised(self, store, orchestrator):
        await self._create(store, orchestrator, "a", AUTHOR)
        await self._create(store, orchestrator, "b", OTHER_AUTHOR)
        await self._create(store, orchestrator, "c", AUTHOR)
        with pytest.raises(AuthorizationError):
            await orchestrator.delete_many(AUTHOR, ["a", "b", "c"])
        names = sorted(r["name"] for r in await store.list_repositories())
        assert names == ["b", "c"]

    async def test_missing_named_target_deletes_nothing(self, store, orchestrator):
        await self._create(store, orchestrator, "a", AUTHOR)
        with pytest.raises(NotFoundError):
            await orchestrator.delete_many(AUTHOR, ["a", "nope"])
        assert [r["name"] for r in await store.list_repositories()] == ["a"]

    async def test_all_when_none_named(self, store, orchestrator):
        await self._create(store, orchestrator, "a", AUTHOR)
        await self._create(store, orchestrator, "b", AUTHOR)
        assert sorted(await orchestrator.delete_many(AUTHOR)) == ["a", "b"]


class TestDeleteAll:
    async def test_keeps_listed_repositories(self, store, orchestrator):
        await store.create_repository("phenoflow-server", "")
        await orchestrator.create(demo_request())
        listing = await orchestrator.delete_all(["phenoflow-server"])
        assert sorted(r["name"] for r in listing) == ["demo", "phenoflow-server"]
        assert [r["name"] for r in await store.list_repositories()] == ["phenoflow-server"]

"""
Tests for phenoflow.phenotypes.files
======================================

File CRUD with internally fetched shas and ordered bulk operations.
"""

import pytest

from phenoflow.core.exceptions import ConflictError, MalformedDocumentError, NotFoundError
from phenoflow.phenotypes.files import FileService
from phenoflow.phenotypes.schemas import FileRef, FileWrite
from tests.conftest import b64, unb64


@pytest.fixture
async def service(store):
    await store.create_repository("demo", "")
    await store.create_repository("other", "")
    return FileService(store)


class TestSingleFile:
    async def test_create_and_read(self, service):
        await service.create("demo", "notes/a.md", b64("hello"))
        assert await service.contents("demo", "notes/a.md") == "hello"
        raw = await service.get("demo", "notes/a.md")
        assert unb64(raw["content"]) == "hello"

    async def test_create_commit_message(self, service, store):
        await service.create("demo", "a.md", b64("x"))
        commits = await store.list_commits("demo")
        assert commits[0]["commit"]["message"] == "Created a.md"

    async def test_create_existing_conflicts(self, service):
        await service.create("demo", "a.md", b64("x"))
        with pytest.raises(ConflictError):
            await service.create("demo", "a.md", b64("y"))

    async def test_directory_contents_is_listing(self, service):
        await service.create("demo", "notes/a.md", b64("x"))
        listing = await service.contents("demo", "notes")
        assert [e["path"] for e in listing] == ["notes/a.md"]

    async def test_update(self, service, store):
        await service.create("demo", "a.md", b64("one"))
        await service.update("demo", "a.md", b64("two"))
        assert await service.contents("demo", "a.md") == "two"
        commits = await store.list_commits("demo")
        assert commits[0]["commit"]["message"] == "Updated a.md"

    async def test_update_missing(self, service):
        with pytest.raises(NotFoundError):
            await service.update("demo", "a.md", b64("x"))

    async def test_update_directory(self, service):
        await service.create("demo", "notes/a.md", b64("x"))
        with pytest.raises(MalformedDocumentError):
            await service.update("demo", "notes", b64("x"))

    async def test_delete(self, service, store):
        await service.create("demo", "a.md", b64("x"))
        await service.delete("demo", "a.md")
        with pytest.raises(NotFoundError):
            await service.get("demo", "a.md")
        commits = await store.list_commits("demo")
        assert commits[0]["commit"]["message"] == "Deleted a.md"


class TestBulk:
    async def test_create_many_across_repositories(self, service):
        created = await service.create_many([
            FileWrite(repo="demo", path="a.md", content=b64("a")),
            FileWrite(repo="other", path="b.md", content=b64("b")),
        ])
        assert created == ["demo/a.md", "other/b.md"]
        assert await service.contents("other", "b.md") == "b"

    async def test_create_many_stops_at_first_failure(self, service):
        await service.create("demo", "b.md", b64("b"))
        with pytest.raises(ConflictError):
            await service.create_many([
                FileWrite(repo="demo", path="a.md", content=b64("a")),
                FileWrite(repo="demo", path="b.md", content=b64("b2")),
                FileWrite(repo="demo", path="c.md", content=b64("c")),
            ])
        assert await service.contents("demo", "a.md") == "a"
        assert await service.contents("demo", "b.md") == "b"
        with pytest.raises(NotFoundError):
            await service.get("demo", "c.md")

    async def test_delete_many_stops_at_first_failure(self, service):
        await service.create("demo", "a.md", b64("a"))
        await service.create("demo", "c.md", b64("c"))
        with pytest.raises(NotFoundError):
            await service.delete_many([
                FileRef(repo="demo", path="a.md"),
                FileRef(repo="demo", path="b.md"),
                FileRef(repo="demo", path="c.md"),
            ])
        assert [e["path"] for e in await service.get("demo", "")] == ["c.md"]

"""
Tests for phenoflow.phenotypes.tree_walker
============================================

Every file at every depth is returned exactly once, including files in
sibling directories, and directories are never returned.
"""

import pytest

from phenoflow.core.exceptions import MalformedDocumentError, NotFoundError
from phenoflow.phenotypes.tree_walker import ContentTreeWalker
from tests.conftest import b64


async def put(store, repo, *paths):
    for path in paths:
        await store.put_file(repo, path, b64(path), f"Created {path}")


class ListingStore:
    """Serves canned listings keyed by path; entries may omit 'type'."""

    def __init__(self, listings):
        self.listings = listings
        self.calls = []

    async def get_contents(self, repo, path=""):
        self.calls.append(path)
        return self.listings[path]


class TestWalk:
    async def test_flat_repository(self, store):
        await store.create_repository("demo", "")
        await put(store, "demo", "README.md", "LICENSE.md", "demo.cwl")
        files = await ContentTreeWalker(store).walk("demo")
        assert sorted(f.path for f in files) == ["LICENSE.md", "README.md", "demo.cwl"]

    async def test_nested_files(self, store):
        await store.create_repository("demo", "")
        await put(store, "demo", "README.md", "js/a.js", "js/lib/deep/b.js")
        files = await ContentTreeWalker(store).walk("demo")
        assert sorted(f.path for f in files) == ["README.md", "js/a.js", "js/lib/deep/b.js"]

    async def test_every_sibling_directory(self, store):
        await store.create_repository("demo", "")
        await put(store, "demo", "js/a.js", "python/a.py", "r/a.R", "r/sub/b.R")
        files = await ContentTreeWalker(store).walk("demo")
        assert sorted(f.path for f in files) == ["js/a.js", "python/a.py", "r/a.R", "r/sub/b.R"]

    async def test_no_directories_or_duplicates(self, store):
        await store.create_repository("demo", "")
        await put(store, "demo", "a/x.txt", "a/b/y.txt", "c/z.txt")
        files = await ContentTreeWalker(store).walk("demo")
        paths = [f.path for f in files]
        assert len(paths) == len(set(paths)) == 3
        assert all(f.type == "file" for f in files)

    async def test_root_files_come_first(self, store):
        await store.create_repository("demo", "")
        await put(store, "demo", "js/a.js", "z.md")
        files = await ContentTreeWalker(store).walk("demo")
        assert [f.path for f in files] == ["z.md", "js/a.js"]

    async def test_empty_repository(self, store):
        await store.create_repository("demo", "")
        assert await ContentTreeWalker(store).walk("demo") == []

    async def test_missing_repository(self, store):
        with pytest.raises(NotFoundError):
            await ContentTreeWalker(store).walk("nope")

    async def test_uses_supplied_root_listing(self, store):
        await store.create_repository("demo", "")
        await put(store, "demo", "js/a.js")
        root = [{"name": "js", "path": "js", "type": "dir"}]
        files = await ContentTreeWalker(store).walk("demo", root_listing=root)
        assert [f.path for f in files] == ["js/a.js"]


class TestListingShapes:
    async def test_name_heuristic_without_type(self):
        store = ListingStore({
            "": [{"name": "README.md", "path": "README.md"}, {"name": "js", "path": "js"}],
            "js": [{"name": "a.js", "path": "js/a.js"}],
        })
        files = await ContentTreeWalker(store).walk("demo")
        assert [f.path for f in files] == ["README.md", "js/a.js"]

    async def test_explicit_type_beats_name(self):
        store = ListingStore({
            "": [
                {"name": "v1.0", "path": "v1.0", "type": "dir"},
                {"name": "Makefile", "path": "Makefile", "type": "file"},
            ],
            "v1.0": [{"name": "a.cwl", "path": "v1.0/a.cwl", "type": "file"}],
        })
        files = await ContentTreeWalker(store).walk("demo")
        assert sorted(f.path for f in files) == ["Makefile", "v1.0/a.cwl"]

    async def test_cycle_is_listed_once(self):
        store = ListingStore({
            "": [{"name": "a", "path": "a", "type": "dir"}],
            "a": [
                {"name": "x.txt", "path": "a/x.txt", "type": "file"},
                {"name": "a", "path": "a", "type": "dir"},
            ],
        })
        files = await ContentTreeWalker(store).walk("demo")
        assert [f.path for f in files] == ["a/x.txt"]
        assert store.calls == ["", "a"]

    async def test_directory_resolving_to_file(self):
        store = ListingStore({
            "": [{"name": "link", "path": "link", "type": "dir"}],
            "link": {"name": "target.txt", "path": "target.txt", "type": "file"},
        })
        files = await ContentTreeWalker(store).walk("demo")
        assert [f.path for f in files] == ["target.txt"]

    async def test_unexpected_listing(self):
        store = ListingStore({"": {"message": "?"}})
        with pytest.raises(MalformedDocumentError):
            await ContentTreeWalker(store).walk("demo")

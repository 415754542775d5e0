"""Tests for DocumentStore operations against a temporary library."""

from __future__ import annotations

import asyncio

import pytest

import nodestore.store.documents as documents_module
from nodestore.exceptions import (
    ContentEncodingError,
    NodeExistsError,
    NotFoundError,
    PathValidationError,
    StoreIOError,
)
from nodestore.store import DocumentStore, split_nodes


@pytest.mark.store
def test_split_nodes():
    assert split_nodes("2,0,1") == ["2", "0", "1"]
    assert split_nodes(["a", "b"]) == ["a", "b"]
    assert split_nodes("") == [""]


@pytest.mark.store
class TestNodePath:
    def test_node_path_adds_suffix(self, store, library):
        assert store.node_path("notes", "3") == library / "notes" / "3.html"

    @pytest.mark.parametrize("document, node", [("..", "0"), ("notes", ".."), ("notes", "a/b"), ("/tmp", "0")])
    def test_node_path_rejects_unsafe_segments(self, store, document, node):
        with pytest.raises(PathValidationError):
            store.node_path(document, node)


@pytest.mark.asyncio
@pytest.mark.store
class TestReadDocument:
    async def test_explicit_nodes_follow_given_order(self, store, notes, make_nodes):
        make_nodes(notes, **{"0": "zero;", "1": "one;", "2": "two;"})
        assert await store.read_document("notes", "2,0,1") == "two;zero;one;"

    async def test_explicit_nodes_as_sequence(self, store, notes, make_nodes):
        make_nodes(notes, intro="<h1>Hi</h1>", **{"0": "<p>body</p>"})
        assert await store.read_document("notes", ["intro", "0"]) == "<h1>Hi</h1><p>body</p>"

    async def test_same_node_may_repeat(self, store, notes, make_nodes):
        make_nodes(notes, **{"0": "x"})
        assert await store.read_document("notes", "0,0,0") == "xxx"

    async def test_all_nodes_sorted_lexicographically(self, store, notes, make_nodes):
        make_nodes(notes, **{"2": "two;", "10": "ten;"})
        assert await store.read_document("notes") == "ten;two;"

    async def test_concatenation_adds_no_separator(self, store, notes, make_nodes):
        make_nodes(notes, **{"0": "ab", "1": "cd"})
        assert await store.read_document("notes") == "abcd"

    async def test_empty_document(self, store):
        assert await store.read_document("notes") == ""

    async def test_missing_document(self, store):
        with pytest.raises(NotFoundError):
            await store.read_document("missing")

    async def test_missing_node_mid_list(self, store, notes, make_nodes):
        make_nodes(notes, **{"0": "zero"})
        with pytest.raises(NotFoundError) as info:
            await store.read_document("notes", "0,7")
        assert info.value.path == notes / "7.html"

    async def test_subdirectory_entry_is_an_io_failure(self, store, notes, make_nodes):
        make_nodes(notes, **{"0": "zero"})
        (notes / "nested").mkdir()
        with pytest.raises(StoreIOError) as info:
            await store.read_document("notes")
        assert not isinstance(info.value, NotFoundError)

    async def test_invalid_utf8(self, store, notes):
        (notes / "0.html").write_bytes(b"\xff\xfe broken")
        with pytest.raises(ContentEncodingError):
            await store.read_document("notes")

    async def test_validates_document_before_io(self, store):
        with pytest.raises(PathValidationError):
            await store.read_document("..")

    async def test_validates_every_node_before_io(self, store, notes, make_nodes, monkeypatch):
        make_nodes(notes, **{"0": "zero"})

        def _no_io(*args, **kwargs):
            raise AssertionError("filesystem touched before validation")

        monkeypatch.setattr(documents_module.asyncio, "to_thread", _no_io)
        with pytest.raises(PathValidationError):
            await store.read_document("notes", "0,../../etc/passwd")

    async def test_empty_node_name_is_rejected(self, store):
        with pytest.raises(PathValidationError):
            await store.read_document("notes", "")


@pytest.mark.asyncio
@pytest.mark.store
class TestAppendNode:
    async def test_first_node_is_zero(self, store, notes):
        assert await store.append_node("notes", "<p>first</p>") == 0
        assert (notes / "0.html").read_text(encoding="utf-8") == "<p>first</p>"

    async def test_next_after_highest(self, store, notes, make_nodes):
        make_nodes(notes, **{"0": "a", "1": "b", "5": "c"})
        assert await store.append_node("notes", "d") == 6
        assert (notes / "6.html").read_text(encoding="utf-8") == "d"

    async def test_named_nodes_do_not_count(self, store, notes, make_nodes):
        make_nodes(notes, intro="i", outro="o")
        assert await store.append_node("notes", "x") == 0

    async def test_successive_appends(self, store, notes):
        ids = [await store.append_node("notes", str(i)) for i in range(3)]
        assert ids == [0, 1, 2]
        assert await store.read_document("notes") == "012"

    async def test_missing_document(self, store, library):
        with pytest.raises(NotFoundError):
            await store.append_node("missing", "x")
        assert not (library / "missing").exists()

    async def test_rejects_unsafe_document(self, store):
        with pytest.raises(PathValidationError):
            await store.append_node("../notes", "x")

    async def test_collision_is_not_retried(self, store, notes, make_nodes, monkeypatch):
        make_nodes(notes, **{"0": "original"})
        monkeypatch.setattr(documents_module, "next_node_id", lambda names: 0)

        with pytest.raises(NodeExistsError):
            await store.append_node("notes", "intruder")

        assert (notes / "0.html").read_text(encoding="utf-8") == "original"
        assert sorted(p.name for p in notes.iterdir()) == ["0.html"]

    async def test_concurrent_appends_claiming_same_identity(self, store, notes, monkeypatch):
        monkeypatch.setattr(documents_module, "next_node_id", lambda names: 0)

        results = await asyncio.gather(
            store.append_node("notes", "first"),
            store.append_node("notes", "second"),
            return_exceptions=True,
        )

        successes = [r for r in results if r == 0 and not isinstance(r, BaseException)]
        failures = [r for r in results if isinstance(r, NodeExistsError)]
        assert len(successes) == 1
        assert len(failures) == 1
        assert [p.name for p in notes.iterdir()] == ["0.html"]
        assert (notes / "0.html").read_text(encoding="utf-8") in ("first", "second")

    async def test_exists_error_is_an_io_failure(self, store, notes, make_nodes, monkeypatch):
        make_nodes(notes, **{"0": "x"})
        monkeypatch.setattr(documents_module, "next_node_id", lambda names: 0)
        with pytest.raises(StoreIOError):
            await store.append_node("notes", "y")


@pytest.mark.asyncio
@pytest.mark.store
class TestNodeOperations:
    async def test_replace_then_read_round_trip(self, store):
        body = "<p>line one\r\nline two</p>\n"
        await store.replace_node("notes", "3", body)
        assert await store.read_node("notes", "3") == body

    async def test_replace_truncates_existing(self, store, notes, make_nodes):
        make_nodes(notes, intro="a much longer original body")
        await store.replace_node("notes", "intro", "short")
        assert (notes / "intro.html").read_text(encoding="utf-8") == "short"

    async def test_replace_in_missing_document(self, store, library):
        with pytest.raises(NotFoundError):
            await store.replace_node("missing", "0", "x")
        assert not (library / "missing").exists()

    async def test_replace_keeps_unicode(self, store):
        await store.replace_node("notes", "0", "größe ✓")
        assert await store.read_node("notes", "0") == "größe ✓"

    async def test_read_missing_node(self, store):
        with pytest.raises(NotFoundError):
            await store.read_node("notes", "42")

    async def test_read_node_invalid_utf8(self, store, notes):
        (notes / "0.html").write_bytes(b"\xc3\x28")
        with pytest.raises(ContentEncodingError):
            await store.read_node("notes", "0")

    async def test_delete_removes_only_target(self, store, notes, make_nodes):
        make_nodes(notes, **{"0": "a", "1": "b", "2": "c"})
        await store.delete_node("notes", "1")
        assert sorted(p.name for p in notes.iterdir()) == ["0.html", "2.html"]
        assert await store.read_document("notes") == "ac"

    async def test_delete_missing_node(self, store):
        with pytest.raises(NotFoundError):
            await store.delete_node("notes", "0")

    async def test_delete_then_append_does_not_reuse_lower_gap(self, store, notes, make_nodes):
        make_nodes(notes, **{"0": "a", "1": "b", "2": "c"})
        await store.delete_node("notes", "1")
        assert await store.append_node("notes", "d") == 3

    @pytest.mark.parametrize("node", ["..", ".", "../notes/0", "/etc/passwd"])
    async def test_node_operations_reject_unsafe_names(self, store, node):
        with pytest.raises(PathValidationError):
            await store.read_node("notes", node)
        with pytest.raises(PathValidationError):
            await store.replace_node("notes", node, "x")
        with pytest.raises(PathValidationError):
            await store.delete_node("notes", node)


@pytest.mark.store
def test_store_accepts_str_library(library):
    assert DocumentStore(str(library)).library == library

"""Unit tests for concurrent chain resolution.

WHY: Chain order is the load order of the bundle. The resolver runs all
entries at once, so it is the place where a read that finishes early
could jump the queue.

HOW: Chains are resolved against FakeNode/FakeReader with delays that
make later entries finish first. Results are checked positionally and
after flattening.

RULES:
- Every ordering test asserts that completion order really was inverted
"""

import asyncio

import pytest

from chain_transpiler.core.assembler import flatten_segments
from chain_transpiler.core.chain import parse_chain
from chain_transpiler.core.ir import HandlerCall, HandlerName, InlineText, Segment
from chain_transpiler.core.resolver import resolve_chain, resolve_entry

from conftest import FakeNode, FakeReader, make_test_context, source_files


class TestResolveEntry:
    """Single entries map to inline segments or handler results."""

    def test_inline_text(self):
        context = make_test_context()
        segment = asyncio.run(resolve_entry(InlineText("const x = 1"), context))
        assert segment == Segment(path="inline", contents="const x = 1")

    def test_source_receives_ambient_files_not_configured_args(self):
        reader = FakeReader({"a.js": "A"})
        context = make_test_context(files=source_files("a.js"), reader=reader)
        result = asyncio.run(resolve_entry(HandlerCall(HandlerName.SOURCE, ["ignored.js"]), context))
        assert result == [Segment("a.js", "A")]

    def test_target_receives_configured_mask(self):
        node = FakeNode(name="page")
        reader = FakeReader({"/node/page.lib.js": "lib"})
        context = make_test_context(node=node, reader=reader)
        result = asyncio.run(resolve_entry(HandlerCall(HandlerName.TARGET, "?.lib.js"), context))
        assert result == Segment("/node/page.lib.js", "lib")
        assert node.required == ["page.lib.js"]

    def test_rejects_non_entries(self):
        with pytest.raises(TypeError):
            asyncio.run(resolve_entry("source", make_test_context()))


class TestResolveChainOrdering:
    """Output order is chain order, independent of I/O completion order."""

    def test_order_survives_inverted_latency(self):
        reader = FakeReader(
            {
                "/modules/ym/index.js": "ym",
                "/node/bundle.lib.js": "lib",
                "a.js": "a",
                "b.js": "b",
            },
            delays={"/modules/ym/index.js": 0.04, "/node/bundle.lib.js": 0.03, "a.js": 0.02, "b.js": 0.0},
        )
        context = make_test_context(files=source_files("a.js", "b.js"), reader=reader)
        chain = parse_chain(["head", "ym", ["target", "?.lib.js"], "source", "tail"])

        tree = asyncio.run(resolve_chain(chain, context))

        assert reader.completed[0] == "b.js"
        assert [s.path for s in flatten_segments(tree)] == [
            "inline",
            "/modules/ym/index.js",
            "/node/bundle.lib.js",
            "a.js",
            "b.js",
            "inline",
        ]
        assert [s.contents for s in flatten_segments(tree)] == ["head", "ym", "lib", "a", "b", "tail"]

    def test_source_contributes_nested_block_at_its_position(self):
        reader = FakeReader({"a.js": "a", "b.js": "b"})
        context = make_test_context(files=source_files("a.js", "b.js"), reader=reader)
        tree = asyncio.run(resolve_chain(parse_chain(["x", "source", "y"]), context))
        assert tree == [
            Segment("inline", "x"),
            [Segment("a.js", "a"), Segment("b.js", "b")],
            Segment("inline", "y"),
        ]

    def test_repeated_source_entries_each_expand(self):
        reader = FakeReader({"a.js": "a"})
        context = make_test_context(files=source_files("a.js"), reader=reader)
        tree = asyncio.run(resolve_chain(parse_chain(["source", "source"]), context))
        assert tree == [[Segment("a.js", "a")], [Segment("a.js", "a")]]

    def test_empty_chain(self):
        assert asyncio.run(resolve_chain([], make_test_context())) == []

    def test_source_with_empty_file_list(self):
        tree = asyncio.run(resolve_chain(parse_chain(["source"]), make_test_context()))
        assert tree == [[]]


class TestResolveChainConcurrency:
    """Entries are dispatched together, not one after another."""

    def test_entries_overlap_in_time(self):
        reader = FakeReader(
            {"a.js": "a", "b.js": "b", "/node/bundle.x.js": "x"},
            delays={"a.js": 0.05, "b.js": 0.05, "/node/bundle.x.js": 0.05},
        )
        context = make_test_context(files=source_files("a.js", "b.js"), reader=reader)

        async def timed():
            loop = asyncio.get_running_loop()
            start = loop.time()
            await resolve_chain(parse_chain([["target", "?.x.js"], "source"]), context)
            return loop.time() - start

        # Sequential resolution would take at least 0.15s.
        assert asyncio.run(timed()) < 0.14


class TestResolveChainFailures:
    """Fatal failures propagate unchanged; nothing is retried."""

    def test_missing_source_file_aborts(self):
        reader = FakeReader({"a.js": "a"})
        context = make_test_context(files=source_files("a.js", "missing.js"), reader=reader)
        with pytest.raises(FileNotFoundError, match="missing.js"):
            asyncio.run(resolve_chain(parse_chain(["source"]), context))

    def test_require_failure_aborts(self):
        error = RuntimeError("nested build failed")
        context = make_test_context(node=FakeNode(require_error=error))
        with pytest.raises(RuntimeError) as excinfo:
            asyncio.run(resolve_chain(parse_chain(["ok", ["target", "?.lib.js"]]), context))
        assert excinfo.value is error

    def test_ym_read_failure_does_not_abort(self):
        context = make_test_context(reader=FakeReader({}))
        tree = asyncio.run(resolve_chain(parse_chain(["ym", "after"]), context))
        assert tree == [Segment("/modules/ym/index.js", None), Segment("inline", "after")]

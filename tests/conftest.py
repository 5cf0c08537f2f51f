"""Shared test fixtures for the chain_transpiler test suite.

WHY: Resolver, handler and step tests all need a build node, a file
reader with controllable latency and failures, and a recognizable
transform. Centralizing them here keeps every test on the same fakes.

HOW: FakeNode records the calls the core makes and can be told to fail.
FakeReader serves in-memory files, sleeps a per-path delay so reads
finish out of order, and raises OSError for missing paths.
upper_transform makes it obvious in assertions which text went through
the transform.

RULES:
- Fakes are plain classes; each fixture returns a fresh instance
- Delays are tiny (milliseconds) but always invert completion order
- File I/O tests use tmp_path for isolation
"""

from __future__ import annotations

import asyncio
from typing import Dict, List, Optional, Sequence

import pytest

from chain_transpiler.core.context import BuildContext
from chain_transpiler.core.ir import SourceFile


class FakeNode:
    """In-memory BuildNode that records unmask/require/resolve calls."""

    def __init__(self, name: str = "bundle", require_error: Optional[BaseException] = None) -> None:
        self.name = name
        self.require_error = require_error
        self.required: List[str] = []
        self.events: List[str] = []

    def unmask_target_name(self, mask: str) -> str:
        return mask.replace("?", self.name)

    async def require_sources(self, targets: Sequence[str]) -> None:
        self.events.append("require:" + ",".join(targets))
        if self.require_error is not None:
            raise self.require_error
        await asyncio.sleep(0)
        self.required.extend(targets)

    def resolve_path(self, target: str) -> str:
        self.events.append("resolve:" + target)
        return "/node/" + target


class FakeReader:
    """Async reader over a dict of path → contents, with per-path delays."""

    def __init__(self, files: Dict[str, str], delays: Optional[Dict[str, float]] = None) -> None:
        self.files = dict(files)
        self.delays = dict(delays or {})
        self.completed: List[str] = []

    async def __call__(self, path, encoding: str = "utf-8") -> str:
        key = str(path)
        await asyncio.sleep(self.delays.get(key, 0))
        if key not in self.files:
            raise FileNotFoundError(key)
        self.completed.append(key)
        return self.files[key]


def upper_transform(code: str, options=None) -> str:
    """Upper-case the code; appends the options' 'tag' when given."""
    suffix = options.get("tag", "") if options else ""
    return code.upper() + suffix


def source_files(*paths: str) -> List[SourceFile]:
    """Source descriptors keeping the given (possibly relative) paths verbatim."""
    return [
        SourceFile(fullname=p, name=p.rsplit("/", 1)[-1], suffix=p.rsplit("/", 1)[-1].split(".", 1)[-1])
        for p in paths
    ]


def make_test_context(node=None, files=(), reader=None, module_path: str = "/modules/ym/index.js") -> BuildContext:
    """BuildContext wired to fakes; the module resolver returns ``module_path``."""
    return BuildContext(
        node=node or FakeNode(),
        source_files=list(files),
        reader=reader or FakeReader({}),
        module_resolver=lambda name: module_path,
    )


@pytest.fixture
def fake_node():
    return FakeNode()


def write_files(root, files: Dict[str, str]) -> None:
    """Create ``files`` (relative path → text) under ``root``."""
    for rel, text in files.items():
        path = root / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")

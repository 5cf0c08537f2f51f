"""Build context passed explicitly through chain resolution.

WHY: Handlers need the build node (to unmask and build targets), the
ambient source-file list (for ``source``), a file reader, and a module
resolver. Handing them one explicit context object keeps handlers pure
functions of (args, context) and lets tests swap any collaborator
without patching module globals.

HOW: BuildNode is a Protocol describing the three node operations the
core calls. BuildContext bundles the node with the source list and the
injectable reader/resolver. read_file() and write_file() push blocking
file I/O to a worker thread. gather_ordered() is the one concurrency
primitive: start everything, await jointly, keep input order, cancel
the rest on the first failure.

RULES:
- Results of gather_ordered are in input order, never completion order
- A failure in one awaitable cancels every still-pending sibling and
  propagates unchanged
- File I/O never blocks the event loop
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Optional, Protocol, Sequence, TypeVar, Union

from chain_transpiler.config import DEFAULT_ENCODING
from chain_transpiler.core.ir import SourceFile
from chain_transpiler.core.modules import resolve_module_path

T = TypeVar("T")

PathLike = Union[str, Path]


class BuildNode(Protocol):
    """The slice of a build-graph node that chain resolution relies on."""

    def unmask_target_name(self, mask: str) -> str:
        """Turn a mask like "?.lib.js" into a concrete target name."""

    async def require_sources(self, targets: Sequence[str]) -> None:
        """Make sure every target is built before it is read."""

    def resolve_path(self, target: str) -> str:
        """Absolute path of a target inside the node."""


async def read_file(path: PathLike, encoding: str = DEFAULT_ENCODING) -> str:
    """Read a text file without blocking the event loop."""
    return await asyncio.to_thread(Path(path).read_text, encoding=encoding)


async def write_file(path: PathLike, content: str, encoding: str = DEFAULT_ENCODING) -> None:
    """Write a text file without blocking the event loop."""
    await asyncio.to_thread(Path(path).write_text, content, encoding=encoding)


async def gather_ordered(awaitables: Iterable[Awaitable[T]]) -> List[T]:
    """Await all ``awaitables`` concurrently and return results in input order.

    WHY: Chain order defines load order in the artifact, but reads finish
    in arbitrary order. asyncio.gather already keeps positions; on top of
    that a failure must not leave orphaned reads or builds running.

    HOW: Wraps every awaitable in a task, gathers them, and on any
    exception (including cancellation of the caller) cancels the tasks
    that have not finished before re-raising.
    """
    tasks = [asyncio.ensure_future(aw) for aw in awaitables]
    if not tasks:
        return []
    try:
        return list(await asyncio.gather(*tasks))
    except BaseException:
        for task in tasks:
            if not task.done():
                task.cancel()
        raise


Reader = Callable[..., Awaitable[str]]
ModuleResolver = Callable[[str], str]


@dataclass
class BuildContext:
    """Everything a chain handler may touch during one step invocation.

    RULES:
    - node: the build node the step runs in
    - source_files: ambient source list, substituted as the args of
      every ``source`` entry
    - reader: async (path) -> text; raises on I/O errors
    - module_resolver: (module name) -> entry file path
    """

    node: BuildNode
    source_files: List[SourceFile] = field(default_factory=list)
    reader: Reader = read_file
    module_resolver: ModuleResolver = resolve_module_path

    async def read(self, path: PathLike) -> str:
        return await self.reader(path)

    def resolve_module(self, name: str) -> str:
        return self.module_resolver(name)


def make_context(
    node: BuildNode,
    source_files: Optional[Sequence[SourceFile]] = None,
    *,
    reader: Optional[Reader] = None,
    module_resolver: Optional[ModuleResolver] = None,
) -> BuildContext:
    """Build a BuildContext, keeping defaults for collaborators not given."""
    context = BuildContext(node=node, source_files=list(source_files or []))
    if reader is not None:
        context.reader = reader
    if module_resolver is not None:
        context.module_resolver = module_resolver
    return context

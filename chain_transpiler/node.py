"""A build node rooted at a directory.

WHY: Chain resolution talks to "the node" through three calls
(unmask_target_name, require_sources, resolve_path). DirectoryNode is
the concrete node the CLI uses: targets are files in one directory,
some of them produced by registered steps, the rest expected on disk.

HOW: Targets are named after the directory ("?.js" in bundle/ →
"bundle.js"). Registered steps are built on demand: the first
require_sources() call for a target starts its build as a task, later
calls await the same task. The chain of targets being built is carried
in a ContextVar, which every build task inherits from its requirer.
Builds started side by side do not share that stack, so the node also
records which target is waiting on which; a target that (indirectly)
requires itself is detected through either instead of waiting forever.

RULES:
- "?" in a mask is replaced by the node's directory name
- Each registered target is built at most once per node instance
- A target without a step must already exist, else FileNotFoundError
- Two steps may not write the same target (ValueError)
- Cycles raise BuildCycleError naming the whole cycle
"""

from __future__ import annotations

import asyncio
import logging
from contextvars import ContextVar
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Sequence, Set, Tuple, Union

from chain_transpiler.core.context import gather_ordered
from chain_transpiler.step import TranspileStep

logger = logging.getLogger(__name__)

_BUILD_STACK: ContextVar[Tuple[str, ...]] = ContextVar("chain_transpiler_build_stack", default=())


class BuildCycleError(RuntimeError):
    """Raised when a target requires itself through a chain of builds.

    RULES:
    - Message lists the cycle, e.g. "a.js -> b.js -> a.js"
    """


class DirectoryNode:
    """Build node whose targets live in ``path``."""

    def __init__(self, path: Union[str, Path], steps: Iterable[TranspileStep] = ()) -> None:
        self.path = Path(path).resolve()
        self.name = self.path.name
        self._steps: Dict[str, TranspileStep] = {}
        self._builds: Dict[str, asyncio.Future] = {}
        self._waits: Dict[str, List[str]] = {}
        for step in steps:
            self.add_step(step)

    def __repr__(self) -> str:
        return "DirectoryNode({!r})".format(str(self.path))

    @property
    def targets(self) -> List[str]:
        """Targets of registered steps, in registration order."""
        return list(self._steps)

    def add_step(self, step: TranspileStep) -> str:
        """Register ``step``; returns the target it builds."""
        target = step.target_name(self)
        if target in self._steps:
            raise ValueError("Target '{}' already has a build step in {}".format(target, self.path))
        self._steps[target] = step
        return target

    def unmask_target_name(self, mask: str) -> str:
        return mask.replace("?", self.name)

    def resolve_path(self, target: str) -> str:
        return str(self.path / target)

    async def require_sources(self, targets: Sequence[str]) -> None:
        """Ensure every target is built (or present on disk), concurrently."""
        await gather_ordered(self._require(target) for target in targets)

    async def build(self, targets: Optional[Sequence[str]] = None) -> List[Path]:
        """Build ``targets`` (masks allowed; default: every registered step).

        Returns:
            Paths of the built artifacts, in the requested order.
        """
        names = [self.unmask_target_name(t) for t in targets] if targets else self.targets
        unknown = [name for name in names if name not in self._steps]
        if unknown:
            available = ", ".join(self.targets) or "none"
            raise ValueError(
                "No build step for target(s) {}. Registered targets: {}".format(
                    ", ".join(unknown), available
                )
            )
        await self.require_sources(names)
        return [Path(self.resolve_path(name)) for name in names]

    async def _require(self, target: str) -> None:
        step = self._steps.get(target)
        if step is None:
            exists = await asyncio.to_thread(Path(self.resolve_path(target)).is_file)
            if not exists:
                raise FileNotFoundError(
                    "Target '{}' has no build step and does not exist in {}".format(target, self.path)
                )
            return

        stack = _BUILD_STACK.get()
        if target in stack:
            raise BuildCycleError(" -> ".join(stack[stack.index(target):] + (target,)))

        requirer = stack[-1] if stack else None
        if requirer is not None:
            # Builds started from the top level do not share a stack.
            path = self._waits_path(target, set(stack))
            if path is not None:
                start = stack.index(path[-1])
                raise BuildCycleError(" -> ".join(stack[start:] + tuple(path)))

        build = self._builds.get(target)
        if build is None:
            logger.debug("Starting build of %s", target)
            build = asyncio.ensure_future(self._run_step(target, step, stack))
            build.add_done_callback(_retrieve_exception)
            self._builds[target] = build

        if requirer is not None:
            self._waits.setdefault(requirer, []).append(target)
        try:
            # Shielded: one cancelled requirer must not cancel a build others await.
            await asyncio.shield(build)
        finally:
            if requirer is not None:
                self._waits[requirer].remove(target)

    def _waits_path(self, start: str, goals: Set[str]) -> Optional[List[str]]:
        """Return a path of waiting builds from ``start`` into ``goals``, if any."""
        pending = [[start]]
        visited = {start}
        while pending:
            path = pending.pop()
            if path[-1] in goals:
                return path
            for nxt in self._waits.get(path[-1], ()):
                if nxt not in visited:
                    visited.add(nxt)
                    pending.append(path + [nxt])
        return None

    async def _run_step(self, target: str, step: TranspileStep, stack: Tuple[str, ...]) -> Path:
        _BUILD_STACK.set(stack + (target,))
        return await step.run(self)


def _retrieve_exception(build: asyncio.Future) -> None:
    # Marks the failure as seen when every requirer was cancelled.
    if not build.cancelled():
        build.exception()

"""The ``target`` handler: inject another target's built output.

WHY: A bundle often embeds an artifact produced by a sibling step of
the same node (e.g. a pre-built library). That target must be built
before it can be read, which may itself trigger nested build work.

HOW: Unmask the target name, ask the node to build it, resolve its
path, read it.

RULES:
- Every failure (unmask, build, read) propagates and aborts the step
"""

from __future__ import annotations

from chain_transpiler.core.context import BuildContext
from chain_transpiler.core.ir import Segment


async def read_target(mask: str, context: BuildContext) -> Segment:
    node = context.node
    target = node.unmask_target_name(mask)
    await node.require_sources([target])

    path = node.resolve_path(target)
    contents = await context.read(path)
    return Segment(path=path, contents=contents)

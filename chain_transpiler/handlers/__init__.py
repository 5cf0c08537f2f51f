"""Chain handler registry: the closed set of built-in handlers.

WHY: The resolver needs a single lookup from a parsed HandlerCall to the
function that resolves it. Keying the registry by the HandlerName enum
keeps the set closed: a chain can only name handlers listed here.

HOW: HANDLERS maps each HandlerName member to its async handler function.
The resolver calls ``await HANDLERS[call.name](args, context)``.

RULES:
- Every HandlerName member has exactly one entry
- Values are async callables (args, BuildContext) -> Segment | SegmentTree
- Not extensible at runtime; new handlers mean a new enum member
"""

from __future__ import annotations

from typing import Dict

from chain_transpiler.core.ir import HandlerName
from chain_transpiler.handlers.base import Handler
from chain_transpiler.handlers.source import read_sources
from chain_transpiler.handlers.target import read_target
from chain_transpiler.handlers.ym import read_ym

HANDLERS: Dict[HandlerName, Handler] = {
    HandlerName.YM: read_ym,
    HandlerName.TARGET: read_target,
    HandlerName.SOURCE: read_sources,
}

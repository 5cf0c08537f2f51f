"""Handler call signature shared by every built-in chain handler.

WHY: The resolver dispatches to handlers generically. A single callable
type documents what it may pass in and what it may get back.

HOW: A handler is an async function (args, context) returning either one
Segment or a list of them (a nested SegmentTree).

RULES:
- Handlers never reorder: list results follow their input order
- Handlers read through context.read() so tests can inject latency and failures
- Only the ym handler may swallow a read error (and must log it)
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import Any, Union

from chain_transpiler.core.context import BuildContext
from chain_transpiler.core.ir import Segment, SegmentTree

HandlerResult = Union[Segment, SegmentTree]
Handler = Callable[[Any, BuildContext], Awaitable[HandlerResult]]

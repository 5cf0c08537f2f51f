"""Chain resolution: typed chain entries → ordered segment tree.

WHY: Every chain entry may need I/O (a module read, a nested target
build, a batch of source reads). Resolving them one after another would
serialize unrelated work; resolving them concurrently must still yield
the artifact in chain order, because chain order is load order.

HOW: resolve_entry() turns one entry into a Segment (inline text) or
whatever its handler returns (a Segment, or a list for list-expanding
handlers). resolve_chain() starts every entry at once through
gather_ordered() and returns the results positionally.

RULES:
- Inline text → Segment(path="inline", contents=text), no I/O
- ``source`` entries ignore their configured args and receive the
  context's ambient source list
- Output position i always holds the result of entry i
- No retries; the first failure cancels the rest and propagates
"""

from __future__ import annotations

import logging
from typing import Sequence, Union

from chain_transpiler.core.context import BuildContext, gather_ordered
from chain_transpiler.core.ir import (
    INLINE_PATH,
    ChainEntry,
    HandlerCall,
    HandlerName,
    InlineText,
    Segment,
    SegmentTree,
)
from chain_transpiler.handlers import HANDLERS

logger = logging.getLogger(__name__)


async def resolve_entry(entry: ChainEntry, context: BuildContext) -> Union[Segment, SegmentTree]:
    """Resolve a single chain entry."""
    if isinstance(entry, InlineText):
        return Segment(path=INLINE_PATH, contents=entry.text)

    if not isinstance(entry, HandlerCall):
        raise TypeError("not a chain entry: {!r}".format(entry))

    handler = HANDLERS[entry.name]
    args = context.source_files if entry.name is HandlerName.SOURCE else entry.args
    logger.debug("Resolving chain handler %s", entry.name.value)
    return await handler(args, context)


async def resolve_chain(entries: Sequence[ChainEntry], context: BuildContext) -> SegmentTree:
    """Resolve all ``entries`` concurrently, keeping chain order.

    Args:
        entries: Parsed chain (see chain_transpiler.core.chain.parse_chain).
        context: Build context shared by every handler call.

    Returns:
        SegmentTree whose i-th element is the result of entries[i].
    """
    return await gather_ordered(resolve_entry(entry, context) for entry in entries)

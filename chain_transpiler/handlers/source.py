"""The ``source`` handler: read every file of the ambient source list.

HOW: All reads start together; the returned list follows the input
list, whatever order the reads complete in.

RULES:
- N files in → N segments out, segment i is file i
- Any read failure propagates; no partial list is returned
"""

from __future__ import annotations

from typing import List, Sequence

from chain_transpiler.core.context import BuildContext, gather_ordered
from chain_transpiler.core.ir import Segment, SourceFile


async def read_sources(files: Sequence[SourceFile], context: BuildContext) -> List[Segment]:
    async def _read(source: SourceFile) -> Segment:
        contents = await context.read(source.fullname)
        return Segment(path=source.fullname, contents=contents)

    return await gather_ordered(_read(f) for f in files or ())

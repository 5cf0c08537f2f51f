"""Segment flattening, per-segment transform, and artifact concatenation.

WHY: The resolver returns a nested tree (list-expanding handlers such as
``source`` contribute a sub-list). The artifact is flat text in which
every contribution stays traceable to its origin, and every segment is
transformed on its own so one segment's syntax never leaks into another.

HOW: flatten_segments() walks the tree depth-first and inlines nested
lists at their position. Each leaf is transformed with the step's
options and wrapped in begin/end comments naming its path. The wrapped
pieces are joined with no separator.

RULES:
- Wrapper: "/* begin: <path> */\\n" + code + "/* end: <path> */\\n"
- Inline literals are transformed like any file segment
- transform(code) when options is None, transform(code, options) otherwise
- A segment without contents (degraded ym read) is transformed as ""
- Transform exceptions propagate; nothing is partially emitted
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, Iterable, List, Union

from chain_transpiler.core.ir import Segment, SegmentTree

Transform = Callable[..., str]

BEGIN_MARKER = "/* begin: {path} */\n"
END_MARKER = "/* end: {path} */\n"


def flatten_segments(tree: Iterable[Union[Segment, SegmentTree]]) -> List[Segment]:
    """Flatten a segment tree depth-first, preserving order."""
    flat: List[Segment] = []
    for node in tree:
        if isinstance(node, Segment):
            flat.append(node)
        elif isinstance(node, (list, tuple)):
            flat.extend(flatten_segments(node))
        else:
            raise TypeError("segment tree holds a {}".format(type(node).__name__))
    return flat


def transform_segment(
    segment: Segment,
    transform: Transform,
    options: Any = None,
) -> str:
    """Run ``transform`` over one segment's contents."""
    code = segment.contents if segment.contents is not None else ""
    if options is None:
        return transform(code)
    return transform(code, options)


def wrap_segment(path: str, code: str) -> str:
    """Surround transformed ``code`` with provenance markers."""
    return BEGIN_MARKER.format(path=path) + code + END_MARKER.format(path=path)


def assemble(
    tree: Iterable[Union[Segment, SegmentTree]],
    transform: Transform,
    options: Any = None,
) -> str:
    """Produce the artifact text for a resolved segment tree.

    Args:
        tree: Result of resolve_chain().
        transform: Pure function (code[, options]) -> code.
        options: Forwarded unchanged to every transform call.

    Returns:
        The complete artifact content.
    """
    return "".join(
        wrap_segment(segment.path, transform_segment(segment, transform, options))
        for segment in flatten_segments(tree)
    )

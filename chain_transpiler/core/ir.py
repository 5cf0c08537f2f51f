"""Intermediate representation dataclasses for chain resolution.

WHY: A chain mixes literal glue code with handler calls that expand into
one or many files. The resolver and the assembler need one well-typed
vocabulary for "what the chain asks for" and "what resolution produced",
so neither has to guess at the shape of a value.

HOW: Two halves:
  Chain side:    HandlerName (closed enum), InlineText, HandlerCall
  Result side:   Segment (one path + contents), SegmentTree (ordered,
                  arbitrarily nested list of Segment)
  SourceFile:    one entry of the ambient source-file list

RULES:
- The handler set is closed: HandlerName lists every built-in
- A Segment's path is provenance only; nothing reinterprets it
- Segment.contents is None only for a degraded (unreadable) ym read
- SegmentTree order is chain order; nesting marks list-expanding handlers
"""

from __future__ import annotations

import enum
import os
from dataclasses import dataclass
from typing import Any, List, Optional, Union

INLINE_PATH = "inline"
"""Provenance path recorded for literal chain text."""


class HandlerName(str, enum.Enum):
    """Built-in chain handlers.

    HOW: Inherits from str so members compare equal to their config
    spelling ("ym", "target", "source").
    """

    YM = "ym"
    TARGET = "target"
    SOURCE = "source"

    @classmethod
    def lookup(cls, name: Any) -> Optional[HandlerName]:
        """Return the member spelled ``name``, or None."""
        if not isinstance(name, str):
            return None
        try:
            return cls(name)
        except ValueError:
            return None


@dataclass(frozen=True)
class InlineText:
    """Literal chain text, injected as a segment with path "inline"."""

    text: str


@dataclass(frozen=True)
class HandlerCall:
    """A chain entry dispatched to a built-in handler.

    RULES:
    - name: member of HandlerName
    - args: handler argument (target mask for TARGET, unused by YM;
      replaced by the ambient source list for SOURCE)
    """

    name: HandlerName
    args: Any = None


ChainEntry = Union[InlineText, HandlerCall]


@dataclass
class Segment:
    """One resolved unit of the artifact."""

    path: str
    contents: Optional[str]


# Recursive: a tree element is a Segment or another tree.
SegmentTree = List[Union[Segment, "SegmentTree"]]


@dataclass(frozen=True)
class SourceFile:
    """One file of the ambient source-file list.

    RULES:
    - fullname: absolute path used for reading and provenance
    - name: base name ("block.vanilla.js")
    - suffix: everything after the first dot of name ("vanilla.js");
      empty when the name has no dot
    """

    fullname: str
    name: str
    suffix: str

    @classmethod
    def from_path(cls, path: Union[str, os.PathLike]) -> SourceFile:
        fullname = os.path.abspath(os.fspath(path))
        name = os.path.basename(fullname)
        suffix = name.split(".", 1)[1] if "." in name else ""
        return cls(fullname=fullname, name=name, suffix=suffix)

"""Helper functions for the ambient source-file list.

WHY: The ``source`` chain handler expands to "the files of this node",
but deciding which files belong to a node is someone else's job. A
previous build step (or a person) writes a ``?.files`` listing; this
module only reads that listing and keeps the files whose suffix the
step accepts.

HOW: load_file_list() reads the listing off the event loop and parses it
into SourceFile objects. filter_by_suffixes() keeps files whose
multi-part suffix ("vanilla.js", "browser.js") is accepted.

RULES:
- Listing format: one path per line, strip whitespace, ignore blank
  lines and lines starting with '#'
- Relative paths are resolved against the listing's directory
- File order is the listing order; suffix order never reorders files
- Duplicate paths are kept once, at their first position
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Union

from chain_transpiler.core.context import Reader, read_file
from chain_transpiler.core.ir import SourceFile


def parse_file_list(text: str, base_dir: Union[str, Path]) -> List[SourceFile]:
    """Parse listing ``text``; relative entries are resolved against ``base_dir``."""
    base = Path(base_dir)
    files: List[SourceFile] = []
    seen: set = set()
    for line in text.splitlines():
        entry = line.strip()
        if not entry or entry.startswith("#"):
            continue
        path = Path(entry)
        if not path.is_absolute():
            path = base / path
        source = SourceFile.from_path(path)
        if source.fullname not in seen:
            seen.add(source.fullname)
            files.append(source)
    return files


async def load_file_list(path: Union[str, Path], reader: Optional[Reader] = None) -> List[SourceFile]:
    """Read a ``?.files`` listing through ``reader`` (default: read_file).

    Raises:
        FileNotFoundError: The listing does not exist.
    """
    listing = Path(path)
    text = await (reader or read_file)(listing)
    return parse_file_list(text, listing.parent)


def filter_by_suffixes(files: Iterable[SourceFile], suffixes: Sequence[str]) -> List[SourceFile]:
    """Keep files whose suffix is one of ``suffixes``, in file order."""
    accepted = set(suffixes)
    return [f for f in files if f.suffix in accepted]

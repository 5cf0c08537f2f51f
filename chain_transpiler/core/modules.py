"""Locate the entry file of an installed JavaScript module.

WHY: The ``ym`` chain handler injects the source of the ym module loader
into the artifact. That module lives in a node_modules directory next to
the project, so we resolve it the way node does for a bare module name.

HOW: An explicit <NAME>_MODULE_PATH environment variable wins. Otherwise
walk from the search directory up to the filesystem root; in each
directory look for node_modules/<name>/ and pick its entry file from
package.json "main" (default index.js).

RULES:
- The first node_modules/<name> found walking upwards wins
- "main" may omit the .js extension or point at a directory
- Raises ModuleNotFoundError when nothing is found
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Optional, Union

from chain_transpiler.config import module_path_override


def resolve_module_path(name: str, search_from: Optional[Union[str, Path]] = None) -> str:
    """Return the absolute path of module ``name``'s entry file.

    Args:
        name: Bare module name, e.g. "ym".
        search_from: Directory to start from (default: current directory).

    Raises:
        ModuleNotFoundError: No override and no node_modules/<name> found.
    """
    override = module_path_override(name)
    if override:
        return str(Path(override).resolve())

    start = Path(search_from).resolve() if search_from else Path.cwd()
    for directory in (start, *start.parents):
        package_dir = directory / "node_modules" / name
        if package_dir.is_dir():
            entry = _entry_file(package_dir)
            if entry is not None:
                return str(entry)

    raise ModuleNotFoundError("Cannot find module '{}' from {}".format(name, start))


def _entry_file(package_dir: Path) -> Optional[Path]:
    main = "index.js"
    manifest = package_dir / "package.json"
    if manifest.is_file():
        data = json.loads(manifest.read_text(encoding="utf-8"))
        main = data.get("main") or main

    candidate = package_dir / main
    for path in (candidate, candidate.with_name(candidate.name + ".js"), candidate / "index.js"):
        if path.is_file():
            return path.resolve()
    return None

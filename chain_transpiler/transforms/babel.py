"""Babel transform backed by dukpy's embedded BabelJS.

WHY: Bundles are written in modern JavaScript but must run in older
runtimes (browsers, web workers). Babel is the de-facto transpiler;
dukpy ships it inside a Duktape interpreter, so no node toolchain is
needed at build time.

HOW: The step's params are passed as Babel options to
dukpy.babel_compile(); the transpiled code is returned. dukpy is
imported on first use so the rest of the package works without it.

RULES:
- options are forwarded unchanged (e.g. {"presets": ["es2015"]});
  dukpy applies its own default preset when none is given
- Babel syntax errors propagate and abort the build step
- Requires the optional "babel" extra (pip install chain-transpiler[babel])
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Optional


def babel_transform(code: str, options: Optional[Mapping[str, Any]] = None) -> str:
    import dukpy

    result = dukpy.babel_compile(code, **dict(options or {}))
    return result["code"]

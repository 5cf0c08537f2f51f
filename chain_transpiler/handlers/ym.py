"""The ``ym`` handler: inject the ym module loader's source.

WHY: Bundles that use ym modules need the loader itself in front of
the module definitions. The loader is an installed package, so its
location is looked up rather than configured per build.

HOW: Resolve the module's entry file through the context's module
resolver, then read it.

RULES:
- Arguments are ignored
- A failed read is logged and yields Segment(path, contents=None);
  the step continues (the only non-fatal failure in a chain)
- A failed module lookup is not a read failure and propagates
"""

from __future__ import annotations

import logging
from typing import Any

from chain_transpiler.config import YM_MODULE_NAME
from chain_transpiler.core.context import BuildContext
from chain_transpiler.core.ir import Segment

logger = logging.getLogger(__name__)


async def read_ym(args: Any, context: BuildContext) -> Segment:
    path = context.resolve_module(YM_MODULE_NAME)
    try:
        contents = await context.read(path)
    except (OSError, UnicodeDecodeError) as exc:
        logger.warning("Could not read %s module at %s: %s", YM_MODULE_NAME, path, exc)
        contents = None
    return Segment(path=path, contents=contents)

"""Configuration constants, step defaults, and .env loading.

WHY: Centralizes all configurable values so they are easy to find,
update, and override. Step defaults (target masks, source suffixes,
the default chain) are plain data, not buried in logic, so the CLI,
the pydantic step options, and the tests all agree on them.

HOW: python-dotenv loads the .env file on import. Constants are defined
as module-level values with environment-variable overrides. The
load_log_level() and module_path_override() helpers read the
environment at call time so tests can monkeypatch it.

RULES:
- Every default can be overridden via an environment variable
- Target masks use "?" as the node-name placeholder ("?.js" → "bundle.js")
- DEFAULT_SOURCE_SUFFIXES order does not affect output order (file-list order wins)
- Unknown log level names raise ValueError, never silently fall back
"""

from __future__ import annotations

import logging
import os
from typing import List, Optional

from dotenv import load_dotenv

# Load .env from the project root (where the tool is run from)
load_dotenv()

# ---------------------------------------------------------------------------
# Step defaults
# ---------------------------------------------------------------------------

DEFAULT_TARGET = os.getenv("CHAIN_TRANSPILER_TARGET", "?.js")
"""Mask of the artifact written by a step."""

DEFAULT_FILES_TARGET = os.getenv("CHAIN_TRANSPILER_FILES_TARGET", "?.files")
"""Mask of the file-list target that supplies the ambient source files."""

DEFAULT_SOURCE_SUFFIXES: List[str] = ["vanilla.js", "js", "browser.js"]
"""File suffixes eligible as source files (suffix = text after the first dot)."""

DEFAULT_CHAIN: List[str] = ["source"]
"""Chain used when a step does not configure one."""

DEFAULT_TRANSFORM = os.getenv("CHAIN_TRANSPILER_TRANSFORM", "babel")
"""Key in chain_transpiler.transforms.TRANSFORMS applied to every segment."""

DEFAULT_ENCODING = "utf-8"

YM_MODULE_NAME = "ym"
"""Module read by the ``ym`` chain handler."""

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

DEFAULT_LOG_LEVEL = "WARNING"
LOG_FORMAT = "%(asctime)s %(name)s %(levelname)s %(message)s"


def load_log_level(name: Optional[str] = None) -> int:
    """Resolve a log level name to its numeric value.

    WHY: The CLI accepts a level from --log-level or from the
    CHAIN_TRANSPILER_LOG_LEVEL environment variable. A typo should fail
    loudly instead of silently logging at the wrong verbosity.

    HOW: Falls back to the environment, then to DEFAULT_LOG_LEVEL, and
    looks the upper-cased name up in the logging module.

    RULES:
    - Accepts standard names only (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    - Case-insensitive
    - Raises ValueError for unknown names
    """
    raw = name or os.getenv("CHAIN_TRANSPILER_LOG_LEVEL", DEFAULT_LOG_LEVEL)
    level = logging.getLevelName(raw.strip().upper())
    if not isinstance(level, int):
        raise ValueError(
            "Unknown log level '{}'. Use DEBUG, INFO, WARNING, ERROR or CRITICAL.".format(raw)
        )
    return level


def module_path_override(module_name: str) -> Optional[str]:
    """Return the explicit entry-file path configured for a module, if any.

    Reads ``<NAME>_MODULE_PATH`` (e.g. ``YM_MODULE_PATH``); dashes and dots
    in the module name become underscores.
    """
    key = "{}_MODULE_PATH".format(
        module_name.upper().replace("-", "_").replace(".", "_")
    )
    value = os.getenv(key, "").strip()
    return value or None

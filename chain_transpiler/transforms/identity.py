"""Pass-through transform."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Optional


def identity_transform(code: str, options: Optional[Mapping[str, Any]] = None) -> str:
    """Return ``code`` unchanged; ``options`` is accepted and ignored."""
    return code

"""Code transform registry: pluggable per-segment transforms.

WHY: The CLI and step options select a transform by name. A central dict
makes it trivial to add one: write the function, import it here, add
one line.

HOW: TRANSFORMS maps string keys to transform functions
``(code, options=None) -> code``. get_transform() looks a key up with a
clear error listing the available names.

RULES:
- Keys are lowercase identifiers (used in CLI flags and step options)
- Transforms are pure: same input and options → same output
- Every transform listed here must be importable without its optional
  third-party backend installed (import the backend lazily)
"""

from __future__ import annotations

from typing import Dict

from chain_transpiler.core.assembler import Transform
from chain_transpiler.transforms.babel import babel_transform
from chain_transpiler.transforms.identity import identity_transform

TRANSFORMS: Dict[str, Transform] = {
    "identity": identity_transform,
    "babel": babel_transform,
}


def get_transform(name: str) -> Transform:
    """Return the transform registered under ``name``.

    Raises:
        ValueError: No transform has that name.
    """
    key = (name or "").strip().lower()
    try:
        return TRANSFORMS[key]
    except KeyError:
        available = ", ".join(sorted(TRANSFORMS))
        raise ValueError(
            "Unknown transform '{}'. Available transforms: {}".format(name, available)
        ) from None

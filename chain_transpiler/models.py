"""Pydantic models for build step and node configuration.

WHY: Build configs are hand-written JSON. Pydantic models enforce field
types at load time, fill in defaults, and accept both the camelCase
spelling used in build configs ("filesTarget") and snake_case from
Python callers.

HOW: StepOptions describes one transpile step. NodeConfig is the JSON
config file the CLI reads: a list of steps for one node directory.

RULES:
- Every field has a Field(description=...)
- Defaults come from chain_transpiler.config (single source of truth)
- Unknown keys are rejected, so typos in configs fail loudly
- ``chain`` stays raw here; chain_transpiler.core.chain parses it
- ``params`` is opaque and forwarded to the transform unchanged
"""

from __future__ import annotations

from typing import Any, List, Optional

from pydantic import BaseModel, Field, field_validator

from chain_transpiler.config import (
    DEFAULT_CHAIN,
    DEFAULT_FILES_TARGET,
    DEFAULT_SOURCE_SUFFIXES,
    DEFAULT_TARGET,
    DEFAULT_TRANSFORM,
)


class StepOptions(BaseModel):
    """Options of one transpile step.

    RULES:
    - target / files_target are masks; "?" becomes the node name
    - source_suffixes selects files from the files target by suffix
    - chain defaults to ["source"]
    - transform is a key of chain_transpiler.transforms.TRANSFORMS
    """

    model_config = {"populate_by_name": True, "extra": "forbid"}

    target: str = Field(
        default=DEFAULT_TARGET,
        description="Mask of the artifact this step writes (e.g. '?.js').",
    )
    files_target: str = Field(
        default=DEFAULT_FILES_TARGET,
        alias="filesTarget",
        description="Mask of the file-list target supplying the source files.",
    )
    source_suffixes: List[str] = Field(
        default_factory=lambda: list(DEFAULT_SOURCE_SUFFIXES),
        alias="sourceSuffixes",
        description="File suffixes taken from the file list, e.g. 'vanilla.js'.",
    )
    chain: List[Any] = Field(
        default_factory=lambda: list(DEFAULT_CHAIN),
        description="Ordered chain of literal text and handler calls (ym, target, source).",
    )
    params: Optional[Any] = Field(
        default=None,
        description="Opaque options forwarded unchanged to the transform.",
    )
    transform: str = Field(
        default=DEFAULT_TRANSFORM,
        description="Name of the code transform applied to every segment.",
    )

    @field_validator("target", "files_target")
    @classmethod
    def _non_empty_mask(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("target masks must be non-empty")
        return value


class NodeConfig(BaseModel):
    """A node's build configuration file: the steps it can build.

    RULES:
    - steps are built in the order listed unless targets are requested
    - no two steps may write the same target (checked by DirectoryNode)
    """

    model_config = {"extra": "forbid"}

    steps: List[StepOptions] = Field(
        default_factory=list,
        description="Transpile steps registered on the node.",
    )

"""chain-transpiler: assemble one bundle from a chain of code fragments.

WHY: Front-end bundles are more than their source files: glue code,
a module loader, and pre-built sibling artifacts have to be stitched in
front of them in a precise order, and every piece must go through the
same code transform (e.g. Babel) without the pieces bleeding into each
other.

HOW: Four-stage pipeline: parse the chain (core.chain), resolve every
entry concurrently (core.resolver + handlers), transform and wrap each
segment (core.assembler), write the artifact (step, node). Each stage is
independently testable.

RULES:
- Chain order is artifact order, whatever order the reads finish in
- Every segment is wrapped in /* begin: <path> */ ... /* end: <path> */
- Only the ym handler tolerates a failed read; everything else aborts the step
"""

from chain_transpiler.models import NodeConfig, StepOptions
from chain_transpiler.node import BuildCycleError, DirectoryNode
from chain_transpiler.step import TranspileStep

__version__ = "0.1.0"

__all__ = [
    "BuildCycleError",
    "DirectoryNode",
    "NodeConfig",
    "StepOptions",
    "TranspileStep",
]

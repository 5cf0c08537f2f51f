"""The transpile build step.

WHY: This is the unit a build node runs: it gathers the node's source
files, resolves its chain, transforms every segment and writes one
artifact. Everything the step needs from the outside world comes in
through the node and the injectable collaborators, so it can be driven
by the CLI, by another step's ``target`` entry, or by tests.

HOW: TranspileStep parses its chain and picks its transform once, at
construction. build() returns the artifact text; run() builds and then
writes it to the step's target inside the node.

RULES:
- The files target is only required when the chain has a ``source`` entry
- Source files are the files-target listing filtered by source_suffixes
- run() writes only after build() succeeded; a failed build leaves the
  target untouched
- Chain and transform problems surface at construction, not mid-build
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, List, Optional, Union

from chain_transpiler.core.assembler import Transform, assemble
from chain_transpiler.core.chain import parse_chain, uses_handler
from chain_transpiler.core.context import (
    BuildNode,
    ModuleResolver,
    Reader,
    make_context,
    write_file,
)
from chain_transpiler.core.filelist import filter_by_suffixes, load_file_list
from chain_transpiler.core.ir import HandlerName, SourceFile
from chain_transpiler.core.resolver import resolve_chain
from chain_transpiler.models import StepOptions
from chain_transpiler.transforms import get_transform

logger = logging.getLogger(__name__)


class TranspileStep:
    """Assemble one artifact from a chain of literal text and handler calls.

    Args:
        options: Step options; built from ``overrides`` when omitted.
        transform: Transform callable overriding ``options.transform``;
            a string is taken as the ``transform`` option itself.
        reader: Async file reader injected into the build context.
        module_resolver: Module resolver injected into the build context.
        **overrides: StepOptions fields (snake_case or camelCase).
    """

    def __init__(
        self,
        options: Optional[StepOptions] = None,
        *,
        transform: Optional[Union[Transform, str]] = None,
        reader: Optional[Reader] = None,
        module_resolver: Optional[ModuleResolver] = None,
        **overrides: Any,
    ) -> None:
        if isinstance(transform, str):
            overrides["transform"] = transform
            transform = None
        if options is not None and overrides:
            raise TypeError("pass either StepOptions or option keywords, not both")
        self.options = options if options is not None else StepOptions(**overrides)
        self.chain = parse_chain(self.options.chain)
        self._transform = transform or get_transform(self.options.transform)
        self._reader = reader
        self._module_resolver = module_resolver

    def __repr__(self) -> str:
        return "TranspileStep(target={!r})".format(self.options.target)

    def target_name(self, node: BuildNode) -> str:
        return node.unmask_target_name(self.options.target)

    async def collect_source_files(self, node: BuildNode) -> List[SourceFile]:
        """Build the node's files target and return the accepted source files."""
        files_target = node.unmask_target_name(self.options.files_target)
        await node.require_sources([files_target])
        listing = await load_file_list(node.resolve_path(files_target), self._reader)
        files = filter_by_suffixes(listing, self.options.source_suffixes)
        logger.debug(
            "%s: %d of %d listed files match suffixes %s",
            files_target, len(files), len(listing), self.options.source_suffixes,
        )
        return files

    async def build(self, node: BuildNode) -> str:
        """Resolve the chain in ``node`` and return the artifact text."""
        source_files: List[SourceFile] = []
        if uses_handler(self.chain, HandlerName.SOURCE):
            source_files = await self.collect_source_files(node)

        context = make_context(
            node,
            source_files,
            reader=self._reader,
            module_resolver=self._module_resolver,
        )
        tree = await resolve_chain(self.chain, context)
        return assemble(tree, self._transform, self.options.params)

    async def run(self, node: BuildNode) -> Path:
        """Build the artifact and write it to the step's target.

        Returns:
            Path of the written artifact.
        """
        target = self.target_name(node)
        content = await self.build(node)
        path = Path(node.resolve_path(target))
        await write_file(path, content)
        logger.info("Built %s (%d chars)", target, len(content))
        return path

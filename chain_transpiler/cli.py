"""Command-line interface for chain-transpiler.

WHY: Builds run from a terminal or a CI script. The CLI wires a node
directory, its step configuration and the async build together behind a
single command, so a bundle can be produced without writing Python.

HOW: Uses argparse. Steps come from a JSON config file (--config, or
transpile.json inside the node directory when present); without one, a
single step is assembled from the step flags. The node is built with
asyncio.run(). Status messages go to stderr; artifacts are written into
the node directory.

RULES:
- Positional argument: the node directory
- Config file: {"steps": [...]}, a list of steps, or a single step object
- Step flags (--target, --files-target, --suffixes, --chain, --params,
  --transform) are only used when no config file applies
- --only builds a subset of targets (masks allowed, repeatable)
- Errors print "Error: <message>" to stderr and exit with status 1
- Status output goes to stderr (not stdout)
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Any, List, Optional

from chain_transpiler.config import (
    DEFAULT_FILES_TARGET,
    DEFAULT_SOURCE_SUFFIXES,
    DEFAULT_TARGET,
    DEFAULT_TRANSFORM,
    LOG_FORMAT,
    load_log_level,
)
from chain_transpiler.models import NodeConfig, StepOptions
from chain_transpiler.node import DirectoryNode
from chain_transpiler.step import TranspileStep
from chain_transpiler.transforms import TRANSFORMS

DEFAULT_CONFIG_NAME = "transpile.json"


def _status(msg: str) -> None:
    """Print a status message to stderr.

    WHY: Status output must not pollute stdout so the CLI can be piped.
    """
    print(msg, file=sys.stderr, flush=True)


def load_node_config(path: Path) -> NodeConfig:
    """Load a node config file.

    HOW: Accepts the three shapes people write: {"steps": [...]},
    a bare list of step objects, or one step object.

    Raises:
        ValueError: Invalid JSON or invalid step options.
        OSError: The file cannot be read.
    """
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ValueError("Invalid JSON in {}: {}".format(path, e)) from e

    if isinstance(data, list):
        data = {"steps": data}
    elif isinstance(data, dict) and "steps" not in data:
        data = {"steps": [data]}
    return NodeConfig.model_validate(data)


def _load_json_arg(value: str, flag: str) -> Any:
    """Parse a flag value as inline JSON, or as a path to a JSON file."""
    candidate = Path(value)
    text = candidate.read_text(encoding="utf-8") if candidate.is_file() else value
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise ValueError("{} expects JSON or a JSON file path: {}".format(flag, e)) from e


def _options_from_flags(args: argparse.Namespace) -> StepOptions:
    fields = {
        "target": args.target,
        "files_target": args.files_target,
        "transform": args.transform,
        "source_suffixes": [s.strip() for s in args.suffixes.split(",") if s.strip()],
    }
    if args.chain is not None:
        fields["chain"] = _load_json_arg(args.chain, "--chain")
    if args.params is not None:
        fields["params"] = _load_json_arg(args.params, "--params")
    return StepOptions(**fields)


def _resolve_config(args: argparse.Namespace, node_dir: Path) -> NodeConfig:
    if args.config:
        return load_node_config(Path(args.config))
    default_config = node_dir / DEFAULT_CONFIG_NAME
    if default_config.is_file():
        _status("Using {}".format(default_config))
        return load_node_config(default_config)
    return NodeConfig(steps=[_options_from_flags(args)])


async def _run_build(args: argparse.Namespace) -> List[Path]:
    node_dir = Path(args.node_dir).resolve()
    if not node_dir.is_dir():
        raise ValueError("Node directory does not exist: {}".format(node_dir))

    config = _resolve_config(args, node_dir)
    if not config.steps:
        raise ValueError("No build steps configured")

    node = DirectoryNode(node_dir, [TranspileStep(options) for options in config.steps])
    _status("Building {} in {}".format(", ".join(args.only or node.targets), node_dir))
    return await node.build(args.only)


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the CLI.

    WHY: Separating parser construction from main() makes the CLI
    testable: tests can inspect the parser without running a build.
    """
    parser = argparse.ArgumentParser(
        prog="chain-transpiler",
        description="Assemble a bundle from a chain of literal code, installed "
                    "modules, other targets and source files, transforming every piece.",
    )

    parser.add_argument(
        "node_dir",
        help="Node directory; targets are read from and written to it.",
    )

    parser.add_argument(
        "--config",
        default=None,
        help="JSON config with the node's steps "
             "(default: {} in the node directory, if present).".format(DEFAULT_CONFIG_NAME),
    )

    parser.add_argument(
        "--only",
        action="append",
        default=None,
        help="Build only this target (mask allowed). Can be specified multiple times.",
    )

    step = parser.add_argument_group("single step (used without a config file)")
    step.add_argument(
        "--target",
        default=DEFAULT_TARGET,
        help="Artifact mask (default: %(default)s).",
    )
    step.add_argument(
        "--files-target",
        default=DEFAULT_FILES_TARGET,
        help="File-list mask (default: %(default)s).",
    )
    step.add_argument(
        "--suffixes",
        default=",".join(DEFAULT_SOURCE_SUFFIXES),
        help="Comma-separated source suffixes (default: %(default)s).",
    )
    step.add_argument(
        "--chain",
        default=None,
        help="Chain as JSON (or a JSON file path), e.g. '[\"ym\", \"source\"]'.",
    )
    step.add_argument(
        "--params",
        default=None,
        help="Transform options as JSON (or a JSON file path).",
    )
    step.add_argument(
        "--transform",
        default=DEFAULT_TRANSFORM,
        help="Code transform. Available: {}. Default: %(default)s.".format(
            ", ".join(sorted(TRANSFORMS))
        ),
    )

    parser.add_argument(
        "--log-level",
        default=None,
        help="Logging level (default: CHAIN_TRANSPILER_LOG_LEVEL or WARNING).",
    )

    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """Entry point for the CLI.

    RULES:
    - argv=None means use sys.argv (normal CLI invocation)
    - Explicit argv is for testing
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        level = load_log_level(args.log_level)
    except ValueError as e:
        parser.error(str(e))
    logging.basicConfig(level=level, format=LOG_FORMAT)

    try:
        paths = asyncio.run(_run_build(args))
    except KeyboardInterrupt:
        _status("\nCancelled by user.")
        sys.exit(130)
    except Exception as e:
        # Config errors and build failures alike: the build step aborted.
        print("Error: {}".format(e), file=sys.stderr)
        sys.exit(1)

    _status("Done! Built {} file(s)".format(len(paths)))
    for path in paths:
        _status("  {}".format(path))


if __name__ == "__main__":
    main()

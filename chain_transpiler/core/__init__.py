"""Core chain resolution and assembly modules.

WHY: The core package contains the stable heart of the transpiler:
the IR dataclasses, chain parsing, concurrent resolution and the
assembler. Steps, nodes and the CLI are thin layers on top.

HOW: ir.py defines the data structures, chain.py parses raw chain
config, resolver.py resolves entries through the handler registry,
assembler.py flattens, transforms and concatenates. context.py carries
the injected collaborators; filelist.py and modules.py are the file-list
and module-lookup collaborators.

RULES:
- IR dataclasses are the contract; change with care
- Nothing in core writes files except context.write_file
- Core modules never import from step, node or cli
"""

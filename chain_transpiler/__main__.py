"""Package entry point for ``python -m chain_transpiler``.

HOW: Delegates to the CLI's main() function.
"""

from chain_transpiler.cli import main

if __name__ == "__main__":
    main()

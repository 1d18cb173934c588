# =============================================================================
# src/cli/__main__.py — Package Entry Point
# =============================================================================
#
# Enables running the CLI package itself as a module:
#     python -m src.cli <command> ...
#
# Delegates to the network CLI (network.py).
# =============================================================================

"""Allow ``python -m src.cli`` execution."""

from src.cli.network import main

main()

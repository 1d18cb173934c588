# =============================================================================
# src/cli/__init__.py — CLI Module Overview
# =============================================================================
#
# Command-line tools for collabNetwork, for operators who need to seed the
# identity store or inspect networks without the HTTP API.
#
# Architecture Notes:
#   - argparse for argument parsing (not Click/Typer).
#   - Heavy imports (LLM providers, the full DI assembly in src.main) are
#     deferred inside handlers so seed/options/invalidate start fast.
# =============================================================================

"""CLI tools for the collaboration-network pipeline.

- ``python -m src.cli seed``: load canonical artist records
- ``python -m src.cli build``: build and print a network
- ``python -m src.cli options``: disambiguation lookup
- ``python -m src.cli invalidate``: drop a persisted network
"""

# =============================================================================
# src/cli/network.py — Collaboration Network CLI
# =============================================================================
#
# Operator tool for the identity store and the network pipeline, without
# starting the web server:
#
#   seed        Load canonical artist records (JSON list or CSV with an
#               id,name[,bio] header) into the identity store.
#   build       Build (or read from cache) the network for one artist and
#               print it as text or JSON.
#   options     Print disambiguation options for a search term.
#   invalidate  Drop the persisted network of one canonical id.
#
# Typical usage:
#   python -m src.cli seed data/artists.json
#   python -m src.cli build "Taylor Swift" --json
#   python -m src.cli build "Obscure Act" --allow-hallucinations
#   python -m src.cli options lisa
#   python -m src.cli invalidate 0b1f...
#
# seed, options and invalidate only open the identity store.  build needs
# the full provider stack, so it imports src.main lazily.
# =============================================================================

"""Command-line interface for the collaboration-network pipeline.

Usage::

    python -m src.cli seed artists.csv
    python -m src.cli build "Taylor Swift" [--allow-hallucinations] [--refresh] [--json]
    python -m src.cli options "lisa"
    python -m src.cli invalidate <artist_id>
"""

from __future__ import annotations

import argparse
import asyncio
import csv
import json
import sys
from pathlib import Path
from typing import Any

from src.config.settings import Settings

_SEED_SUFFIXES = {".json", ".csv"}


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _quiet_logs() -> None:
    """Send structlog output to stderr at WARNING+ so stdout stays clean."""
    import logging

    import structlog

    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(colors=False),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(logging.WARNING),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )


def load_seed_records(path: Path) -> list[dict[str, Any]]:
    """Read artist records from a JSON list or a CSV file with a header row.

    Raises
    ------
    ValueError
        If the file type is unsupported or the JSON root is not a list.
    """
    suffix = path.suffix.lower()
    if suffix not in _SEED_SUFFIXES:
        raise ValueError(f"Unsupported seed file type: {suffix}")

    if suffix == ".json":
        data = json.loads(path.read_text(encoding="utf-8"))
        if not isinstance(data, list):
            raise ValueError("Seed JSON must be a list of artist records")
        return [r for r in data if isinstance(r, dict)]

    with open(path, newline="", encoding="utf-8") as f:
        return [dict(row) for row in csv.DictReader(f)]


def _format_text_network(body: dict[str, Any]) -> str:
    lines = [f"{body['artist_name']}  [{body['status']}]"]
    if body.get("source"):
        flags = " (speculative)" if body.get("hallucinated") else ""
        lines.append(f"source: {body['source']}{flags}   cached: {body['cached']}")
    if body.get("message"):
        lines.append(body["message"])
    lines.append("")
    for node in body["nodes"]:
        roles = ", ".join(node["types"])
        lines.append(f"  - {node['name']} ({roles}) size={node['size']}")
        if node.get("top_collaborations"):
            lines.append(f"      top: {', '.join(node['top_collaborations'])}")
    lines.append(f"\n{len(body['nodes'])} nodes, {len(body['links'])} links")
    return "\n".join(lines)


# ---------------------------------------------------------------------------
# Command handlers
# ---------------------------------------------------------------------------


async def _handle_seed(args: argparse.Namespace, app_settings: Settings) -> int:
    from src.providers.identity.sqlite_identity_store import SQLiteIdentityStore

    path = Path(args.file)
    if not path.exists():
        print(f"Error: File not found: {path}", file=sys.stderr)
        return 1
    try:
        records = load_seed_records(path)
    except (ValueError, json.JSONDecodeError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    store = SQLiteIdentityStore(db_path=app_settings.identity_db_path)
    await store.initialize()
    written = await store.import_artists(records)
    total = await store.count()
    print(f"Imported {written} of {len(records)} records ({total} artists in store)")
    return 0


async def _handle_options(args: argparse.Namespace, app_settings: Settings) -> int:
    from src.providers.identity.sqlite_identity_store import SQLiteIdentityStore

    store = SQLiteIdentityStore(db_path=app_settings.identity_db_path)
    await store.initialize()
    options = await store.search_options(args.query, limit=args.limit)
    if not options:
        print(f"No artists match '{args.query}'")
        return 1
    for option in options:
        bio = f"  {option.bio}" if option.bio else ""
        print(f"{option.id}  {option.name}{bio}")
    return 0


async def _handle_invalidate(args: argparse.Namespace, app_settings: Settings) -> int:
    from src.providers.identity.sqlite_identity_store import SQLiteIdentityStore

    store = SQLiteIdentityStore(db_path=app_settings.identity_db_path)
    await store.initialize()
    if await store.get_by_id(args.artist_id) is None:
        print(f"Error: Unknown artist id: {args.artist_id}", file=sys.stderr)
        return 1
    cleared = await store.clear_network(args.artist_id)
    print("Cleared" if cleared else "Nothing to clear")
    return 0


async def _handle_build(args: argparse.Namespace, app_settings: Settings) -> int:
    # src.main configures logging at import; quiet it again afterwards.
    from src.main import build_components
    from src.models.network import BuildOptions
    from src.utils.errors import NotFoundError

    if args.json_output:
        _quiet_logs()

    components = build_components(app_settings)
    await components["identity_store"].initialize()
    options = BuildOptions(
        allow_hallucinations=args.allow_hallucinations,
        force_refresh=args.refresh,
    )
    try:
        outcome = await components["network_builder"].build_for_name(args.artist, options)
    except NotFoundError as exc:
        print(f"Error: {exc.message}", file=sys.stderr)
        return 1
    finally:
        await components["http_client"].aclose()

    body = components["presenter"].network(outcome, args.artist).model_dump()
    if args.json_output:
        print(json.dumps(body, indent=2, ensure_ascii=False))
    else:
        print(_format_text_network(body))
    return 0


# ---------------------------------------------------------------------------
# Argument parser
# ---------------------------------------------------------------------------


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="python -m src.cli",
        description="Build and manage artist collaboration networks.",
    )
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # -- seed --
    seed_parser = subparsers.add_parser("seed", help="Load artist records into the identity store")
    seed_parser.add_argument("file", help="JSON list or CSV (id,name[,bio]) of artists")

    # -- build --
    build_parser = subparsers.add_parser("build", help="Build the network for an artist")
    build_parser.add_argument("artist", help="Artist name as stored in the identity store")
    build_parser.add_argument(
        "--allow-hallucinations",
        action="store_true",
        dest="allow_hallucinations",
        help="Fall back to a speculative LLM network when no verified source answers",
    )
    build_parser.add_argument(
        "--refresh",
        action="store_true",
        help="Ignore any persisted network and regenerate",
    )
    build_parser.add_argument(
        "--json",
        action="store_true",
        dest="json_output",
        help="Print the network as JSON",
    )

    # -- options --
    options_parser = subparsers.add_parser("options", help="List disambiguation options")
    options_parser.add_argument("query", help="Search term")
    options_parser.add_argument("--limit", type=int, default=10, help="Maximum options")

    # -- invalidate --
    invalidate_parser = subparsers.add_parser(
        "invalidate", help="Drop the persisted network for an artist id"
    )
    invalidate_parser.add_argument("artist_id", help="Canonical artist id")

    return parser


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


_HANDLERS = {
    "seed": _handle_seed,
    "build": _handle_build,
    "options": _handle_options,
    "invalidate": _handle_invalidate,
}


def main(argv: list[str] | None = None) -> None:
    """CLI entry point.  Exits 0 on success, 1 on any user-facing error."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    app_settings = Settings()
    exit_code = asyncio.run(_HANDLERS[args.command](args, app_settings))
    sys.exit(exit_code)


if __name__ == "__main__":
    main()

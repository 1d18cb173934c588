"""Unit tests for the collaboration-network CLI (src.cli.network)."""

from __future__ import annotations

import json
from argparse import Namespace
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from src.cli.network import (
    _build_parser,
    _format_text_network,
    _handle_build,
    _handle_invalidate,
    _handle_options,
    _handle_seed,
    load_seed_records,
    main,
)
from src.config.settings import Settings
from src.models.network import NetworkNode, NetworkResult, NodeWeight, Role
from src.utils.errors import NotFoundError


# ======================================================================
# load_seed_records
# ======================================================================


class TestLoadSeedRecords:

    def test_json_list(self, tmp_path: Path) -> None:
        path = tmp_path / "artists.json"
        path.write_text(json.dumps([{"id": "ts", "name": "Taylor Swift"}, "junk"]))
        assert load_seed_records(path) == [{"id": "ts", "name": "Taylor Swift"}]

    def test_json_root_must_be_list(self, tmp_path: Path) -> None:
        path = tmp_path / "artists.json"
        path.write_text(json.dumps({"id": "ts"}))
        with pytest.raises(ValueError):
            load_seed_records(path)

    def test_csv_with_header(self, tmp_path: Path) -> None:
        path = tmp_path / "artists.csv"
        path.write_text("id,name,bio\nts,Taylor Swift,Singer\nmm,Max Martin,\n", encoding="utf-8")
        records = load_seed_records(path)
        assert records[0] == {"id": "ts", "name": "Taylor Swift", "bio": "Singer"}
        assert records[1]["name"] == "Max Martin"

    def test_unsupported_suffix(self, tmp_path: Path) -> None:
        path = tmp_path / "artists.txt"
        path.write_text("ts Taylor Swift")
        with pytest.raises(ValueError, match="Unsupported"):
            load_seed_records(path)


# ======================================================================
# Argument parser
# ======================================================================


class TestParser:

    def test_build_flags(self) -> None:
        args = _build_parser().parse_args(
            ["build", "Taylor Swift", "--allow-hallucinations", "--refresh", "--json"]
        )
        assert args.command == "build"
        assert args.artist == "Taylor Swift"
        assert args.allow_hallucinations is True
        assert args.refresh is True
        assert args.json_output is True

    def test_build_defaults(self) -> None:
        args = _build_parser().parse_args(["build", "Ada"])
        assert args.allow_hallucinations is False
        assert args.refresh is False
        assert args.json_output is False

    def test_options_limit(self) -> None:
        args = _build_parser().parse_args(["options", "lisa", "--limit", "3"])
        assert args.query == "lisa"
        assert args.limit == 3

    def test_no_command_exits_1(self) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main([])
        assert exc_info.value.code == 1


# ======================================================================
# Store-only commands
# ======================================================================


class TestStoreCommands:

    @pytest.mark.asyncio
    async def test_seed_then_options_then_invalidate(
        self, tmp_path: Path, settings: Settings, capsys: pytest.CaptureFixture[str]
    ) -> None:
        seed = tmp_path / "artists.json"
        seed.write_text(json.dumps([
            {"id": "lisa-bp", "name": "LISA", "bio": "BLACKPINK member"},
            {"id": "lisa-l", "name": "Lisa Loeb"},
            {"id": "", "name": "Broken"},
        ]))

        assert await _handle_seed(Namespace(file=str(seed)), settings) == 0
        assert "Imported 2 of 3 records (2 artists in store)" in capsys.readouterr().out

        assert await _handle_options(Namespace(query="lisa", limit=10), settings) == 0
        out = capsys.readouterr().out
        assert "lisa-bp  LISA  BLACKPINK member" in out
        assert "lisa-l  Lisa Loeb" in out

        assert await _handle_invalidate(Namespace(artist_id="lisa-bp"), settings) == 0
        assert "Nothing to clear" in capsys.readouterr().out

    @pytest.mark.asyncio
    async def test_seed_missing_file(self, tmp_path: Path, settings: Settings) -> None:
        assert await _handle_seed(Namespace(file=str(tmp_path / "nope.json")), settings) == 1

    @pytest.mark.asyncio
    async def test_options_no_match(self, settings: Settings) -> None:
        assert await _handle_options(Namespace(query="zzz", limit=10), settings) == 1

    @pytest.mark.asyncio
    async def test_invalidate_unknown_id(self, settings: Settings) -> None:
        assert await _handle_invalidate(Namespace(artist_id="missing"), settings) == 1


# ======================================================================
# build
# ======================================================================


def _components(outcome=None, error: Exception | None = None) -> dict:
    from src.api.presenter import NetworkPresenter

    builder = MagicMock()
    builder.build_for_name = AsyncMock(return_value=outcome, side_effect=error)
    store = MagicMock()
    store.initialize = AsyncMock()
    client = MagicMock()
    client.aclose = AsyncMock()
    return {
        "identity_store": store,
        "network_builder": builder,
        "http_client": client,
        "presenter": NetworkPresenter({}, "https://musicnerd.xyz"),
    }


class TestBuildCommand:

    @pytest.mark.asyncio
    async def test_json_output(self, settings: Settings, capsys: pytest.CaptureFixture[str]) -> None:
        root = NetworkNode(id="Ada", name="Ada", roles=[Role.ARTIST], weight=NodeWeight.PRIMARY)
        components = _components(NetworkResult(nodes=[root], links=[], source="known"))
        args = Namespace(artist="Ada", allow_hallucinations=False, refresh=True, json_output=True)

        with patch("src.main.build_components", return_value=components), \
                patch("src.cli.network._quiet_logs"):
            assert await _handle_build(args, settings) == 0

        body = json.loads(capsys.readouterr().out)
        assert body["status"] == "ok"
        assert body["nodes"][0]["id"] == "Ada"
        options = components["network_builder"].build_for_name.call_args.args[1]
        assert options.force_refresh is True
        components["http_client"].aclose.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_unknown_artist(self, settings: Settings) -> None:
        components = _components(error=NotFoundError(message="Artist 'Nobody' not found"))
        args = Namespace(artist="Nobody", allow_hallucinations=False, refresh=False, json_output=False)

        with patch("src.main.build_components", return_value=components):
            assert await _handle_build(args, settings) == 1
        components["http_client"].aclose.assert_awaited_once()


class TestFormatTextNetwork:

    def test_renders_nodes_and_counts(self) -> None:
        body = {
            "artist_name": "Ada",
            "status": "ok",
            "source": "generative:openai",
            "hallucinated": True,
            "cached": False,
            "nodes": [
                {"name": "Ada", "types": ["artist"], "size": 30, "top_collaborations": []},
                {"name": "Bob", "types": ["producer", "songwriter"], "size": 20, "top_collaborations": ["Dee"]},
            ],
            "links": [{"source": "Ada", "target": "Bob"}],
        }
        text = _format_text_network(body)
        assert "(speculative)" in text
        assert "Bob (producer, songwriter) size=20" in text
        assert "top: Dee" in text
        assert text.endswith("2 nodes, 1 links")

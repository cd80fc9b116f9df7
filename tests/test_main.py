"""Tests for CLI parsing and settings assembly."""

from pathlib import Path

import pytest

from market_api.config import AppSettings, DatabaseSettings
from market_api.main import build_settings, parse_args, run


class TestParseArgs:
    """Command-line flags."""

    def test_defaults_left_unset(self) -> None:
        args = parse_args([])
        assert args.host is None
        assert args.port is None
        assert args.path_db_file is None
        assert args.strict_status_codes is None

    def test_short_flags(self) -> None:
        args = parse_args(["-H", "127.0.0.1", "-p", "9000", "--path-db-file", "x.db"])
        assert args.host == "127.0.0.1"
        assert args.port == 9000
        assert args.path_db_file == "x.db"


class TestBuildSettings:
    """CLI flags layered over environment."""

    def test_flags_override(self) -> None:
        settings = build_settings(
            parse_args(
                [
                    "--host", "127.0.0.1",
                    "--port", "9000",
                    "--path-db-file", "market.db",
                    "--strict-status-codes",
                    "--log-level", "DEBUG",
                ]
            )
        )
        assert settings.server.host == "127.0.0.1"
        assert settings.server.port == 9000
        assert settings.database.path == "market.db"
        assert settings.api.strict_status_codes is True
        assert settings.log_level == "DEBUG"

    def test_environment_used_when_flag_absent(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("DATABASE_PATH", "/data/from-env.db")
        monkeypatch.setenv("SERVER_PORT", "7000")
        settings = build_settings(parse_args([]))
        assert settings.database.path == "/data/from-env.db"
        assert settings.server.port == 7000
        assert settings.server.host == "0.0.0.0"

    def test_flag_beats_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("DATABASE_PATH", "/data/from-env.db")
        settings = build_settings(parse_args(["--path-db-file", "cli.db"]))
        assert settings.database.path == "cli.db"


class TestRun:
    """Startup refusal paths."""

    @pytest.mark.asyncio
    async def test_missing_database_path(self) -> None:
        settings = AppSettings(database=DatabaseSettings(path=""))
        assert await run(settings) == 1

    @pytest.mark.asyncio
    async def test_database_file_absent(self, tmp_path: Path) -> None:
        settings = AppSettings(database=DatabaseSettings(path=str(tmp_path / "absent.db")))
        assert await run(settings) == 1

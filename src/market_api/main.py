"""Entry point for the market API server.

Usage:
    market-api --path-db-file data/market.db
    market-api -H 127.0.0.1 -p 9000 --path-db-file data/market.db --log-level DEBUG

Every flag falls back to its environment variable (see market_api.config),
so ``DATABASE_PATH=data/market.db market-api`` works as well.
"""

from __future__ import annotations

import argparse
import asyncio
import os
import sys

import uvicorn

from market_api import __version__
from market_api.config import ApiSettings, AppSettings, DatabaseSettings, ServerSettings
from market_api.logging import get_logger, setup_logging


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    # -h is the host flag, so help is --help only
    parser = argparse.ArgumentParser(
        prog="market-api",
        description="OHLC and bot registration API",
        add_help=False,
    )
    parser.add_argument("--help", action="help", help="Show this message and exit")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "-H", "--host", type=str, default=None,
        help="Bind address (default: 0.0.0.0)",
    )
    parser.add_argument(
        "-p", "--port", type=int, default=None,
        help="Bind port (default: 8080)",
    )
    parser.add_argument(
        "--path-db-file", type=str, default=None,
        help="SQLite database file with the bot and ohlc tables",
    )
    parser.add_argument(
        "--log-level", type=str, default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: INFO)",
    )
    parser.add_argument(
        "--strict-status-codes", action="store_true", default=None,
        help="Map validation/not-found/pool errors to 422/404/503 instead of 500",
    )
    return parser.parse_args(argv)


def _given(**values: object) -> dict[str, object]:
    """Drop options the user did not pass so env/defaults apply."""
    return {key: value for key, value in values.items() if value is not None}


def build_settings(args: argparse.Namespace) -> AppSettings:
    """Combine CLI flags with environment-backed settings; flags win."""
    return AppSettings(
        **_given(log_level=args.log_level),
        server=ServerSettings(**_given(host=args.host, port=args.port)),
        database=DatabaseSettings(**_given(path=args.path_db_file)),
        api=ApiSettings(**_given(strict_status_codes=args.strict_status_codes)),
    )


async def run(settings: AppSettings) -> int:
    """Serve until shutdown. Returns the process exit code."""
    from market_api.api.app import create_app

    logger = get_logger("market_api.main")

    db_path = settings.database.path
    if not db_path:
        logger.error("missing_database_path", hint="pass --path-db-file or set DATABASE_PATH")
        return 1
    if not os.path.isfile(db_path):
        logger.error("database_file_not_found", db_path=db_path)
        return 1

    app = create_app(settings)

    logger.info(
        "starting_server",
        host=settings.server.host,
        port=settings.server.port,
        db_path=db_path,
    )

    config = uvicorn.Config(
        app,
        host=settings.server.host,
        port=settings.server.port,
        log_config=None,  # keep the structlog handlers from setup_logging
    )
    server = uvicorn.Server(config)
    await server.serve()

    if not server.started:
        logger.error("server_startup_failed")
        return 1
    logger.info("server_stopped")
    return 0


def main(argv: list[str] | None = None) -> None:
    """Synchronous entry point."""
    settings = build_settings(parse_args(argv))
    setup_logging(settings.log_level)
    sys.exit(asyncio.run(run(settings)))


if __name__ == "__main__":
    main()

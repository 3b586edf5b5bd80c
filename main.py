"""Command-line interface for the user service."""

from __future__ import annotations
import argparse
import logging
import sys
from pathlib import Path
from typing import Sequence

from userservice.config import AppConfig, DatabaseConfig, ServerConfig, load_config
from userservice.database import Database, resolve_database_path

logger = logging.getLogger("userservice.main")


def _parse_args(argv: Sequence[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="User service utilities")
    subparsers = parser.add_subparsers(dest="command")

    parser.set_defaults(command="serve")

    init_parser = subparsers.add_parser("init-db", help="Create the users table")
    init_parser.add_argument("--db", dest="db_path", default=None, help="Path to the SQLite database")

    serve_parser = subparsers.add_parser("serve", help="Start the HTTP API")
    serve_parser.add_argument("--host", default=None, help="Bind address (default: from configuration)")
    serve_parser.add_argument("--port", type=int, default=None, help="Port (default: from configuration)")
    serve_parser.add_argument("--db", dest="db_path", default=None, help="Path to the SQLite database")

    args_list = list(argv) if argv is not None else sys.argv[1:]
    known_commands = {"serve", "init-db"}

    if not args_list:
        args_list = ["serve"]
    else:
        first = args_list[0]
        if first in ("-h", "--help"):
            return parser.parse_args(args_list)
        if first not in known_commands:
            if any(flag in args_list for flag in ("-h", "--help")):
                return parser.parse_args(args_list)
            args_list = ["serve", *args_list]

    return parser.parse_args(args_list)


def _apply_overrides(config: AppConfig, args: argparse.Namespace) -> AppConfig:
    server = config.server
    host = getattr(args, "host", None)
    port = getattr(args, "port", None)
    if host is not None or port is not None:
        server = ServerConfig(
            host=host if host is not None else server.host,
            port=port if port is not None else server.port,
        )

    database = config.database
    if args.db_path:
        database = DatabaseConfig(path=resolve_database_path(args.db_path))

    return AppConfig(server=server, database=database)


def _initialise_database(path: Path) -> Database:
    database = Database(path)
    database.initialize()
    logger.info("Database initialised at %s", path)
    return database


def _serve(config: AppConfig, database: Database) -> None:
    from userservice.application import create_application
    import uvicorn

    logger.info("Starting user service on http://%s:%s", config.server.host, config.server.port)

    app = create_application(config=config, database=database)
    uvicorn.run(app, host=config.server.host, port=config.server.port, log_level="info")


def main(argv: Sequence[str] | None = None) -> None:
    """Entry point for CLI usage."""

    logging.basicConfig(level=logging.INFO, format="%(asctime)s [%(levelname)s] %(message)s")

    args = _parse_args(argv)
    try:
        config = _apply_overrides(load_config(), args)
    except ValueError as exc:
        raise SystemExit(f"Invalid configuration: {exc}") from exc

    database = _initialise_database(config.database.path)

    if args.command == "serve":
        _serve(config, database)
    elif args.command == "init-db":
        print("Database initialisation complete.")


if __name__ == "__main__":
    main()

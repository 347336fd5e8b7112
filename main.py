"""Command-line interface for the Taskboard task tracker."""

from __future__ import annotations
import argparse
import logging
import sys
from pathlib import Path
from typing import Sequence

from taskboard.config import Settings, load_settings
from taskboard.sessions import SessionStore
from taskboard.storage import SQLiteKeyValueStore

logger = logging.getLogger("taskboard.main")


def _parse_args(argv: Sequence[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Taskboard personal task tracker")
    parser.add_argument(
        "--config",
        default=None,
        help="Path to a YAML settings file (default: TASKBOARD_CONFIG or config/taskboard.yaml)",
    )
    subparsers = parser.add_subparsers(dest="command")

    parser.set_defaults(command="serve")

    subparsers.add_parser("init-db", help="Create the local storage file")
    subparsers.add_parser("users", help="List registered accounts")

    serve_parser = subparsers.add_parser("serve", help="Start the HTTP service")
    serve_parser.add_argument("--host", default=None, help="Bind address (default from settings)")
    serve_parser.add_argument("--port", type=int, default=None, help="Port (default from settings)")

    args_list = list(argv) if argv is not None else sys.argv[1:]
    known_commands = {"serve", "init-db", "users"}

    # Allow "main.py --port 9000" as shorthand for "main.py serve --port 9000".
    global_options: list[str] = []
    if args_list[:1] == ["--config"] and len(args_list) >= 2:
        global_options, args_list = args_list[:2], args_list[2:]
    elif args_list and args_list[0].startswith("--config="):
        global_options, args_list = args_list[:1], args_list[1:]

    if not args_list:
        args_list = ["serve"]
    else:
        first = args_list[0]
        if first in ("-h", "--help"):
            return parser.parse_args([*global_options, *args_list])
        if first not in known_commands:
            if any(flag in args_list for flag in ("-h", "--help")):
                return parser.parse_args([*global_options, *args_list])
            args_list = ["serve", *args_list]

    return parser.parse_args([*global_options, *args_list])


def _initialise_storage(settings: Settings) -> SQLiteKeyValueStore:
    storage = SQLiteKeyValueStore(settings.storage_path)
    storage.initialize()
    logger.info("Storage initialised at %s", settings.storage_path)
    return storage


def _serve(*, storage: SQLiteKeyValueStore, settings: Settings, host: str, port: int) -> None:
    from taskboard.service import create_app
    import uvicorn

    logger.info("Starting Taskboard on http://%s:%s", host, port)
    app = create_app(storage=storage, settings=settings)
    uvicorn.run(app, host=host, port=port, log_level=settings.log_level.lower())


def _list_users(storage: SQLiteKeyValueStore) -> None:
    users = SessionStore(storage).list_users()
    if not users:
        print("No users are currently registered.")
        return

    print(f"{len(users)} user(s) found:")
    print(f"{'ID':<34}  Email")
    print("-" * 72)
    for user in users:
        print(f"{user.id:<34}  {user.email}")


def main(argv: Sequence[str] | None = None) -> None:
    """Entry point for CLI usage."""

    args = _parse_args(argv)
    config_path = Path(args.config).expanduser() if args.config else None
    settings = load_settings(config_path)

    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(message)s",
    )

    storage = _initialise_storage(settings)

    if args.command == "serve":
        _serve(
            storage=storage,
            settings=settings,
            host=args.host or settings.host,
            port=args.port or settings.port,
        )
    elif args.command == "users":
        _list_users(storage)
    elif args.command == "init-db":
        print("Storage initialisation complete.")


if __name__ == "__main__":
    main()

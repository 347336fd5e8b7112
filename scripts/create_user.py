import argparse
import getpass
import sys
from pathlib import Path
from typing import Sequence

ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from taskboard.config import load_settings
from taskboard.sessions import PASSWORD_MIN_LENGTH, SessionStore
from taskboard.storage import SQLiteKeyValueStore, resolve_storage_path


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Register a Taskboard account")
    parser.add_argument("email", help="Email address used to log in")
    parser.add_argument(
        "--config",
        default=None,
        help="Path to a YAML settings file (default: TASKBOARD_CONFIG or config/taskboard.yaml)",
    )
    parser.add_argument(
        "--storage",
        dest="storage_path",
        default=None,
        help="Path to the storage file (overrides the configured storage_path)",
    )
    return parser.parse_args(argv)


def prompt_for_password() -> tuple[str, str]:
    password = getpass.getpass(f"Password (min {PASSWORD_MIN_LENGTH} characters): ")
    confirm = getpass.getpass("Confirm password: ")
    return password, confirm


def main(argv: Sequence[str] | None = None) -> int:
    args = parse_args(argv)

    if args.storage_path:
        storage_path = resolve_storage_path(args.storage_path)
    else:
        config_path = Path(args.config).expanduser() if args.config else None
        storage_path = load_settings(config_path).storage_path

    storage = SQLiteKeyValueStore(storage_path)
    storage.initialize()
    sessions = SessionStore(storage)

    for _ in range(3):
        password, confirm = prompt_for_password()
        result = sessions.register(args.email.strip(), password, confirm)
        if result.ok and result.value is not None:
            print(f"Created user {result.value.id} <{result.value.email}>")
            print("The new account is now the active session for this profile.")
            return 0

        assert result.error is not None
        print(f"Error: {result.error.message}", file=sys.stderr)
        if result.error.kind != "validation":
            return 1

    raise SystemExit("Failed to set password after three attempts.")


if __name__ == "__main__":
    raise SystemExit(main())

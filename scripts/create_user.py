import argparse
import os
import sys
from pathlib import Path

import anyio

ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from userservice.database import Database, resolve_database_path
from userservice.errors import AppError
from userservice.repositories import SQLiteUserRepository
from userservice.usecases import CreateUserUseCase


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Create a user record")
    parser.add_argument("email", help="Unique email address")
    parser.add_argument("name", help="Display name for the user")
    parser.add_argument(
        "--db",
        dest="db_path",
        default=None,
        help="Path to the SQLite database (defaults to USERSERVICE_DB_PATH or data/users.sqlite3)",
    )
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)

    db_env = args.db_path or os.getenv("USERSERVICE_DB_PATH")
    database = Database(resolve_database_path(db_env))
    database.initialize()

    create_user = CreateUserUseCase(SQLiteUserRepository(database))

    try:
        user = anyio.run(create_user, args.email, args.name)
    except AppError as exc:  # blank name, bad email, duplicates
        print(f"Error: {exc.message}", file=sys.stderr)
        return 1

    print(f"Created user #{user.id.value}: {user.name} <{user.email.value}>")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

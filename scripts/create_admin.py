from __future__ import annotations

import argparse
import getpass
import importlib

from dotenv import load_dotenv

from daylog.config import get_settings_module
from daylog.database.bootstrap import create_schema, ensure_admin_user
from daylog.database.connection import create_db_engine
from daylog.store.sql_store import SqlEntityStore


def main() -> None:
    parser = argparse.ArgumentParser(description="Create an admin account in the configured database.")
    parser.add_argument("username")
    parser.add_argument("--password", help="prompted for when omitted")
    args = parser.parse_args()

    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    if not settings.DATABASE_URL:
        raise SystemExit("DATABASE_URL is not set; admin accounts need the relational store")

    engine = create_db_engine(settings.DATABASE_URL)
    create_schema(engine)
    password = args.password or getpass.getpass("Password: ")
    user = ensure_admin_user(SqlEntityStore(engine), username=args.username, password=password)
    print(f"OK: admin {user.username} (id={user.id})")


if __name__ == "__main__":
    main()

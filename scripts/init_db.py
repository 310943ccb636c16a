from __future__ import annotations

import importlib

from dotenv import load_dotenv

from daylog.config import get_settings_module
from daylog.database.bootstrap import create_schema, list_tables, seed_default_projects
from daylog.database.connection import create_db_engine
from daylog.store.sql_store import SqlEntityStore


def main() -> None:
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    if not settings.DATABASE_URL:
        raise SystemExit("DATABASE_URL is not set; nothing to initialise")

    engine = create_db_engine(settings.DATABASE_URL)
    create_schema(engine)
    seed_default_projects(SqlEntityStore(engine))
    print(f"OK: schema ready -> {engine.url.render_as_string(hide_password=True)} (tables={len(list_tables(engine))})")


if __name__ == "__main__":
    main()

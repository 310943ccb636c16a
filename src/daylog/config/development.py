import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

# Empty/unset DATABASE_URL runs on the in-memory store.
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///daylog-dev.db")

GOOGLE_SERVICE_ACCOUNT_JSON = os.getenv("GOOGLE_SERVICE_ACCOUNT_JSON")
GOOGLE_SHEET_ID = os.getenv("GOOGLE_SHEET_ID")
PROJECT_CACHE_SECONDS = int(os.getenv("PROJECT_CACHE_SECONDS", "300"))
MIRROR_WORKERS = int(os.getenv("MIRROR_WORKERS", "2"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")
DEBUG = True

# If enabled, app creates the tables on startup (idempotent)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
# Optional: also seed the default projects on startup
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "1")))

import os

SECRET_KEY = "test-secret"

# Unset -> in-memory store; point at SQLite/MySQL to exercise the relational store.
DATABASE_URL = os.getenv("TEST_DATABASE_URL")

GOOGLE_SERVICE_ACCOUNT_JSON = None
GOOGLE_SHEET_ID = None
PROJECT_CACHE_SECONDS = 300
MIRROR_WORKERS = 1

LOG_LEVEL = "WARNING"
DEBUG = False
TESTING = True

AUTO_INIT_DB = True
AUTO_SEED_DB = False

from __future__ import annotations

from typing import Iterable

from sqlalchemy import inspect
from sqlalchemy.engine import Engine
from werkzeug.security import generate_password_hash

from ..core.constants import DEFAULT_PROJECTS
from ..core.enums import Role
from ..core.logging import get_logger
from ..store.repository import EntityStore
from ..users.model import User
from .schema import metadata

logger = get_logger(__name__)


def create_schema(engine: Engine) -> None:
    """Create users/projects/time_entries (idempotent: CREATE IF NOT EXISTS)."""
    metadata.create_all(engine)


def list_tables(engine: Engine) -> list[str]:
    return sorted(inspect(engine).get_table_names())


def seed_default_projects(store: EntityStore, names: Iterable[str] = DEFAULT_PROJECTS) -> None:
    """Create the starter projects when there is no active project yet."""
    try:
        if store.list_active_projects():
            return
        for name in names:
            store.create_project(name)
        logger.info("projects_seeded", count=len(store.list_projects()))
    except Exception:
        # Startup continues without seed data.
        logger.exception("project_seed_failed")


def ensure_admin_user(store: EntityStore, *, username: str, password: str) -> User:
    existing = store.get_user_by_username(username)
    if existing is not None:
        return existing
    user = store.create_user(username=username, password_hash=generate_password_hash(password), role=Role.ADMIN)
    logger.info("admin_user_created", username=username)
    return user

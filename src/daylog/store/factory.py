from __future__ import annotations

from typing import Any, Optional

from ..core.logging import get_logger
from ..database.bootstrap import create_schema
from ..database.connection import create_db_engine
from ..mirror.dispatcher import MirrorDispatcher
from .memory_store import InMemoryEntityStore
from .repository import EntityStore
from .sql_store import SqlEntityStore

logger = get_logger(__name__)


def build_store(settings: Any, *, dispatcher: Optional[MirrorDispatcher] = None) -> EntityStore:
    """Pick the backend once at startup: DATABASE_URL present -> relational, else in-memory."""
    database_url = getattr(settings, "DATABASE_URL", None)
    if not database_url:
        logger.warning("store_in_memory", reason="DATABASE_URL not set")
        return InMemoryEntityStore(dispatcher)

    engine = create_db_engine(database_url)
    if getattr(settings, "AUTO_INIT_DB", False):
        create_schema(engine)
    logger.info("store_relational", backend=engine.dialect.name)
    return SqlEntityStore(engine, dispatcher)

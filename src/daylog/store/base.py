from __future__ import annotations

from typing import Optional

from ..core.logging import get_logger
from ..entries.model import TimeEntry
from ..mirror.base import MirrorRecord
from ..mirror.dispatcher import MirrorDispatcher
from .locks import KeyedLock

logger = get_logger(__name__)


class MirroredStore:
    """Mirror plumbing shared by both store backends."""

    def __init__(self, dispatcher: Optional[MirrorDispatcher] = None):
        self._dispatcher = dispatcher
        self._admission_locks = KeyedLock()

    def create_project(self, name: str):
        raise NotImplementedError

    def _sync_projects_from_mirror(self) -> None:
        if self._dispatcher is None:
            return
        try:
            names = self._dispatcher.list_project_names()
            for name in names:
                self.create_project(name)
        except Exception:
            logger.exception("project_sync_failed")

    def _notify_created(self, entry: TimeEntry, *, username: str, project_name: str) -> None:
        if self._dispatcher is None:
            return
        self._dispatcher.submit(
            MirrorRecord(
                entry_id=entry.id,
                username=username,
                project_name=project_name,
                date=entry.date,
                time_spent=entry.time_spent,
                created_at=entry.created_at,
            )
        )

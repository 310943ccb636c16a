from __future__ import annotations

from typing import Sequence

from ..store.repository import EntityStore
from .model import Project


class ProjectService:
    def __init__(self, store: EntityStore):
        self._store = store

    def list_active(self) -> Sequence[Project]:
        return self._store.list_active_projects()

from __future__ import annotations

import threading
from contextlib import contextmanager
from dataclasses import replace
from decimal import Decimal
from typing import Iterator, Optional, Sequence

from ..common.datetime_utils import now_local
from ..core.enums import Role
from ..core.exceptions import ConflictError, NotFoundError
from ..entries.model import EntryWithProject, EntryWithUserAndProject, TimeEntry
from ..mirror.dispatcher import MirrorDispatcher
from ..projects.model import Project
from ..users.model import User
from .base import MirroredStore


def _newest_first(entries: list[TimeEntry]) -> list[TimeEntry]:
    return sorted(entries, key=lambda e: (e.date, e.created_at, e.id), reverse=True)


class InMemoryEntityStore(MirroredStore):
    """Volatile backend: id-keyed maps behind one re-entrant lock.

    Used when no DATABASE_URL is configured and by the contract tests.
    """

    def __init__(self, dispatcher: Optional[MirrorDispatcher] = None):
        super().__init__(dispatcher)
        self._lock = threading.RLock()
        self._users: dict[int, User] = {}
        self._projects: dict[int, Project] = {}
        self._entries: dict[int, TimeEntry] = {}
        self._next_user_id = 1
        self._next_project_id = 1
        self._next_entry_id = 1

    # users

    def get_user(self, user_id: int) -> Optional[User]:
        with self._lock:
            return self._users.get(int(user_id))

    def get_user_by_username(self, username: str) -> Optional[User]:
        with self._lock:
            for user in self._users.values():
                if user.username == username:
                    return user
            return None

    def create_user(self, *, username: str, password_hash: str, role: Role = Role.EMPLOYEE) -> User:
        with self._lock:
            if self.get_user_by_username(username) is not None:
                raise ConflictError(f"Username already exists: {username}")
            user = User(id=self._next_user_id, username=username, password_hash=password_hash, role=Role(role))
            self._users[user.id] = user
            self._next_user_id += 1
            return user

    def list_users(self) -> Sequence[User]:
        with self._lock:
            return [self._users[k] for k in sorted(self._users)]

    # projects

    def get_project(self, project_id: int) -> Optional[Project]:
        with self._lock:
            return self._projects.get(int(project_id))

    def _find_project_by_name(self, name: str) -> Optional[Project]:
        for project in self._projects.values():
            if project.name == name:
                return project
        return None

    def list_active_projects(self) -> Sequence[Project]:
        self._sync_projects_from_mirror()
        with self._lock:
            return [self._projects[k] for k in sorted(self._projects) if self._projects[k].is_active]

    def list_projects(self) -> Sequence[Project]:
        with self._lock:
            return [self._projects[k] for k in sorted(self._projects)]

    def create_project(self, name: str) -> Project:
        name = name.strip()
        with self._lock:
            existing = self._find_project_by_name(name)
            if existing is not None:
                if not existing.is_active:
                    existing = replace(existing, is_active=True)
                    self._projects[existing.id] = existing
                return existing
            project = Project(id=self._next_project_id, name=name, is_active=True)
            self._projects[project.id] = project
            self._next_project_id += 1
            return project

    def deactivate_project(self, project_id: int) -> bool:
        with self._lock:
            project = self._projects.get(int(project_id))
            if project is None:
                return False
            self._projects[project.id] = replace(project, is_active=False)
            return True

    # entries

    def list_entries_for_user(self, user_id: int) -> Sequence[EntryWithProject]:
        with self._lock:
            own = [e for e in self._entries.values() if e.user_id == int(user_id)]
            return [EntryWithProject(entry=e, project=self._projects[e.project_id]) for e in _newest_first(own)]

    def list_all_entries(self) -> Sequence[EntryWithUserAndProject]:
        with self._lock:
            return [
                EntryWithUserAndProject(entry=e, user=self._users[e.user_id], project=self._projects[e.project_id])
                for e in _newest_first(list(self._entries.values()))
            ]

    def list_entries_for_user_and_date(self, user_id: int, date: str) -> Sequence[TimeEntry]:
        with self._lock:
            return [e for e in self._entries.values() if e.user_id == int(user_id) and e.date == date]

    def create_entry(self, *, user_id: int, project_id: int, date: str, time_spent: Decimal) -> TimeEntry:
        with self._lock:
            project = self._projects.get(int(project_id))
            if project is None:
                raise NotFoundError(f"Project not found: {project_id}")
            user = self._users.get(int(user_id))
            if user is None:
                raise NotFoundError(f"User not found: {user_id}")
            entry = TimeEntry(
                id=self._next_entry_id,
                user_id=int(user_id),
                project_id=project.id,
                date=date,
                time_spent=Decimal(time_spent),
                created_at=now_local(),
            )
            self._entries[entry.id] = entry
            self._next_entry_id += 1

        self._notify_created(entry, username=user.username, project_name=project.name)
        return entry

    @contextmanager
    def admission_scope(self, user_id: int, date: str) -> Iterator[None]:
        with self._admission_locks.hold((int(user_id), date)):
            yield

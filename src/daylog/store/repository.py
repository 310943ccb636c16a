from __future__ import annotations

from decimal import Decimal
from typing import ContextManager, Optional, Protocol, Sequence

from ..core.enums import Role
from ..entries.model import EntryWithProject, EntryWithUserAndProject, TimeEntry
from ..projects.model import Project
from ..users.model import User


class EntityStore(Protocol):
    """Store contract shared by the relational and in-memory backends.

    Note (DIP): services depend on this interface, never on a concrete DB.
    Both backends must return observably identical results for the same call
    sequence.
    """

    def get_user(self, user_id: int) -> Optional[User]:
        raise NotImplementedError

    def get_user_by_username(self, username: str) -> Optional[User]:
        raise NotImplementedError

    def create_user(self, *, username: str, password_hash: str, role: Role = Role.EMPLOYEE) -> User:
        """Raises ConflictError when the username is taken."""

        raise NotImplementedError

    def list_users(self) -> Sequence[User]:
        raise NotImplementedError

    def get_project(self, project_id: int) -> Optional[Project]:
        raise NotImplementedError

    def list_active_projects(self) -> Sequence[Project]:
        """Active projects ordered by id, after a best-effort mirror refresh."""

        raise NotImplementedError

    def list_projects(self) -> Sequence[Project]:
        raise NotImplementedError

    def create_project(self, name: str) -> Project:
        """Idempotent by name; reactivates a deactivated project."""

        raise NotImplementedError

    def deactivate_project(self, project_id: int) -> bool:
        raise NotImplementedError

    def list_entries_for_user(self, user_id: int) -> Sequence[EntryWithProject]:
        raise NotImplementedError

    def list_all_entries(self) -> Sequence[EntryWithUserAndProject]:
        raise NotImplementedError

    def list_entries_for_user_and_date(self, user_id: int, date: str) -> Sequence[TimeEntry]:
        raise NotImplementedError

    def create_entry(self, *, user_id: int, project_id: int, date: str, time_spent: Decimal) -> TimeEntry:
        """Raises NotFoundError for an unknown project; notifies the mirror without waiting."""

        raise NotImplementedError

    def admission_scope(self, user_id: int, date: str) -> ContextManager[None]:
        """Serialise check-then-create for one (user, date) pair."""

        raise NotImplementedError

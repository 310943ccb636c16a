from __future__ import annotations

from contextlib import contextmanager
from decimal import Decimal
from typing import Any, Iterator, Mapping, Optional, Sequence

from sqlalchemy import and_, select, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError

from ..common.datetime_utils import now_local
from ..core.enums import Role
from ..core.exceptions import AdmissionBusyError, ConflictError, NotFoundError
from ..core.logging import get_logger
from ..database.schema import projects, time_entries, users
from ..entries.model import EntryWithProject, EntryWithUserAndProject, TimeEntry
from ..mirror.dispatcher import MirrorDispatcher
from ..projects.model import Project
from ..users.model import User
from .base import MirroredStore

logger = get_logger(__name__)

ADVISORY_LOCK_TIMEOUT_SECONDS = 10

_ENTRY_ORDER = (time_entries.c.date.desc(), time_entries.c.created_at.desc(), time_entries.c.id.desc())


def _to_user(row: Mapping[str, Any]) -> User:
    return User(
        id=int(row["id"]),
        username=row["username"],
        password_hash=row["password"],
        role=Role(row["role"]),
    )


def _to_project(row: Mapping[str, Any]) -> Project:
    return Project(id=int(row["id"]), name=row["name"], is_active=bool(row["is_active"]))


def _to_entry(row: Mapping[str, Any]) -> TimeEntry:
    return TimeEntry(
        id=int(row["id"]),
        user_id=int(row["user_id"]),
        project_id=int(row["project_id"]),
        date=row["date"],
        # Normalise driver-specific numeric values to one decimal place.
        time_spent=Decimal(str(row["time_spent"])).quantize(Decimal("0.1")),
        created_at=row["created_at"],
    )


def _prefixed(row: Mapping[str, Any], prefix: str) -> dict:
    return {k[len(prefix):]: v for k, v in row.items() if k.startswith(prefix)}


class SqlEntityStore(MirroredStore):
    """Durable backend over SQLAlchemy Core (MySQL in production, SQLite in tests)."""

    def __init__(
        self,
        engine: Engine,
        dispatcher: Optional[MirrorDispatcher] = None,
        *,
        advisory_locks: Optional[bool] = None,
        lock_timeout: int = ADVISORY_LOCK_TIMEOUT_SECONDS,
    ):
        super().__init__(dispatcher)
        self._engine = engine
        # Named locks (GET_LOCK) are MySQL only; None means detect from the dialect.
        self._advisory_locks = engine.dialect.name == "mysql" if advisory_locks is None else advisory_locks
        self._lock_timeout = lock_timeout

    # users

    def get_user(self, user_id: int) -> Optional[User]:
        with self._engine.connect() as conn:
            row = conn.execute(select(users).where(users.c.id == int(user_id))).mappings().first()
            return _to_user(row) if row else None

    def get_user_by_username(self, username: str) -> Optional[User]:
        with self._engine.connect() as conn:
            row = conn.execute(select(users).where(users.c.username == username)).mappings().first()
            return _to_user(row) if row else None

    def create_user(self, *, username: str, password_hash: str, role: Role = Role.EMPLOYEE) -> User:
        role = Role(role)
        try:
            with self._engine.begin() as conn:
                result = conn.execute(
                    users.insert().values(username=username, password=password_hash, role=role.value)
                )
                user_id = int(result.inserted_primary_key[0])
        except IntegrityError:
            raise ConflictError(f"Username already exists: {username}") from None
        return User(id=user_id, username=username, password_hash=password_hash, role=role)

    def list_users(self) -> Sequence[User]:
        with self._engine.connect() as conn:
            rows = conn.execute(select(users).order_by(users.c.id)).mappings().all()
            return [_to_user(r) for r in rows]

    # projects

    def get_project(self, project_id: int) -> Optional[Project]:
        with self._engine.connect() as conn:
            row = conn.execute(select(projects).where(projects.c.id == int(project_id))).mappings().first()
            return _to_project(row) if row else None

    def list_active_projects(self) -> Sequence[Project]:
        self._sync_projects_from_mirror()
        with self._engine.connect() as conn:
            rows = conn.execute(
                select(projects).where(projects.c.is_active.is_(True)).order_by(projects.c.id)
            ).mappings().all()
            return [_to_project(r) for r in rows]

    def list_projects(self) -> Sequence[Project]:
        with self._engine.connect() as conn:
            rows = conn.execute(select(projects).order_by(projects.c.id)).mappings().all()
            return [_to_project(r) for r in rows]

    def create_project(self, name: str) -> Project:
        name = name.strip()
        try:
            return self._upsert_project(name)
        except IntegrityError:
            # Lost an insert race against another writer; the row exists now.
            return self._upsert_project(name)

    def _upsert_project(self, name: str) -> Project:
        with self._engine.begin() as conn:
            row = conn.execute(select(projects).where(projects.c.name == name)).mappings().first()
            if row is not None:
                if not row["is_active"]:
                    conn.execute(projects.update().where(projects.c.id == row["id"]).values(is_active=True))
                return Project(id=int(row["id"]), name=row["name"], is_active=True)
            result = conn.execute(projects.insert().values(name=name, is_active=True))
            return Project(id=int(result.inserted_primary_key[0]), name=name, is_active=True)

    def deactivate_project(self, project_id: int) -> bool:
        with self._engine.begin() as conn:
            result = conn.execute(
                projects.update().where(projects.c.id == int(project_id)).values(is_active=False)
            )
            return result.rowcount > 0

    # entries

    def _joined_select(self, *, with_user: bool):
        columns = [
            time_entries,
            projects.c.id.label("p_id"),
            projects.c.name.label("p_name"),
            projects.c.is_active.label("p_is_active"),
        ]
        source = time_entries.join(projects, projects.c.id == time_entries.c.project_id)
        if with_user:
            columns += [
                users.c.id.label("u_id"),
                users.c.username.label("u_username"),
                users.c.password.label("u_password"),
                users.c.role.label("u_role"),
            ]
            source = source.join(users, users.c.id == time_entries.c.user_id)
        return select(*columns).select_from(source)

    def list_entries_for_user(self, user_id: int) -> Sequence[EntryWithProject]:
        stmt = self._joined_select(with_user=False).where(time_entries.c.user_id == int(user_id)).order_by(*_ENTRY_ORDER)
        with self._engine.connect() as conn:
            rows = conn.execute(stmt).mappings().all()
            return [EntryWithProject(entry=_to_entry(r), project=_to_project(_prefixed(r, "p_"))) for r in rows]

    def list_all_entries(self) -> Sequence[EntryWithUserAndProject]:
        stmt = self._joined_select(with_user=True).order_by(*_ENTRY_ORDER)
        with self._engine.connect() as conn:
            rows = conn.execute(stmt).mappings().all()
            return [
                EntryWithUserAndProject(
                    entry=_to_entry(r),
                    user=_to_user(_prefixed(r, "u_")),
                    project=_to_project(_prefixed(r, "p_")),
                )
                for r in rows
            ]

    def list_entries_for_user_and_date(self, user_id: int, date: str) -> Sequence[TimeEntry]:
        stmt = select(time_entries).where(
            and_(time_entries.c.user_id == int(user_id), time_entries.c.date == date)
        )
        with self._engine.connect() as conn:
            return [_to_entry(r) for r in conn.execute(stmt).mappings().all()]

    def create_entry(self, *, user_id: int, project_id: int, date: str, time_spent: Decimal) -> TimeEntry:
        created_at = now_local()
        with self._engine.begin() as conn:
            project_row = conn.execute(select(projects).where(projects.c.id == int(project_id))).mappings().first()
            if project_row is None:
                raise NotFoundError(f"Project not found: {project_id}")
            user_row = conn.execute(select(users).where(users.c.id == int(user_id))).mappings().first()
            if user_row is None:
                raise NotFoundError(f"User not found: {user_id}")
            result = conn.execute(
                time_entries.insert().values(
                    user_id=int(user_id),
                    project_id=int(project_id),
                    date=date,
                    time_spent=Decimal(time_spent),
                    created_at=created_at,
                )
            )
            entry = TimeEntry(
                id=int(result.inserted_primary_key[0]),
                user_id=int(user_id),
                project_id=int(project_id),
                date=date,
                time_spent=Decimal(time_spent),
                created_at=created_at,
            )

        self._notify_created(entry, username=user_row["username"], project_name=project_row["name"])
        return entry

    @contextmanager
    def admission_scope(self, user_id: int, date: str) -> Iterator[None]:
        with self._admission_locks.hold((int(user_id), date)):
            if not self._advisory_locks:
                yield
                return
            with self._mysql_advisory_lock(f"daylog:{int(user_id)}:{date}"):
                yield

    @contextmanager
    def _mysql_advisory_lock(self, name: str) -> Iterator[None]:
        with self._engine.connect() as conn:
            acquired = conn.execute(
                text("SELECT GET_LOCK(:name, :timeout)"),
                {"name": name, "timeout": self._lock_timeout},
            ).scalar()
            if acquired != 1:
                logger.warning("admission_lock_timeout", name=name, timeout=self._lock_timeout)
                raise AdmissionBusyError(name)
            try:
                yield
            finally:
                conn.execute(text("SELECT RELEASE_LOCK(:name)"), {"name": name})
                logger.debug("advisory_lock_released", name=name)

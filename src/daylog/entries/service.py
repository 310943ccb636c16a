from __future__ import annotations

from decimal import Decimal
from typing import Any, Sequence

from ..common.validators import coerce_time_spent, require_int, require_iso_date
from ..core.constants import MAX_DAYS_PER_DATE
from ..core.exceptions import CapacityExceededError
from ..core.logging import get_logger
from ..store.repository import EntityStore
from .model import EntryWithProject, EntryWithUserAndProject, TimeEntry

logger = get_logger(__name__)


class AdmissionService:
    """Use case: admit a new time entry under the one-day-per-date cap.

    The same-day read, the cap check and the insert all run inside the
    store's admission scope for (user, date), so two concurrent requests for
    the same day cannot both pass the check.
    """

    def __init__(self, store: EntityStore, *, max_per_date: Decimal = MAX_DAYS_PER_DATE):
        self._store = store
        self._max_per_date = max_per_date

    def admit_entry(self, *, user_id: int, project_id: Any, date: Any, time_spent: Any) -> TimeEntry:
        amount = coerce_time_spent(time_spent)
        date = require_iso_date(date)
        project_id = require_int(project_id, "projectId")

        with self._store.admission_scope(user_id, date):
            existing = self._store.list_entries_for_user_and_date(user_id, date)
            current_total = sum((e.time_spent for e in existing), Decimal("0"))

            if current_total + amount > self._max_per_date:
                logger.info(
                    "entry_rejected",
                    user_id=user_id,
                    date=date,
                    current_total=str(current_total),
                    requested=str(amount),
                )
                raise CapacityExceededError(current_total=current_total, date=date, requested=amount)

            entry = self._store.create_entry(user_id=user_id, project_id=project_id, date=date, time_spent=amount)

        logger.info("entry_admitted", entry_id=entry.id, user_id=user_id, date=date, time_spent=str(amount))
        return entry


class EntryQueryService:
    """Use case: raw entry listings (own entries, all entries for admins)."""

    def __init__(self, store: EntityStore):
        self._store = store

    def list_for_user(self, user_id: int) -> Sequence[EntryWithProject]:
        return self._store.list_entries_for_user(user_id)

    def list_all(self) -> Sequence[EntryWithUserAndProject]:
        return self._store.list_all_entries()

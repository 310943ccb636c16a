from __future__ import annotations

from datetime import date
from typing import Optional

from ..common.datetime_utils import today_local
from ..core.exceptions import ValidationError
from ..store.repository import EntityStore
from .aggregation import filter_entries, summarize_by_employee, summarize_by_project
from .model import AdminSummary


class AggregationService:
    """Use case: admin rollups, recomputed from a fresh fetch on every call."""

    def __init__(self, store: EntityStore):
        self._store = store

    def build_admin_summary(
        self,
        *,
        days: Optional[int] = None,
        user_id: Optional[int] = None,
        project_id: Optional[int] = None,
        today: Optional[date] = None,
    ) -> AdminSummary:
        if days is not None and days < 0:
            raise ValidationError("days must be zero or positive", field="days")
        today = today or today_local()
        users = self._store.list_users()
        all_entries = self._store.list_all_entries()
        entries = filter_entries(
            all_entries,
            today=today,
            days=days,
            user_id=user_id,
            project_id=project_id,
        )

        # Filters narrow totals only; compliance is judged on everything logged.
        by_employee = summarize_by_employee(
            users,
            [row.entry for row in all_entries],
            today=today,
            counted=[row.entry for row in entries],
        )

        return AdminSummary(
            entries=entries,
            by_employee=by_employee,
            by_project=summarize_by_project(entries),
            days=days,
        )

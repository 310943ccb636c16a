"""Read-side rollups over raw time entries.

Everything here is a pure function of its inputs; callers re-fetch entries
from the store for every report, nothing is maintained incrementally.
"""

from __future__ import annotations

from datetime import date, timedelta
from decimal import Decimal
from typing import Iterable, Optional, Sequence

from ..common.datetime_utils import days_back, format_iso_date, recent_weekdays
from ..core.constants import COMPLIANCE_WEEKDAYS, MAX_DAYS_PER_DATE, RECENT_SUBMISSION_DAYS
from ..entries.model import EntryWithUserAndProject, TimeEntry
from ..users.model import User
from .model import EmployeeSummary, ProjectSummary

ZERO = Decimal("0")


def filter_entries(
    entries: Iterable[EntryWithUserAndProject],
    *,
    today: date,
    days: Optional[int] = None,
    user_id: Optional[int] = None,
    project_id: Optional[int] = None,
) -> list[EntryWithUserAndProject]:
    """Narrow entries by user, project and "last N days" (None = all time).

    The date cut-off is `today - days`, inclusive.
    """
    cutoff = format_iso_date(today - timedelta(days=days)) if days is not None else None
    out = []
    for row in entries:
        e = row.entry
        if user_id is not None and e.user_id != user_id:
            continue
        if project_id is not None and e.project_id != project_id:
            continue
        if cutoff is not None and e.date < cutoff:
            continue
        out.append(row)
    return out


def total_days(entries: Iterable[TimeEntry]) -> Decimal:
    return sum((e.time_spent for e in entries), ZERO)


def compliance(entries: Sequence[TimeEntry], today: date, *, weekdays: int = COMPLIANCE_WEEKDAYS) -> tuple[bool, int]:
    """(is_compliant, missing_days_count) over the most recent weekdays.

    A weekday is missing when less than a full day was logged for it.
    """
    per_date: dict[str, Decimal] = {}
    for e in entries:
        per_date[e.date] = per_date.get(e.date, ZERO) + e.time_spent

    missing = 0
    for day in recent_weekdays(today, weekdays):
        if per_date.get(format_iso_date(day), ZERO) < MAX_DAYS_PER_DATE:
            missing += 1
    return missing == 0, missing


def _group_by_user(users: Sequence[User], entries: Iterable[TimeEntry]) -> dict[int, list[TimeEntry]]:
    by_user: dict[int, list[TimeEntry]] = {u.id: [] for u in users}
    for e in entries:
        if e.user_id in by_user:
            by_user[e.user_id].append(e)
    return by_user


def summarize_by_employee(
    users: Sequence[User],
    entries: Sequence[TimeEntry],
    *,
    today: date,
    counted: Optional[Sequence[TimeEntry]] = None,
) -> list[EmployeeSummary]:
    """One row per user, sorted by total days descending.

    Compliance and recent submissions always look at `entries` in full.
    `counted`, when given, is the filtered subset that `total_days` sums.
    """
    by_user = _group_by_user(users, entries)
    counted_by_user = by_user if counted is None else _group_by_user(users, counted)

    recent = {format_iso_date(d) for d in days_back(today, RECENT_SUBMISSION_DAYS)}

    rows = []
    for u in users:
        own = by_user[u.id]
        is_compliant, missing = compliance(own, today)
        rows.append(
            EmployeeSummary(
                user_id=u.id,
                username=u.username,
                total_days=total_days(counted_by_user[u.id]),
                submissions_last_7_days=sum(1 for e in own if e.date in recent),
                is_compliant=is_compliant,
                missing_days_count=missing,
            )
        )

    rows.sort(key=lambda r: r.total_days, reverse=True)
    return rows


def summarize_by_project(entries: Sequence[EntryWithUserAndProject]) -> list[ProjectSummary]:
    totals: dict[int, ProjectSummary] = {}
    for row in entries:
        current = totals.get(row.entry.project_id)
        if current is None:
            current = ProjectSummary(project_id=row.project.id, name=row.project.name, total_days=ZERO)
        totals[row.entry.project_id] = ProjectSummary(
            project_id=current.project_id,
            name=current.name,
            total_days=current.total_days + row.entry.time_spent,
        )

    out = list(totals.values())
    out.sort(key=lambda r: r.total_days, reverse=True)
    return out

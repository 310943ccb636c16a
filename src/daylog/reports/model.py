from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional, Sequence

from ..entries.model import EntryWithUserAndProject


@dataclass(frozen=True)
class EmployeeSummary:
    user_id: int
    username: str
    total_days: Decimal
    submissions_last_7_days: int
    is_compliant: bool
    missing_days_count: int

    def to_dict(self) -> dict:
        return {
            "userId": self.user_id,
            "username": self.username,
            "totalDays": float(self.total_days),
            "submissionsLast7Days": self.submissions_last_7_days,
            "isCompliant": self.is_compliant,
            "missingDaysCount": self.missing_days_count,
        }


@dataclass(frozen=True)
class ProjectSummary:
    project_id: int
    name: str
    total_days: Decimal

    def to_dict(self) -> dict:
        return {"projectId": self.project_id, "name": self.name, "totalDays": float(self.total_days)}


@dataclass(frozen=True)
class AdminSummary:
    """Read-model for the admin dashboard, rebuilt on every request."""

    entries: Sequence[EntryWithUserAndProject]
    by_employee: Sequence[EmployeeSummary]
    by_project: Sequence[ProjectSummary]
    days: Optional[int] = None

    def to_dict(self) -> dict:
        return {
            "days": self.days,
            "entries": [e.to_dict() for e in self.entries],
            "byEmployee": [s.to_dict() for s in self.by_employee],
            "byProject": [s.to_dict() for s in self.by_project],
        }

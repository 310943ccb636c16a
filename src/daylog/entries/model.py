from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from ..projects.model import Project
from ..users.model import User


@dataclass(frozen=True)
class TimeEntry:
    """Domain entity: one logged amount of a day against a project.

    `date` stays a plain YYYY-MM-DD string; `time_spent` is 0.5 or 1.0.
    """

    id: int
    user_id: int
    project_id: int
    date: str
    time_spent: Decimal
    created_at: datetime

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "userId": self.user_id,
            "projectId": self.project_id,
            "date": self.date,
            "timeSpent": float(self.time_spent),
            "createdAt": self.created_at.isoformat(),
        }


@dataclass(frozen=True)
class EntryWithProject:
    """Read-model: entry joined with its project (own-entries listing)."""

    entry: TimeEntry
    project: Project

    def to_dict(self) -> dict:
        out = self.entry.to_dict()
        out["project"] = self.project.to_dict()
        return out


@dataclass(frozen=True)
class EntryWithUserAndProject:
    """Read-model: entry joined with user and project (admin listing)."""

    entry: TimeEntry
    user: User
    project: Project

    def to_dict(self) -> dict:
        out = self.entry.to_dict()
        out["user"] = self.user.to_dict()
        out["project"] = self.project.to_dict()
        return out

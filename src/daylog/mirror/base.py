from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Protocol, Sequence


@dataclass(frozen=True)
class MirrorRecord:
    """One row appended to the spreadsheet log after an entry is created."""

    entry_id: int
    username: str
    project_name: str
    date: str
    time_spent: Decimal
    created_at: datetime

    def as_row(self) -> list:
        return [
            self.entry_id,
            self.username,
            self.project_name,
            self.date,
            float(self.time_spent),
            self.created_at.isoformat(),
        ]


class EntryMirror(Protocol):
    """Spreadsheet-backed mirror of time entries.

    Implementations must not raise from either call: project names fall back
    to the last good list, append failures are logged and dropped.
    """

    def list_project_names(self) -> Sequence[str]:
        raise NotImplementedError

    def append_entry(self, record: MirrorRecord) -> None:
        raise NotImplementedError


class NullMirror(EntryMirror):
    """Used when no spreadsheet is configured."""

    def list_project_names(self) -> Sequence[str]:
        return []

    def append_entry(self, record: MirrorRecord) -> None:
        return None

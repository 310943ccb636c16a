from __future__ import annotations

from decimal import Decimal
from typing import Optional


class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""

    def __init__(self, message: str, *, field: Optional[str] = None):
        super().__init__(message)
        self.field = field


class CapacityExceededError(DomainError):
    """Raised when an entry would push a user's day past the one-day cap.

    Carries the already-logged total and the date so callers can explain the
    rejection precisely.
    """

    def __init__(self, *, current_total: Decimal, date: str, requested: Decimal):
        self.current_total = current_total
        self.date = date
        self.requested = requested
        super().__init__(
            f"Cannot exceed 1 day per date. You already logged {_fmt_days(current_total)} days for {date}."
        )


class NotFoundError(DomainError):
    """Raised when a referenced user or project does not exist."""


class ConflictError(DomainError):
    """Raised on duplicate unique keys (username, project name)."""


class AdmissionBusyError(ConflictError):
    """Raised when the per-day admission lock could not be taken in time."""

    def __init__(self, lock_name: str):
        self.lock_name = lock_name
        super().__init__("Another entry for this day is being saved. Please retry.")


class UnauthorizedError(DomainError):
    """Raised when the caller lacks a session or the required role."""


class AuthenticationError(UnauthorizedError):
    """Raised when login credentials are invalid."""


def _fmt_days(value: Decimal) -> str:
    # 0 -> "0", 0.5 -> "0.5", 1.0 -> "1"
    normalized = value.normalize()
    return format(normalized, "f")

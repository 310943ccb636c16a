from __future__ import annotations

from datetime import date, datetime, timedelta

DATE_FORMAT = "%Y-%m-%d"


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, DATE_FORMAT).date()


def format_iso_date(value: date) -> str:
    return value.strftime(DATE_FORMAT)


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def today_local() -> date:
    return now_local().date()


def is_weekend(value: date) -> bool:
    return value.weekday() >= 5


def days_back(today: date, count: int) -> list[date]:
    """`count` consecutive calendar days ending at `today`, newest first."""
    return [today - timedelta(days=i) for i in range(count)]


def recent_weekdays(today: date, count: int) -> list[date]:
    """Most recent `count` Monday-Friday dates ending at or before `today`.

    Walks backward one day at a time, skipping Saturday and Sunday.
    """
    out: list[date] = []
    current = today
    while len(out) < count:
        if not is_weekend(current):
            out.append(current)
        current -= timedelta(days=1)
    return out

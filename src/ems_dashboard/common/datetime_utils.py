from __future__ import annotations

from datetime import date, datetime

from ..core.constants import DATE_FORMAT, MONTH_FORMAT


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, DATE_FORMAT).date()


def to_iso_date(value) -> str | None:
    """Normalize a driver DATE value (date, datetime or str) to YYYY-MM-DD."""

    if value is None:
        return None
    if isinstance(value, (date, datetime)):
        return value.strftime(DATE_FORMAT)
    return str(value)[:10]


def today_local() -> date:
    """Current local date.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return date.today()


def month_of(day: date) -> str:
    return day.strftime(MONTH_FORMAT)


def recent_months(today: date, count: int) -> list[str]:
    """Month keys (YYYY-MM) from ``today``'s month going back ``count`` months."""

    out: list[str] = []
    year, month = today.year, today.month
    for _ in range(count):
        out.append(f"{year:04d}-{month:02d}")
        month -= 1
        if month == 0:
            year -= 1
            month = 12
    return out

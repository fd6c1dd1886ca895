from __future__ import annotations

import calendar
from datetime import date, datetime, timedelta

from ..core.enums import ReportType
from ..core.exceptions import ValidationError


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    try:
        return datetime.strptime(str(value).strip(), "%Y-%m-%d").date()
    except ValueError:
        raise ValidationError(f"Invalid date: {value!r} (expected YYYY-MM-DD)") from None


def today_local() -> date:
    """Current local date.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now().date()


def week_range(anchor: date) -> tuple[date, date]:
    """Monday..Sunday week containing `anchor`.

    A Sunday anchor closes the week that started the previous Monday.
    """
    monday = anchor - timedelta(days=anchor.weekday())
    return monday, monday + timedelta(days=6)


def month_range(anchor: date) -> tuple[date, date]:
    last_day = calendar.monthrange(anchor.year, anchor.month)[1]
    return anchor.replace(day=1), anchor.replace(day=last_day)


def report_range(report_type: ReportType, anchor: date) -> tuple[date, date]:
    if report_type == ReportType.WEEKLY:
        return week_range(anchor)
    if report_type == ReportType.MONTHLY:
        return month_range(anchor)
    return anchor, anchor


def last_n_days(today: date, n: int) -> list[date]:
    """Ascending list of `n` consecutive dates ending at `today`."""
    return [today - timedelta(days=i) for i in range(n - 1, -1, -1)]

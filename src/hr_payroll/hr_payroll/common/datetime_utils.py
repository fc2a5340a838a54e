from __future__ import annotations

import calendar
from datetime import date, datetime

from ..core.exceptions import ValidationError

# English and French month names both map to the canonical English name.
_MONTHS: dict[str, int] = {
    "january": 1, "february": 2, "march": 3, "april": 4, "may": 5, "june": 6,
    "july": 7, "august": 8, "september": 9, "october": 10, "november": 11, "december": 12,
    "janvier": 1, "février": 2, "mars": 3, "avril": 4, "mai": 5, "juin": 6,
    "juillet": 7, "août": 8, "septembre": 9, "octobre": 10, "novembre": 11, "décembre": 12,
}


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def month_number(month_name: str) -> int:
    key = (month_name or "").strip().lower()
    if key not in _MONTHS:
        raise ValidationError(f"Unknown month: {month_name!r}")
    return _MONTHS[key]


def canonical_month_name(month_name: str) -> str:
    """Normalise "mars" / "MARCH" / "March" to "March"."""
    return calendar.month_name[month_number(month_name)]


def weekdays_in_month(year: int, month: int) -> int:
    """Count Monday..Friday days of the given month."""
    _, days = calendar.monthrange(year, month)
    return sum(1 for d in range(1, days + 1) if date(year, month, d).weekday() < 5)


def last_day_of_month(year: int, month: int) -> date:
    _, days = calendar.monthrange(year, month)
    return date(year, month, days)


def month_bounds(year: int, month: int) -> tuple[date, date]:
    return date(year, month, 1), last_day_of_month(year, month)

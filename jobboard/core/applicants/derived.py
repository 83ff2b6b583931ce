"""
Derived applicant fields.

Age and display location are recomputed from stored fields on every read;
nothing here touches the store.
"""

from datetime import date, datetime, timedelta, timezone
from typing import Optional

from jobboard.utils.constants import LOCATION_NOT_AVAILABLE


def _as_date(value: date | datetime) -> date:
    if isinstance(value, datetime):
        return value.date()
    return value


def today_utc() -> date:
    return datetime.now(timezone.utc).date()


def calculate_age(date_of_birth: date | datetime, today: Optional[date] = None) -> int:
    """
    Full years between ``date_of_birth`` and ``today``.

    One year is subtracted when this year's birthday has not happened yet.
    """
    born = _as_date(date_of_birth)
    today = today or today_utc()
    had_birthday = (today.month, today.day) >= (born.month, born.day)
    return today.year - born.year - (0 if had_birthday else 1)


def shift_years(day: date, years: int) -> date:
    """``day`` moved back by ``years``; Feb 29 falls back to Feb 28."""
    try:
        return day.replace(year=day.year - years)
    except ValueError:
        return day.replace(year=day.year - years, day=28)


def birth_date_bounds(
    age_min: Optional[int],
    age_max: Optional[int],
    today: Optional[date] = None,
) -> tuple[Optional[datetime], Optional[datetime]]:
    """
    Translate an inclusive age range into a half-open birth date range.

    Returns ``(born_on_or_after, born_before)`` as UTC midnights; either may
    be ``None`` when the matching age bound is absent. A person satisfies the
    age range exactly when their birth date lies inside the returned range.
    """
    today = today or today_utc()
    born_on_or_after = None
    born_before = None

    if age_max is not None:
        # age <= age_max  <=>  born after the day they would turn age_max + 1
        oldest = shift_years(today, age_max + 1) + timedelta(days=1)
        born_on_or_after = datetime.combine(oldest, datetime.min.time(), tzinfo=timezone.utc)

    if age_min is not None:
        # age >= age_min  <=>  born on or before the day they turned age_min
        youngest = shift_years(today, age_min) + timedelta(days=1)
        born_before = datetime.combine(youngest, datetime.min.time(), tzinfo=timezone.utc)

    return born_on_or_after, born_before


def compose_location(
    city: Optional[str],
    province: Optional[str],
    not_available: str = LOCATION_NOT_AVAILABLE,
) -> str:
    """``"City, Province"``, or whichever part exists, or the sentinel."""
    parts = [p.strip() for p in (city, province) if p and p.strip()]
    return ", ".join(parts) if parts else not_available

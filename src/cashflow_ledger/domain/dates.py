import calendar
from collections.abc import Mapping, Sequence
from datetime import date, timedelta

from cashflow_ledger.models import Holiday

HolidayTable = Mapping[int, Sequence[Holiday]]

# Fixed Gregorian holidays only; lunar holidays are entered by hand per year.
FIXED_HOLIDAYS: tuple[tuple[int, int, str], ...] = (
    (1, 1, "New Year's Day"),
    (3, 1, "Independence Movement Day"),
    (5, 5, "Children's Day"),
    (6, 6, "Memorial Day"),
    (8, 15, "Liberation Day"),
    (10, 3, "National Foundation Day"),
    (10, 9, "Hangul Day"),
    (12, 25, "Christmas Day"),
)


def is_weekend(day: date) -> bool:
    return day.weekday() >= 5


def is_holiday(day: date, holidays: HolidayTable) -> bool:
    for holiday in holidays.get(day.year, ()):
        if holiday.month == day.month and holiday.day == day.day:
            return True
    return False


def is_business_day(day: date, holidays: HolidayTable) -> bool:
    return not is_weekend(day) and not is_holiday(day, holidays)


def next_business_day(day: date, holidays: HolidayTable) -> date:
    """Return the first business day strictly after ``day``."""
    candidate = day + timedelta(days=1)
    while not is_business_day(candidate, holidays):
        candidate += timedelta(days=1)
    return candidate


def last_day_of_month(year: int, month: int) -> int:
    return calendar.monthrange(year, month)[1]


def is_valid_date(year: int, month: int, day: int) -> bool:
    if not 1 <= month <= 12 or day < 1:
        return False
    return day <= last_day_of_month(year, month)


def default_holidays(year: int) -> list[Holiday]:
    return [
        Holiday(month=month, day=day, name=name)
        for month, day, name in FIXED_HOLIDAYS
        if is_valid_date(year, month, day)
    ]

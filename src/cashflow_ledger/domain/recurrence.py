from collections.abc import Iterable, Iterator
from datetime import date, timedelta

from cashflow_ledger.domain.dates import (
    HolidayTable,
    is_holiday,
    is_weekend,
    last_day_of_month,
    next_business_day,
)
from cashflow_ledger.logger import get_logger
from cashflow_ledger.models import Frequency, Occurrence, RecurringEntryDefinition

logger = get_logger(__name__)


def covers_year(definition: RecurringEntryDefinition, year: int) -> bool:
    start_year, _ = definition.start
    end = definition.end
    if year < start_year:
        return False
    return end is None or year <= end[0]


def covers_month(definition: RecurringEntryDefinition, year: int, month: int) -> bool:
    if (year, month) < definition.start:
        return False
    end = definition.end
    return end is None or (year, month) <= end


def _naive_dates(definition: RecurringEntryDefinition, year: int, month: int) -> Iterator[date]:
    last_day = last_day_of_month(year, month)
    if definition.frequency == Frequency.DAILY:
        current = date(year, month, 1)
        for _ in range(last_day):
            yield current
            current += timedelta(days=1)
        return

    # Day 31 in a 30-day month (or February) falls on the month's last day.
    day_of_month = definition.day_of_month or 1
    yield date(year, month, min(day_of_month, last_day))


def needs_adjustment(
    definition: RecurringEntryDefinition, day: date, holidays: HolidayTable
) -> bool:
    if definition.skip_weekends and is_weekend(day):
        return True
    return definition.skip_holidays and is_holiday(day, holidays)


def expand_recurring(
    definition: RecurringEntryDefinition,
    year: int,
    holidays: HolidayTable,
) -> list[Occurrence]:
    """Expand a recurring definition into the occurrences that land in ``year``.

    Dates that fall on a skipped weekend or holiday move to the next business
    day. An occurrence whose adjusted date leaves its naive month is dropped,
    not re-attributed to the month (or year) it rolled into.
    """
    if not covers_year(definition, year):
        return []

    occurrences: list[Occurrence] = []
    seen: set[date] = set()
    dropped = 0
    for month in range(1, 13):
        if not covers_month(definition, year, month):
            continue
        for naive in _naive_dates(definition, year, month):
            actual = naive
            if needs_adjustment(definition, naive, holidays):
                actual = next_business_day(naive, holidays)
                if actual.month != naive.month:
                    dropped += 1
                    continue
            if actual in seen:
                continue
            seen.add(actual)
            occurrences.append(Occurrence(
                date=actual,
                amount=definition.amount,
                description=definition.description,
                main_category=definition.main_category,
                sub_category=definition.sub_category,
                is_actual_payment=definition.is_actual_payment,
                recurring_id=definition.id,
            ))

    if dropped:
        logger.debug(
            "[RECURRENCE] Definition %s dropped %d occurrence(s) in %s that rolled into another month.",
            definition.id,
            dropped,
            year,
        )
    return occurrences


def expand_all(
    definitions: Iterable[RecurringEntryDefinition],
    year: int,
    holidays: HolidayTable,
) -> list[Occurrence]:
    occurrences: list[Occurrence] = []
    for definition in definitions:
        occurrences.extend(expand_recurring(definition, year, holidays))
    return occurrences

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date
from typing import Literal

from cashflow_ledger.models import ClassifiedEntry

EntryType = Literal["income", "expense", "any"]


@dataclass(frozen=True)
class DetailFilter:
    year: int
    month: int
    type: EntryType = "any"
    category_name: str | None = None
    subcategory_name: str | None = None
    description: str | None = None


def _matches(entry: ClassifiedEntry, criteria: DetailFilter) -> bool:
    if entry.date.year != criteria.year or entry.date.month != criteria.month:
        return False
    # Only settled entries show up in the drill-down, unlike the balance totals.
    if entry.is_actual_payment is not True:
        return False
    if criteria.type == "income" and not entry.is_income:
        return False
    if criteria.type == "expense" and entry.is_income:
        return False
    if criteria.category_name and entry.main_name != criteria.category_name:
        return False
    if criteria.subcategory_name and entry.sub_name != criteria.subcategory_name:
        return False
    if criteria.description and criteria.description.lower() not in entry.description.lower():
        return False
    return True


def _sort_key(entry: ClassifiedEntry) -> tuple[date, int]:
    return entry.date, entry.entry_id if entry.entry_id is not None else 0


def query_details(entries: Iterable[ClassifiedEntry], criteria: DetailFilter) -> list[ClassifiedEntry]:
    matches = [entry for entry in entries if _matches(entry, criteria)]
    matches.sort(key=_sort_key)
    return matches


def filter_by_date_range(
    entries: Iterable[ClassifiedEntry],
    start: date | None,
    end: date | None,
) -> list[ClassifiedEntry]:
    selected = [
        entry for entry in entries
        if (start is None or entry.date >= start) and (end is None or entry.date <= end)
    ]
    selected.sort(key=_sort_key)
    return selected

import threading
from collections.abc import Callable
from typing import Any, TypeVar

from cashflow_ledger.domain.dates import default_holidays, is_valid_date
from cashflow_ledger.domain.defaults import default_registry
from cashflow_ledger.domain.recurrence import expand_recurring
from cashflow_ledger.engine import LedgerEngine
from cashflow_ledger.errors import (
    DuplicateCodeError,
    DuplicateHolidayError,
    InvalidDateError,
    InvalidLookupIdError,
    ReferentialConflictError,
)
from cashflow_ledger.integration.storage import JsonLedgerStore
from cashflow_ledger.logger import get_logger
from cashflow_ledger.models import (
    CategoryKind,
    Holiday,
    LedgerSnapshot,
    MainCategory,
    OneTimeEntry,
    OneTimeEntryInput,
    RecurringEntryDefinition,
    RecurringEntryInput,
    SubCategory,
)

logger = get_logger(__name__)

T = TypeVar("T")

RECURRING_PREFIX = "[Recurring] "


def _find_index(items: list[Any], predicate: Callable[[Any], bool]) -> int | None:
    for index, item in enumerate(items):
        if predicate(item):
            return index
    return None


def _check_range(data: RecurringEntryInput) -> None:
    end = data.end
    if end is not None and end < data.start:
        raise InvalidDateError(
            f"End month {data.end_month} is before start month {data.start_month}."
        )


def _sort_holidays(holidays: list[Holiday]) -> list[Holiday]:
    return sorted(holidays, key=lambda holiday: (holiday.month, holiday.day))


def _main_in_use(draft: LedgerSnapshot, code: str) -> bool:
    return any(entry.main_category == code for entry in draft.one_time_entries) or any(
        definition.main_category == code for definition in draft.recurring_entries
    )


class LedgerService:
    """Owns the current snapshot and applies mutations all-or-nothing.

    Each mutation runs against a deep copy; the copy replaces the current
    snapshot (and is persisted) only when the mutation completes.
    """

    def __init__(self, snapshot: LedgerSnapshot | None = None, store: JsonLedgerStore | None = None) -> None:
        self.snapshot = snapshot or LedgerSnapshot()
        self.store = store
        self._lock = threading.Lock()

    def engine(self) -> LedgerEngine:
        return LedgerEngine(self.snapshot)

    def _mutate(self, action: str, change: Callable[[LedgerSnapshot], T]) -> T:
        with self._lock:
            draft = self.snapshot.model_copy(deep=True)
            try:
                result = change(draft)
            except Exception as exc:
                logger.warning("[LEDGER] %s rejected: %s", action, exc)
                raise
            if self.store:
                self.store.save(draft)
            self.snapshot = draft
            logger.info("[LEDGER] %s", action)
            return result

    # Snapshot-wide operations

    def seed_defaults(self, year: int | None = None) -> None:
        def change(draft: LedgerSnapshot) -> None:
            if year is not None:
                draft.selected_year = year
            if not draft.categories.main:
                draft.categories = default_registry()
            if draft.selected_year not in draft.holidays:
                draft.holidays[draft.selected_year] = default_holidays(draft.selected_year)

        self._mutate("Seeded default categories and holidays", change)

    def change_year(self, year: int) -> int:
        def change(draft: LedgerSnapshot) -> int:
            draft.selected_year = year
            return year

        return self._mutate(f"Selected year changed to {year}", change)

    def replace_snapshot(self, snapshot: LedgerSnapshot) -> None:
        fresh = snapshot.model_copy(deep=True)

        def change(draft: LedgerSnapshot) -> None:
            for field in LedgerSnapshot.model_fields:
                setattr(draft, field, getattr(fresh, field))

        self._mutate("Snapshot replaced", change)

    # Categories

    def add_main_category(self, code: str, name: str, kind: CategoryKind = CategoryKind.EXPENSE) -> MainCategory:
        def change(draft: LedgerSnapshot) -> MainCategory:
            if any(category.code == code for category in draft.categories.main):
                raise DuplicateCodeError(f"Main category code already in use: {code}")
            category = MainCategory(code=code, name=name, kind=kind)
            draft.categories.main.append(category)
            return category

        return self._mutate(f"Main category {code} added", change)

    def update_main_category(
        self,
        code: str,
        *,
        name: str | None = None,
        kind: CategoryKind | None = None,
    ) -> MainCategory:
        def change(draft: LedgerSnapshot) -> MainCategory:
            index = _find_index(draft.categories.main, lambda category: category.code == code)
            if index is None:
                raise InvalidLookupIdError(f"Main category not found: {code}")
            category = draft.categories.main[index]
            if kind is not None and kind != category.kind and _main_in_use(draft, code):
                raise ReferentialConflictError(
                    f"Main category '{category.name}' is used by entries and its kind cannot change."
                )
            if name is not None:
                category.name = name
            if kind is not None:
                category.kind = kind
            return category

        return self._mutate(f"Main category {code} updated", change)

    def remove_main_category(self, code: str) -> None:
        def change(draft: LedgerSnapshot) -> None:
            index = _find_index(draft.categories.main, lambda category: category.code == code)
            if index is None:
                raise InvalidLookupIdError(f"Main category not found: {code}")
            name = draft.categories.main[index].name
            if any(sub.main_code == code for sub in draft.categories.sub):
                raise ReferentialConflictError(
                    f"Main category '{name}' still has sub categories and cannot be removed."
                )
            if _main_in_use(draft, code):
                raise ReferentialConflictError(
                    f"Main category '{name}' is used by entries and cannot be removed."
                )
            del draft.categories.main[index]

        self._mutate(f"Main category {code} removed", change)

    def move_main_category(self, code: str, offset: int) -> list[MainCategory]:
        def change(draft: LedgerSnapshot) -> list[MainCategory]:
            main = draft.categories.main
            index = _find_index(main, lambda category: category.code == code)
            if index is None:
                raise InvalidLookupIdError(f"Main category not found: {code}")
            target = min(max(index + offset, 0), len(main) - 1)
            main.insert(target, main.pop(index))
            return main

        return self._mutate(f"Main category {code} moved by {offset}", change)

    def add_sub_category(self, main_code: str, code: str, name: str) -> SubCategory:
        def change(draft: LedgerSnapshot) -> SubCategory:
            if any(category.code == code for category in draft.categories.sub):
                raise DuplicateCodeError(f"Sub category code already in use: {code}")
            if not any(category.code == main_code for category in draft.categories.main):
                raise ReferentialConflictError(f"Main category not found for sub category: {main_code}")
            category = SubCategory(main_code=main_code, code=code, name=name)
            draft.categories.sub.append(category)
            return category

        return self._mutate(f"Sub category {code} added", change)

    def update_sub_category(self, code: str, *, name: str) -> SubCategory:
        def change(draft: LedgerSnapshot) -> SubCategory:
            index = _find_index(draft.categories.sub, lambda category: category.code == code)
            if index is None:
                raise InvalidLookupIdError(f"Sub category not found: {code}")
            category = draft.categories.sub[index]
            category.name = name
            return category

        return self._mutate(f"Sub category {code} updated", change)

    def remove_sub_category(self, code: str) -> None:
        def change(draft: LedgerSnapshot) -> None:
            index = _find_index(draft.categories.sub, lambda category: category.code == code)
            if index is None:
                raise InvalidLookupIdError(f"Sub category not found: {code}")
            in_use = any(entry.sub_category == code for entry in draft.one_time_entries) or any(
                definition.sub_category == code for definition in draft.recurring_entries
            )
            if in_use:
                name = draft.categories.sub[index].name
                raise ReferentialConflictError(
                    f"Sub category '{name}' is used by entries and cannot be removed."
                )
            del draft.categories.sub[index]

        self._mutate(f"Sub category {code} removed", change)

    # One-time entries

    def add_one_time_entry(self, data: OneTimeEntryInput) -> OneTimeEntry:
        def change(draft: LedgerSnapshot) -> OneTimeEntry:
            entry = OneTimeEntry(id=draft.next_entry_id, **data.model_dump())
            draft.next_entry_id += 1
            draft.one_time_entries.append(entry)
            return entry

        return self._mutate("One-time entry added", change)

    def update_one_time_entry(self, entry_id: int, data: OneTimeEntryInput) -> OneTimeEntry:
        def change(draft: LedgerSnapshot) -> OneTimeEntry:
            index = _find_index(draft.one_time_entries, lambda entry: entry.id == entry_id)
            if index is None:
                raise InvalidLookupIdError(f"One-time entry not found: {entry_id}")
            existing = draft.one_time_entries[index]
            updated = OneTimeEntry(id=entry_id, recurring_id=existing.recurring_id, **data.model_dump())
            draft.one_time_entries[index] = updated
            return updated

        return self._mutate(f"One-time entry {entry_id} updated", change)

    def toggle_actual_payment(self, entry_id: int) -> OneTimeEntry:
        def change(draft: LedgerSnapshot) -> OneTimeEntry:
            index = _find_index(draft.one_time_entries, lambda entry: entry.id == entry_id)
            if index is None:
                raise InvalidLookupIdError(f"One-time entry not found: {entry_id}")
            entry = draft.one_time_entries[index]
            entry.is_actual_payment = not entry.is_actual_payment
            return entry

        return self._mutate(f"One-time entry {entry_id} payment flag toggled", change)

    def remove_one_time_entry(self, entry_id: int) -> None:
        def change(draft: LedgerSnapshot) -> None:
            index = _find_index(draft.one_time_entries, lambda entry: entry.id == entry_id)
            if index is None:
                raise InvalidLookupIdError(f"One-time entry not found: {entry_id}")
            del draft.one_time_entries[index]

        self._mutate(f"One-time entry {entry_id} removed", change)

    # Recurring definitions

    def add_recurring_entry(self, data: RecurringEntryInput) -> RecurringEntryDefinition:
        _check_range(data)

        def change(draft: LedgerSnapshot) -> RecurringEntryDefinition:
            definition = RecurringEntryDefinition(id=draft.next_recurring_id, **data.model_dump())
            draft.next_recurring_id += 1
            draft.recurring_entries.append(definition)
            return definition

        return self._mutate("Recurring entry added", change)

    def update_recurring_entry(self, recurring_id: int, data: RecurringEntryInput) -> RecurringEntryDefinition:
        _check_range(data)

        def change(draft: LedgerSnapshot) -> RecurringEntryDefinition:
            index = _find_index(draft.recurring_entries, lambda definition: definition.id == recurring_id)
            if index is None:
                raise InvalidLookupIdError(f"Recurring entry not found: {recurring_id}")
            definition = RecurringEntryDefinition(id=recurring_id, **data.model_dump())
            draft.recurring_entries[index] = definition
            draft.one_time_entries = [
                entry for entry in draft.one_time_entries if entry.recurring_id != recurring_id
            ]
            return definition

        return self._mutate(f"Recurring entry {recurring_id} updated", change)

    def remove_recurring_entry(self, recurring_id: int) -> None:
        def change(draft: LedgerSnapshot) -> None:
            index = _find_index(draft.recurring_entries, lambda definition: definition.id == recurring_id)
            if index is None:
                raise InvalidLookupIdError(f"Recurring entry not found: {recurring_id}")
            del draft.recurring_entries[index]
            draft.one_time_entries = [
                entry for entry in draft.one_time_entries if entry.recurring_id != recurring_id
            ]

        self._mutate(f"Recurring entry {recurring_id} removed", change)

    def materialize_recurring(self, recurring_id: int, year: int) -> list[OneTimeEntry]:
        """Copy a definition's occurrences for ``year`` into the one-time store.

        Copies made earlier for the same definition and year are replaced. The
        year is recorded on the definition, so the copies stand in for its
        occurrences in that year even after they are edited or moved.
        """
        def change(draft: LedgerSnapshot) -> list[OneTimeEntry]:
            index = _find_index(draft.recurring_entries, lambda definition: definition.id == recurring_id)
            if index is None:
                raise InvalidLookupIdError(f"Recurring entry not found: {recurring_id}")
            definition = draft.recurring_entries[index]
            draft.one_time_entries = [
                entry for entry in draft.one_time_entries
                if not (entry.recurring_id == recurring_id and entry.date.year == year)
            ]
            created: list[OneTimeEntry] = []
            for occurrence in expand_recurring(definition, year, draft.holidays):
                entry = OneTimeEntry(
                    id=draft.next_entry_id,
                    date=occurrence.date,
                    amount=occurrence.amount,
                    description=f"{RECURRING_PREFIX}{occurrence.description}",
                    main_category=occurrence.main_category,
                    sub_category=occurrence.sub_category,
                    is_actual_payment=occurrence.is_actual_payment,
                    recurring_id=recurring_id,
                )
                draft.next_entry_id += 1
                draft.one_time_entries.append(entry)
                created.append(entry)
            definition.materialized_years = sorted({*definition.materialized_years, year})
            return created

        return self._mutate(f"Recurring entry {recurring_id} materialized for {year}", change)

    # Holidays

    def add_holiday(self, year: int, month: int, day: int, name: str) -> list[Holiday]:
        if not is_valid_date(year, month, day):
            raise InvalidDateError(f"Invalid holiday date: {year}-{month:02d}-{day:02d}")

        def change(draft: LedgerSnapshot) -> list[Holiday]:
            holidays = draft.holidays.setdefault(year, [])
            if any(holiday.month == month and holiday.day == day for holiday in holidays):
                raise DuplicateHolidayError(
                    f"A holiday is already registered on {year}-{month:02d}-{day:02d}."
                )
            holidays.append(Holiday(month=month, day=day, name=name))
            draft.holidays[year] = _sort_holidays(holidays)
            return draft.holidays[year]

        return self._mutate(f"Holiday {year}-{month:02d}-{day:02d} added", change)

    def remove_holiday(self, year: int, month: int, day: int) -> list[Holiday]:
        def change(draft: LedgerSnapshot) -> list[Holiday]:
            holidays = draft.holidays.get(year)
            if not holidays:
                raise InvalidLookupIdError(f"No holidays registered for {year}.")
            index = _find_index(holidays, lambda holiday: holiday.month == month and holiday.day == day)
            if index is None:
                raise InvalidLookupIdError(f"No holiday on {year}-{month:02d}-{day:02d}.")
            del holidays[index]
            return holidays

        return self._mutate(f"Holiday {year}-{month:02d}-{day:02d} removed", change)

    def replace_holidays(self, year: int, holidays: list[Holiday]) -> list[Holiday]:
        seen: set[tuple[int, int]] = set()
        for holiday in holidays:
            if not is_valid_date(year, holiday.month, holiday.day):
                raise InvalidDateError(f"Invalid holiday date: {year}-{holiday.month:02d}-{holiday.day:02d}")
            key = (holiday.month, holiday.day)
            if key in seen:
                raise DuplicateHolidayError(
                    f"Duplicate holiday on {year}-{holiday.month:02d}-{holiday.day:02d}."
                )
            seen.add(key)

        def change(draft: LedgerSnapshot) -> list[Holiday]:
            draft.holidays[year] = _sort_holidays([holiday.model_copy() for holiday in holidays])
            return draft.holidays[year]

        return self._mutate(f"Holidays for {year} replaced ({len(holidays)})", change)

    def remove_year_holidays(self, year: int) -> int:
        def change(draft: LedgerSnapshot) -> int:
            if year not in draft.holidays:
                raise InvalidLookupIdError(f"No holidays registered for {year}.")
            return len(draft.holidays.pop(year))

        return self._mutate(f"Holidays for {year} removed", change)

    def seed_holidays(self, year: int) -> list[Holiday]:
        return self.replace_holidays(year, default_holidays(year))

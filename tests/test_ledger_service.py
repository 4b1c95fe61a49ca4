from datetime import date

import pytest

from cashflow_ledger.errors import (
    DuplicateCodeError,
    DuplicateHolidayError,
    InvalidDateError,
    InvalidLookupIdError,
    ReferentialConflictError,
)
from cashflow_ledger.integration.storage import JsonLedgerStore
from cashflow_ledger.models import CategoryKind, Holiday, LedgerSnapshot, OneTimeEntryInput, RecurringEntryInput
from cashflow_ledger.services.ledger import RECURRING_PREFIX, LedgerService


@pytest.fixture
def ledger():
    service = LedgerService(LedgerSnapshot(selected_year=2024))
    service.add_main_category("INCOME", "Income", CategoryKind.INCOME)
    service.add_main_category("ADMIN", "Administration")
    service.add_sub_category("ADMIN", "RENT", "Rent")
    return service


def rent(**overrides) -> RecurringEntryInput:
    fields = {"day_of_month": 1, "amount": 800.0, "description": "Rent", "start_month": "2024-01",
              "main_category": "ADMIN", "sub_category": "RENT"}
    fields.update(overrides)
    return RecurringEntryInput(**fields)


def test_duplicate_main_code_rejected(ledger):
    before = ledger.snapshot

    with pytest.raises(DuplicateCodeError):
        ledger.add_main_category("ADMIN", "Again")
    assert ledger.snapshot is before


def test_sub_category_needs_existing_main(ledger):
    with pytest.raises(ReferentialConflictError):
        ledger.add_sub_category("MISSING", "X", "X")
    with pytest.raises(DuplicateCodeError):
        ledger.add_sub_category("ADMIN", "RENT", "Rent again")


def test_main_with_subs_cannot_be_removed(ledger):
    with pytest.raises(ReferentialConflictError):
        ledger.remove_main_category("ADMIN")
    assert [c.code for c in ledger.snapshot.categories.main] == ["INCOME", "ADMIN"]


def test_categories_in_use_cannot_be_removed(ledger):
    ledger.add_one_time_entry(OneTimeEntryInput(date=date(2024, 1, 5), amount=10.0, main_category="INCOME"))
    ledger.add_recurring_entry(rent())

    with pytest.raises(ReferentialConflictError):
        ledger.remove_main_category("INCOME")
    with pytest.raises(ReferentialConflictError):
        ledger.remove_sub_category("RENT")
    assert len(ledger.snapshot.categories.sub) == 1


def test_remove_unused_categories(ledger):
    ledger.remove_sub_category("RENT")
    ledger.remove_main_category("ADMIN")

    assert [c.code for c in ledger.snapshot.categories.main] == ["INCOME"]
    with pytest.raises(InvalidLookupIdError):
        ledger.remove_main_category("ADMIN")


def test_update_and_move_main_category(ledger):
    ledger.add_main_category("TAX", "Taxes")
    updated = ledger.update_main_category("TAX", name="Tax payments")

    assert updated.name == "Tax payments"
    assert updated.kind == CategoryKind.EXPENSE
    order = ledger.move_main_category("TAX", -5)
    assert [c.code for c in order] == ["TAX", "INCOME", "ADMIN"]
    order = ledger.move_main_category("TAX", 1)
    assert [c.code for c in order] == ["INCOME", "TAX", "ADMIN"]


def test_kind_of_referenced_main_category_cannot_change(ledger):
    ledger.add_one_time_entry(OneTimeEntryInput(date=date(2024, 1, 5), amount=10.0, main_category="ADMIN"))
    before = ledger.snapshot

    with pytest.raises(ReferentialConflictError):
        ledger.update_main_category("ADMIN", kind=CategoryKind.INCOME)
    assert ledger.snapshot is before
    assert ledger.engine().year_summary().total_expense == 10.0

    renamed = ledger.update_main_category("ADMIN", name="Admin costs", kind=CategoryKind.EXPENSE)
    assert renamed.name == "Admin costs"


def test_kind_of_unused_main_category_can_change(ledger):
    updated = ledger.update_main_category("ADMIN", kind=CategoryKind.INCOME)

    assert updated.kind == CategoryKind.INCOME


def test_entry_ids_are_stable_and_never_reused(ledger):
    first = ledger.add_one_time_entry(OneTimeEntryInput(date=date(2024, 1, 5), amount=10.0))
    second = ledger.add_one_time_entry(OneTimeEntryInput(date=date(2024, 1, 6), amount=20.0))
    ledger.remove_one_time_entry(first.id)
    third = ledger.add_one_time_entry(OneTimeEntryInput(date=date(2024, 1, 7), amount=30.0))

    assert (first.id, second.id, third.id) == (1, 2, 3)
    assert [e.id for e in ledger.snapshot.one_time_entries] == [2, 3]


def test_unknown_entry_ids_rejected(ledger):
    data = OneTimeEntryInput(date=date(2024, 1, 5), amount=10.0)

    with pytest.raises(InvalidLookupIdError):
        ledger.update_one_time_entry(99, data)
    with pytest.raises(InvalidLookupIdError):
        ledger.remove_one_time_entry(99)
    with pytest.raises(InvalidLookupIdError):
        ledger.remove_recurring_entry(99)


def test_update_and_toggle_one_time_entry(ledger):
    entry = ledger.add_one_time_entry(OneTimeEntryInput(date=date(2024, 1, 5), amount=10.0))
    updated = ledger.update_one_time_entry(entry.id, OneTimeEntryInput(date=date(2024, 2, 5), amount=15.0))
    toggled = ledger.toggle_actual_payment(entry.id)

    assert updated.id == entry.id
    assert updated.amount == 15.0
    assert toggled.is_actual_payment is False
    assert ledger.snapshot.one_time_entries[0].date == date(2024, 2, 5)


def test_recurring_range_validation(ledger):
    with pytest.raises(InvalidDateError):
        ledger.add_recurring_entry(rent(start_month="2024-05", end_month="2024-04"))
    assert ledger.snapshot.recurring_entries == []


def test_materialize_recurring(ledger):
    definition = ledger.add_recurring_entry(rent(end_month="2024-03"))
    created = ledger.materialize_recurring(definition.id, 2024)

    assert len(created) == 3
    assert all(e.recurring_id == definition.id for e in created)
    assert all(e.description == f"{RECURRING_PREFIX}Rent" for e in created)
    # The definition now contributes through its copies only.
    assert ledger.engine().year_summary().total_expense == 2400.0

    again = ledger.materialize_recurring(definition.id, 2024)
    assert len(ledger.snapshot.one_time_entries) == 3
    assert {e.id for e in again}.isdisjoint({e.id for e in created})


def test_removing_definition_removes_its_copies(ledger):
    definition = ledger.add_recurring_entry(rent(end_month="2024-02"))
    ledger.materialize_recurring(definition.id, 2024)
    ledger.add_one_time_entry(OneTimeEntryInput(date=date(2024, 1, 9), amount=5.0))

    ledger.remove_recurring_entry(definition.id)

    assert [e.amount for e in ledger.snapshot.one_time_entries] == [5.0]
    assert ledger.engine().year_summary().total_expense == 5.0


def test_moving_a_copy_to_another_year_keeps_that_years_occurrences(ledger):
    definition = ledger.add_recurring_entry(rent(day_of_month=10, amount=50.0))
    created = ledger.materialize_recurring(definition.id, 2024)
    assert ledger.engine().monthly_balances(2025)[-1].final_balance == -600.0

    first = created[0]
    moved = OneTimeEntryInput(date=date(2025, 1, 3), amount=first.amount, description=first.description,
                              main_category=first.main_category, sub_category=first.sub_category)
    ledger.update_one_time_entry(first.id, moved)

    engine = ledger.engine()
    assert engine.monthly_balances(2025)[-1].final_balance == -650.0
    assert engine.monthly_balances(2024)[-1].final_balance == -550.0
    assert ledger.snapshot.recurring_entries[0].materialized_years == [2024]


def test_updating_definition_clears_materialized_years(ledger):
    definition = ledger.add_recurring_entry(rent(end_month="2024-02"))
    ledger.materialize_recurring(definition.id, 2024)

    updated = ledger.update_recurring_entry(definition.id, rent(end_month="2024-03"))

    assert updated.materialized_years == []
    assert ledger.snapshot.one_time_entries == []
    assert ledger.engine().year_summary(2024).total_expense == 2400.0


def test_recurring_ids_are_never_reused(ledger):
    first = ledger.add_recurring_entry(rent())
    ledger.remove_recurring_entry(first.id)
    second = ledger.add_recurring_entry(rent())

    assert second.id == first.id + 1


def test_holidays_stay_sorted_and_unique(ledger):
    ledger.add_holiday(2024, 12, 25, "Christmas Day")
    holidays = ledger.add_holiday(2024, 1, 1, "New Year's Day")

    assert [(h.month, h.day) for h in holidays] == [(1, 1), (12, 25)]
    with pytest.raises(DuplicateHolidayError):
        ledger.add_holiday(2024, 1, 1, "Again")
    with pytest.raises(InvalidDateError):
        ledger.add_holiday(2023, 2, 29, "Leap")


def test_remove_holidays(ledger):
    ledger.seed_holidays(2024)
    remaining = ledger.remove_holiday(2024, 12, 25)

    assert (12, 25) not in [(h.month, h.day) for h in remaining]
    with pytest.raises(InvalidLookupIdError):
        ledger.remove_holiday(2024, 12, 25)
    assert ledger.remove_year_holidays(2024) == len(remaining)
    assert 2024 not in ledger.snapshot.holidays


def test_replace_holidays_validates_batch(ledger):
    ledger.add_holiday(2024, 5, 5, "Children's Day")
    batch = [Holiday(month=3, day=1), Holiday(month=3, day=1)]

    with pytest.raises(DuplicateHolidayError):
        ledger.replace_holidays(2024, batch)
    assert len(ledger.snapshot.holidays[2024]) == 1

    replaced = ledger.replace_holidays(2024, [Holiday(month=10, day=3), Holiday(month=3, day=1)])
    assert [(h.month, h.day) for h in replaced] == [(3, 1), (10, 3)]


def test_seed_defaults_and_change_year():
    ledger = LedgerService(LedgerSnapshot(selected_year=2024))
    ledger.seed_defaults(2025)

    assert ledger.snapshot.selected_year == 2025
    assert ledger.snapshot.categories.main
    assert 2025 in ledger.snapshot.holidays
    assert ledger.change_year(2026) == 2026


def test_mutations_are_persisted(tmp_path):
    store = JsonLedgerStore(str(tmp_path / "ledger.json"))
    ledger = LedgerService(LedgerSnapshot(selected_year=2024), store)
    ledger.add_main_category("INCOME", "Income", CategoryKind.INCOME)

    assert store.load().categories.main[0].code == "INCOME"


def test_failed_mutation_is_not_persisted(tmp_path):
    store = JsonLedgerStore(str(tmp_path / "ledger.json"))
    ledger = LedgerService(LedgerSnapshot(selected_year=2024), store)
    ledger.add_main_category("INCOME", "Income", CategoryKind.INCOME)

    with pytest.raises(DuplicateCodeError):
        ledger.add_main_category("INCOME", "Again")
    assert len(store.load().categories.main) == 1


def test_replace_snapshot_copies_input(ledger):
    replacement = LedgerSnapshot(selected_year=2030)
    ledger.replace_snapshot(replacement)
    replacement.selected_year = 1999

    assert ledger.snapshot.selected_year == 2030
    assert ledger.snapshot.categories.main == []

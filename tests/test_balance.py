from datetime import date

import pytest

from cashflow_ledger.domain.balance import carry_forward, monthly_balances, monthly_originals, summarize_year
from cashflow_ledger.models import ClassifiedEntry


def entry(day: date, amount: float, is_income: bool, **extra) -> ClassifiedEntry:
    return ClassifiedEntry(
        date=day,
        amount=amount,
        description=extra.pop("description", ""),
        main_category="INCOME" if is_income else "EXPENSE",
        main_name="Income" if is_income else "Expense",
        is_income=is_income,
        **extra,
    )


@pytest.fixture
def scenario_entries():
    return [
        entry(date(2024, 3, 15), 1000.0, True),
        entry(date(2024, 4, 1), 400.0, False),
    ]


def test_originals_and_carryover(scenario_entries):
    records = monthly_balances(scenario_entries, 2024)

    assert [r.original_balance for r in records] == [0, 0, 1000, -400, 0, 0, 0, 0, 0, 0, 0, 0]
    assert [r.final_balance for r in records] == [0, 0, 1000, 600, 600, 600, 600, 600, 600, 600, 600, 600]
    assert [r.month for r in records] == list(range(1, 13))


def test_carryover_chain():
    records = carry_forward([10.0, -5.0, 2.5] + [0.0] * 9)

    assert records[0].carryover_from_previous == 0
    for previous, current in zip(records, records[1:]):
        assert current.carryover_from_previous == previous.final_balance
        assert current.final_balance == current.original_balance + current.carryover_from_previous


def test_final_balance_equals_sum_of_originals():
    entries = [
        entry(date(2024, month, 10), 100.0 * month, month % 2 == 0)
        for month in range(1, 13)
    ]
    records = monthly_balances(entries, 2024)

    assert records[-1].final_balance == pytest.approx(sum(r.original_balance for r in records))


def test_entries_from_other_years_are_ignored(scenario_entries):
    scenario_entries.append(entry(date(2023, 12, 31), 5000.0, True))

    assert monthly_originals(scenario_entries, 2024)[11] == 0
    assert sum(monthly_originals(scenario_entries, 2024)) == 600


def test_pending_entries_still_count_toward_balances():
    entries = [entry(date(2024, 1, 5), 250.0, False, is_actual_payment=False)]

    assert monthly_originals(entries, 2024)[0] == -250.0


def test_balances_are_deterministic(scenario_entries):
    assert monthly_balances(scenario_entries, 2024) == monthly_balances(list(scenario_entries), 2024)
    assert monthly_balances(scenario_entries, 2024) == monthly_balances(scenario_entries[::-1], 2024)


def test_empty_year_is_all_zero():
    records = monthly_balances([], 2024)

    assert len(records) == 12
    assert all(r.final_balance == 0 for r in records)


def test_year_summary(scenario_entries):
    balances = monthly_balances(scenario_entries, 2024)
    summary = summarize_year(scenario_entries, balances, 2024)

    assert summary.total_income == 1000
    assert summary.total_expense == 400
    assert summary.net_income == 600
    assert summary.final_balance == 600

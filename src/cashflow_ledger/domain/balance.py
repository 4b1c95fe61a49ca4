from collections.abc import Iterable, Sequence

from cashflow_ledger.models import ClassifiedEntry, MonthlyBalanceRecord, YearSummary


def monthly_originals(entries: Iterable[ClassifiedEntry], year: int) -> list[float]:
    """Net amount per month of ``year``; income adds, expense subtracts.

    Every entry counts, settled or pending (``is_actual_payment`` is ignored).
    """
    totals = [0.0] * 12
    for entry in entries:
        if entry.date.year != year:
            continue
        totals[entry.date.month - 1] += entry.signed_amount
    return totals


def carry_forward(originals: Sequence[float]) -> list[MonthlyBalanceRecord]:
    records: list[MonthlyBalanceRecord] = []
    carryover = 0.0
    for index, original in enumerate(originals):
        final = original + carryover
        records.append(MonthlyBalanceRecord(
            month=index + 1,
            original_balance=original,
            carryover_from_previous=carryover,
            final_balance=final,
        ))
        carryover = final
    return records


def monthly_balances(entries: Iterable[ClassifiedEntry], year: int) -> list[MonthlyBalanceRecord]:
    return carry_forward(monthly_originals(entries, year))


def summarize_year(
    entries: Iterable[ClassifiedEntry],
    balances: Sequence[MonthlyBalanceRecord],
    year: int,
) -> YearSummary:
    total_income = 0.0
    total_expense = 0.0
    for entry in entries:
        if entry.date.year != year:
            continue
        if entry.is_income:
            total_income += entry.amount
        else:
            total_expense += entry.amount

    return YearSummary(
        year=year,
        total_income=total_income,
        total_expense=total_expense,
        net_income=total_income - total_expense,
        final_balance=balances[-1].final_balance if balances else 0.0,
    )

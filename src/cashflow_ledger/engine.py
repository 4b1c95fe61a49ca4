from datetime import date

from cashflow_ledger.domain.balance import monthly_balances, summarize_year
from cashflow_ledger.domain.categories import CategoryResolver
from cashflow_ledger.domain.details import DetailFilter, filter_by_date_range, query_details
from cashflow_ledger.domain.recurrence import expand_recurring
from cashflow_ledger.domain.summary import finance_statement, summarize_by_category
from cashflow_ledger.models import (
    CategorySummary,
    ClassifiedEntry,
    FinanceStatementRow,
    LedgerSnapshot,
    MonthlyBalanceRecord,
    YearSummary,
)


def _entry_sort_key(entry: ClassifiedEntry) -> tuple[date, bool, int]:
    return entry.date, entry.is_recurring, entry.entry_id or entry.recurring_id or 0


class LedgerEngine:
    """Every ledger view computed from one snapshot.

    The engine never mutates the snapshot and keeps no cache, so two engines
    over the same snapshot always agree.
    """

    def __init__(self, snapshot: LedgerSnapshot) -> None:
        self.snapshot = snapshot
        self.resolver = CategoryResolver(snapshot.categories)

    def _year(self, year: int | None) -> int:
        return self.snapshot.selected_year if year is None else year

    def materialized_ids(self, year: int) -> set[int]:
        return {
            definition.id
            for definition in self.snapshot.recurring_entries
            if year in definition.materialized_years
        }

    def one_time_entries(self, year: int | None = None) -> list[ClassifiedEntry]:
        year = self._year(year)
        return [
            self.resolver.classify(entry)
            for entry in self.snapshot.one_time_entries
            if entry.date.year == year
        ]

    def recurring_occurrences(self, year: int | None = None) -> list[ClassifiedEntry]:
        year = self._year(year)
        # Definitions already copied into the one-time store for this year are
        # represented by those copies.
        materialized = self.materialized_ids(year)
        classified: list[ClassifiedEntry] = []
        for definition in self.snapshot.recurring_entries:
            if definition.id in materialized:
                continue
            for occurrence in expand_recurring(definition, year, self.snapshot.holidays):
                classified.append(self.resolver.classify(occurrence))
        return classified

    def year_entries(self, year: int | None = None) -> list[ClassifiedEntry]:
        year = self._year(year)
        entries = self.one_time_entries(year) + self.recurring_occurrences(year)
        entries.sort(key=_entry_sort_key)
        return entries

    def entries_for_month(self, month: int, year: int | None = None) -> list[ClassifiedEntry]:
        return [entry for entry in self.year_entries(year) if entry.date.month == month]

    def monthly_balances(self, year: int | None = None) -> list[MonthlyBalanceRecord]:
        year = self._year(year)
        return monthly_balances(self.year_entries(year), year)

    def year_summary(self, year: int | None = None) -> YearSummary:
        year = self._year(year)
        entries = self.year_entries(year)
        return summarize_year(entries, monthly_balances(entries, year), year)

    def month_summary(self, month: int, year: int | None = None) -> CategorySummary:
        return summarize_by_category(self.entries_for_month(month, year))

    def year_category_summary(self, year: int | None = None) -> CategorySummary:
        return summarize_by_category(self.year_entries(year))

    def finance_statement(self, year: int | None = None) -> list[FinanceStatementRow]:
        year = self._year(year)
        return finance_statement(self.year_entries(year), self.snapshot.categories, year)

    def details(self, criteria: DetailFilter, *, include_recurring: bool = False) -> list[ClassifiedEntry]:
        entries = self.one_time_entries(criteria.year)
        if include_recurring:
            entries += self.recurring_occurrences(criteria.year)
        return query_details(entries, criteria)

    def list_one_time_entries(
        self,
        start: date | None = None,
        end: date | None = None,
    ) -> list[ClassifiedEntry]:
        classified = [self.resolver.classify(entry) for entry in self.snapshot.one_time_entries]
        return filter_by_date_range(classified, start, end)

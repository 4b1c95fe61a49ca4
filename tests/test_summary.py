from datetime import date

from cashflow_ledger.domain.categories import CategoryResolver
from cashflow_ledger.domain.summary import finance_statement, summarize_by_category
from cashflow_ledger.models import (
    CategoryKind,
    CategoryRegistry,
    MainCategory,
    OneTimeEntry,
    SubCategory,
)

REGISTRY = CategoryRegistry(
    main=[
        MainCategory(code="INCOME", name="Income", kind=CategoryKind.INCOME),
        MainCategory(code="ADMIN", name="Administration"),
        MainCategory(code="TAX", name="Taxes"),
    ],
    sub=[
        SubCategory(main_code="ADMIN", code="RENT", name="Rent"),
        SubCategory(main_code="ADMIN", code="UTILITY", name="Utilities"),
    ],
)


def classify(entries):
    resolver = CategoryResolver(REGISTRY)
    return [resolver.classify(e) for e in entries]


def one_time(entry_id, day, amount, main=None, sub=None, description=""):
    return OneTimeEntry(id=entry_id, date=day, amount=amount, main_category=main,
                        sub_category=sub, description=description)


def test_groups_by_main_and_sub_in_first_seen_order():
    entries = classify([
        one_time(1, date(2024, 1, 3), 100.0, "ADMIN", "RENT"),
        one_time(2, date(2024, 1, 4), 2000.0, "INCOME"),
        one_time(3, date(2024, 1, 5), 50.0, "ADMIN", "UTILITY"),
        one_time(4, date(2024, 1, 6), 100.0, "ADMIN", "RENT"),
    ])
    summary = summarize_by_category(entries)

    assert [row.code for row in summary.main_categories] == ["ADMIN", "INCOME"]
    admin = summary.main_categories[0]
    assert admin.count == 3
    assert admin.total_amount == 250.0
    assert admin.is_income is False

    assert [(row.sub_code, row.count, row.total_amount) for row in summary.sub_categories] == [
        ("RENT", 2, 200.0),
        ("UTILITY", 1, 50.0),
    ]
    assert summary.total_income == 2000.0
    assert summary.total_expense == 250.0
    assert summary.total_count == 4


def test_entries_without_sub_only_count_toward_main():
    summary = summarize_by_category(classify([one_time(1, date(2024, 1, 3), 10.0, "TAX")]))

    assert summary.main_categories[0].count == 1
    assert summary.sub_categories == []


def test_missing_main_groups_under_uncategorized():
    summary = summarize_by_category(classify([
        one_time(1, date(2024, 1, 3), 10.0),
        one_time(2, date(2024, 1, 4), 15.0),
    ]))

    assert len(summary.main_categories) == 1
    row = summary.main_categories[0]
    assert (row.code, row.name, row.count, row.total_amount) == ("NONE", "Uncategorized", 2, 25.0)
    assert summary.total_expense == 25.0


def test_unknown_main_keeps_its_code():
    summary = summarize_by_category(classify([one_time(1, date(2024, 1, 3), 10.0, "DELETED")]))

    row = summary.main_categories[0]
    assert row.code == "DELETED"
    assert row.name == "Uncategorized"
    assert row.is_income is False


def test_totals_are_consistent():
    summary = summarize_by_category(classify([
        one_time(1, date(2024, 1, 3), 100.0, "ADMIN", "RENT"),
        one_time(2, date(2024, 2, 4), 300.0, "INCOME"),
        one_time(3, date(2024, 3, 5), 7.5),
    ]))

    assert sum(row.count for row in summary.main_categories) == summary.total_count
    assert sum(row.total_amount for row in summary.main_categories) == summary.total_income + summary.total_expense


def test_empty_summary():
    summary = summarize_by_category([])

    assert summary.main_categories == []
    assert summary.total_count == 0
    assert summary.total_income == 0


def test_finance_statement_rows_follow_registry_order():
    entries = classify([
        one_time(1, date(2024, 1, 3), 100.0, "ADMIN", "RENT"),
        one_time(2, date(2024, 3, 4), 2000.0, "INCOME"),
        one_time(3, date(2024, 3, 5), 40.0, "ADMIN"),
        one_time(4, date(2024, 3, 6), 9.0, "DELETED"),
        one_time(5, date(2023, 3, 6), 9.0, "TAX"),
    ])
    rows = finance_statement(entries, REGISTRY, 2024)

    assert [row.code for row in rows] == ["INCOME", "ADMIN", "TAX"]
    admin = rows[1]
    assert admin.monthly_amounts[0] == 100.0
    assert admin.monthly_amounts[2] == 40.0
    assert admin.total_amount == 140.0
    assert rows[0].is_income is True
    assert rows[2].total_amount == 0
    assert all(len(row.monthly_amounts) == 12 for row in rows)

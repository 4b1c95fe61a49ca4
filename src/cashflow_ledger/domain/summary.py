from collections.abc import Iterable

from cashflow_ledger.domain.categories import UNCATEGORIZED_CODE, UNCATEGORIZED_NAME
from cashflow_ledger.models import (
    CategoryKind,
    CategoryRegistry,
    CategorySummary,
    ClassifiedEntry,
    FinanceStatementRow,
    MainCategoryTotal,
    SubCategoryTotal,
)


def summarize_by_category(entries: Iterable[ClassifiedEntry]) -> CategorySummary:
    """Group classified entries by main category and by (main, sub) pair.

    Rows keep first-seen order. Entries without a main category collect under
    ``NONE``; entries without a sub category only count toward the main row.
    """
    mains: dict[str, MainCategoryTotal] = {}
    subs: dict[tuple[str, str], SubCategoryTotal] = {}
    total_income = 0.0
    total_expense = 0.0
    total_count = 0

    for entry in entries:
        total_count += 1
        main_code = entry.main_category or UNCATEGORIZED_CODE
        main_name = entry.main_name if entry.main_category else UNCATEGORIZED_NAME

        main_row = mains.get(main_code)
        if main_row is None:
            main_row = MainCategoryTotal(code=main_code, name=main_name, is_income=entry.is_income)
            mains[main_code] = main_row
        main_row.count += 1
        main_row.total_amount += entry.amount

        if entry.sub_category:
            key = (main_code, entry.sub_category)
            sub_row = subs.get(key)
            if sub_row is None:
                sub_row = SubCategoryTotal(
                    main_code=main_code,
                    main_name=main_name,
                    sub_code=entry.sub_category,
                    sub_name=entry.sub_name or UNCATEGORIZED_NAME,
                    is_income=entry.is_income,
                )
                subs[key] = sub_row
            sub_row.count += 1
            sub_row.total_amount += entry.amount

        if entry.is_income:
            total_income += entry.amount
        else:
            total_expense += entry.amount

    return CategorySummary(
        main_categories=list(mains.values()),
        sub_categories=list(subs.values()),
        total_income=total_income,
        total_expense=total_expense,
        total_count=total_count,
    )


def finance_statement(
    entries: Iterable[ClassifiedEntry],
    registry: CategoryRegistry,
    year: int,
) -> list[FinanceStatementRow]:
    rows = {
        category.code: FinanceStatementRow(
            code=category.code,
            name=category.name,
            is_income=category.kind == CategoryKind.INCOME,
            monthly_amounts=[0.0] * 12,
            total_amount=0.0,
        )
        for category in registry.main
    }

    for entry in entries:
        if entry.date.year != year or not entry.main_category:
            continue
        row = rows.get(entry.main_category)
        if row is None:
            continue
        row.monthly_amounts[entry.date.month - 1] += entry.amount
        row.total_amount += entry.amount

    return list(rows.values())

from typing import Annotated

from fastapi import APIRouter, Depends, Path, Query

from cashflow_ledger.api.dependencies import get_engine
from cashflow_ledger.api.schemas import MonthReport
from cashflow_ledger.domain.details import DetailFilter, EntryType
from cashflow_ledger.engine import LedgerEngine
from cashflow_ledger.models import (
    CategorySummary,
    ClassifiedEntry,
    FinanceStatementRow,
    MonthlyBalanceRecord,
    YearSummary,
)

router = APIRouter(prefix="/api/reports", tags=["reports"])

Month = Annotated[int, Path(ge=1, le=12)]


@router.get("/balances", response_model=list[MonthlyBalanceRecord])
async def get_monthly_balances(
    engine: Annotated[LedgerEngine, Depends(get_engine)],
    year: int | None = None,
) -> list[MonthlyBalanceRecord]:
    return engine.monthly_balances(year)


@router.get("/summary", response_model=YearSummary)
async def get_year_summary(
    engine: Annotated[LedgerEngine, Depends(get_engine)],
    year: int | None = None,
) -> YearSummary:
    return engine.year_summary(year)


@router.get("/categories", response_model=CategorySummary)
async def get_year_category_summary(
    engine: Annotated[LedgerEngine, Depends(get_engine)],
    year: int | None = None,
) -> CategorySummary:
    return engine.year_category_summary(year)


@router.get("/finance-statement", response_model=list[FinanceStatementRow])
async def get_finance_statement(
    engine: Annotated[LedgerEngine, Depends(get_engine)],
    year: int | None = None,
) -> list[FinanceStatementRow]:
    return engine.finance_statement(year)


@router.get("/months/{month}", response_model=MonthReport)
async def get_month_report(
    month: Month,
    engine: Annotated[LedgerEngine, Depends(get_engine)],
    year: int | None = None,
) -> MonthReport:
    resolved_year = year or engine.snapshot.selected_year
    entries = engine.entries_for_month(month, resolved_year)
    return MonthReport(
        year=resolved_year,
        month=month,
        entries=entries,
        summary=engine.month_summary(month, resolved_year),
    )


@router.get("/months/{month}/details", response_model=list[ClassifiedEntry])
async def get_month_details(
    month: Month,
    engine: Annotated[LedgerEngine, Depends(get_engine)],
    year: int | None = None,
    entry_type: Annotated[EntryType, Query(alias="type")] = "any",
    category: str | None = None,
    subcategory: str | None = None,
    description: str | None = None,
    include_recurring: bool = False,
) -> list[ClassifiedEntry]:
    criteria = DetailFilter(
        year=year or engine.snapshot.selected_year,
        month=month,
        type=entry_type,
        category_name=category,
        subcategory_name=subcategory,
        description=description,
    )
    return engine.details(criteria, include_recurring=include_recurring)

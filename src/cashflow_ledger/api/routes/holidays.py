from typing import Annotated

from fastapi import APIRouter, Depends

from cashflow_ledger.api.dependencies import get_ledger
from cashflow_ledger.api.schemas import HolidayBatchRequest, HolidayRequest
from cashflow_ledger.models import Holiday
from cashflow_ledger.services.ledger import LedgerService

router = APIRouter(prefix="/api/holidays", tags=["holidays"])


@router.get("", response_model=dict[int, list[Holiday]])
async def get_holidays(
    ledger: Annotated[LedgerService, Depends(get_ledger)],
    year: int | None = None,
) -> dict[int, list[Holiday]]:
    holidays = ledger.snapshot.holidays
    if year is None:
        return holidays
    return {year: holidays.get(year, [])}


@router.post("", response_model=list[Holiday], status_code=201)
async def add_holiday(
    req: HolidayRequest,
    ledger: Annotated[LedgerService, Depends(get_ledger)],
) -> list[Holiday]:
    return ledger.add_holiday(req.year, req.month, req.day, req.name)


@router.put("/{year}", response_model=list[Holiday])
async def replace_holidays(
    year: int,
    req: HolidayBatchRequest,
    ledger: Annotated[LedgerService, Depends(get_ledger)],
) -> list[Holiday]:
    return ledger.replace_holidays(year, req.holidays)


@router.post("/{year}/defaults", response_model=list[Holiday])
async def seed_holidays(
    year: int,
    ledger: Annotated[LedgerService, Depends(get_ledger)],
) -> list[Holiday]:
    return ledger.seed_holidays(year)


@router.delete("/{year}", status_code=204)
async def remove_year_holidays(
    year: int,
    ledger: Annotated[LedgerService, Depends(get_ledger)],
) -> None:
    ledger.remove_year_holidays(year)


@router.delete("/{year}/{month}/{day}", response_model=list[Holiday])
async def remove_holiday(
    year: int,
    month: int,
    day: int,
    ledger: Annotated[LedgerService, Depends(get_ledger)],
) -> list[Holiday]:
    return ledger.remove_holiday(year, month, day)

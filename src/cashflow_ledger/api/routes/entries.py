from datetime import date
from typing import Annotated

from fastapi import APIRouter, Depends

from cashflow_ledger.api.dependencies import get_engine, get_ledger
from cashflow_ledger.domain.recurrence import expand_recurring
from cashflow_ledger.engine import LedgerEngine
from cashflow_ledger.errors import InvalidLookupIdError
from cashflow_ledger.models import (
    ClassifiedEntry,
    Occurrence,
    OneTimeEntry,
    OneTimeEntryInput,
    RecurringEntryDefinition,
    RecurringEntryInput,
)
from cashflow_ledger.services.ledger import LedgerService

router = APIRouter(prefix="/api/entries", tags=["entries"])


@router.get("/one-time", response_model=list[ClassifiedEntry])
async def list_one_time_entries(
    engine: Annotated[LedgerEngine, Depends(get_engine)],
    start_date: date | None = None,
    end_date: date | None = None,
) -> list[ClassifiedEntry]:
    return engine.list_one_time_entries(start_date, end_date)


@router.post("/one-time", response_model=OneTimeEntry, status_code=201)
async def add_one_time_entry(
    req: OneTimeEntryInput,
    ledger: Annotated[LedgerService, Depends(get_ledger)],
) -> OneTimeEntry:
    return ledger.add_one_time_entry(req)


@router.put("/one-time/{entry_id}", response_model=OneTimeEntry)
async def update_one_time_entry(
    entry_id: int,
    req: OneTimeEntryInput,
    ledger: Annotated[LedgerService, Depends(get_ledger)],
) -> OneTimeEntry:
    return ledger.update_one_time_entry(entry_id, req)


@router.post("/one-time/{entry_id}/toggle-payment", response_model=OneTimeEntry)
async def toggle_actual_payment(
    entry_id: int,
    ledger: Annotated[LedgerService, Depends(get_ledger)],
) -> OneTimeEntry:
    return ledger.toggle_actual_payment(entry_id)


@router.delete("/one-time/{entry_id}", status_code=204)
async def remove_one_time_entry(
    entry_id: int,
    ledger: Annotated[LedgerService, Depends(get_ledger)],
) -> None:
    ledger.remove_one_time_entry(entry_id)


@router.get("/recurring", response_model=list[RecurringEntryDefinition])
async def list_recurring_entries(
    ledger: Annotated[LedgerService, Depends(get_ledger)],
) -> list[RecurringEntryDefinition]:
    return ledger.snapshot.recurring_entries


@router.post("/recurring", response_model=RecurringEntryDefinition, status_code=201)
async def add_recurring_entry(
    req: RecurringEntryInput,
    ledger: Annotated[LedgerService, Depends(get_ledger)],
) -> RecurringEntryDefinition:
    return ledger.add_recurring_entry(req)


@router.put("/recurring/{recurring_id}", response_model=RecurringEntryDefinition)
async def update_recurring_entry(
    recurring_id: int,
    req: RecurringEntryInput,
    ledger: Annotated[LedgerService, Depends(get_ledger)],
) -> RecurringEntryDefinition:
    return ledger.update_recurring_entry(recurring_id, req)


@router.delete("/recurring/{recurring_id}", status_code=204)
async def remove_recurring_entry(
    recurring_id: int,
    ledger: Annotated[LedgerService, Depends(get_ledger)],
) -> None:
    ledger.remove_recurring_entry(recurring_id)


@router.get("/recurring/{recurring_id}/occurrences", response_model=list[Occurrence])
async def preview_occurrences(
    recurring_id: int,
    ledger: Annotated[LedgerService, Depends(get_ledger)],
    year: int | None = None,
) -> list[Occurrence]:
    snapshot = ledger.snapshot
    definition = next((d for d in snapshot.recurring_entries if d.id == recurring_id), None)
    if definition is None:
        raise InvalidLookupIdError(f"Recurring entry not found: {recurring_id}")
    return expand_recurring(definition, year or snapshot.selected_year, snapshot.holidays)


@router.post("/recurring/{recurring_id}/materialize", response_model=list[OneTimeEntry])
async def materialize_recurring(
    recurring_id: int,
    ledger: Annotated[LedgerService, Depends(get_ledger)],
    year: int | None = None,
) -> list[OneTimeEntry]:
    return ledger.materialize_recurring(recurring_id, year or ledger.snapshot.selected_year)

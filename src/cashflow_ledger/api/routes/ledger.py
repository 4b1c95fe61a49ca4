from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from cashflow_ledger.api.dependencies import get_ledger, get_store
from cashflow_ledger.api.schemas import YearRequest
from cashflow_ledger.integration.storage import JsonLedgerStore
from cashflow_ledger.logger import get_logger
from cashflow_ledger.models import LedgerSnapshot
from cashflow_ledger.services.ledger import LedgerService

logger = get_logger(__name__)

router = APIRouter(prefix="/api/ledger", tags=["ledger"])


class BackupPath(BaseModel):
    path: str


@router.get("/snapshot", response_model=LedgerSnapshot)
async def get_snapshot(
    ledger: Annotated[LedgerService, Depends(get_ledger)],
) -> LedgerSnapshot:
    return ledger.snapshot


@router.get("/year", response_model=YearRequest)
async def get_year(
    ledger: Annotated[LedgerService, Depends(get_ledger)],
) -> YearRequest:
    return YearRequest(year=ledger.snapshot.selected_year)


@router.put("/year", response_model=YearRequest)
async def change_year(
    req: YearRequest,
    ledger: Annotated[LedgerService, Depends(get_ledger)],
) -> YearRequest:
    return YearRequest(year=ledger.change_year(req.year))


@router.post("/seed", status_code=204)
async def seed_defaults(
    ledger: Annotated[LedgerService, Depends(get_ledger)],
    year: int | None = None,
) -> None:
    ledger.seed_defaults(year)


@router.post("/backup", response_model=BackupPath)
async def backup(
    ledger: Annotated[LedgerService, Depends(get_ledger)],
    store: Annotated[JsonLedgerStore, Depends(get_store)],
) -> BackupPath:
    try:
        path = store.backup(ledger.snapshot)
    except OSError as exc:
        logger.error("Backup failed: %s", exc)
        raise HTTPException(status_code=500, detail=f"Backup failed: {exc}") from exc
    return BackupPath(path=path)


@router.post("/restore", status_code=204)
async def restore(
    snapshot: LedgerSnapshot,
    ledger: Annotated[LedgerService, Depends(get_ledger)],
) -> None:
    """Replace the ledger with an uploaded snapshot document."""
    ledger.replace_snapshot(snapshot)

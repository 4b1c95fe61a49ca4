from fastapi import HTTPException, Request

from cashflow_ledger.engine import LedgerEngine
from cashflow_ledger.integration.storage import JsonLedgerStore
from cashflow_ledger.services.ledger import LedgerService


def get_ledger(request: Request) -> LedgerService:
    ledger = getattr(request.app.state, "ledger", None)
    if not ledger:
        raise HTTPException(status_code=500, detail="Ledger not initialized")
    return ledger


def get_engine(request: Request) -> LedgerEngine:
    return get_ledger(request).engine()


def get_store(request: Request) -> JsonLedgerStore:
    store = getattr(get_ledger(request), "store", None)
    if not store:
        raise HTTPException(status_code=500, detail="Ledger storage not configured")
    return store

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from cashflow_ledger.api.routes import categories, entries, holidays, ledger, reports
from cashflow_ledger.core import settings
from cashflow_ledger.errors import (
    DuplicateCodeError,
    InvalidDateError,
    InvalidLookupIdError,
    LedgerError,
    ReferentialConflictError,
)
from cashflow_ledger.integration.storage import JsonLedgerStore
from cashflow_ledger.logger import get_logger, setup_logging
from cashflow_ledger.services.ledger import LedgerService

logger = get_logger(__name__)

_ERROR_STATUS: tuple[tuple[type[LedgerError], int], ...] = (
    (InvalidLookupIdError, 404),
    (DuplicateCodeError, 409),
    (ReferentialConflictError, 409),
    (InvalidDateError, 422),
)


def status_for_error(exc: LedgerError) -> int:
    for error_type, status in _ERROR_STATUS:
        if isinstance(exc, error_type):
            return status
    return 400


def build_ledger_service(config: settings.LedgerSettings) -> LedgerService:
    store = JsonLedgerStore(config.ledger_path)
    service = LedgerService(store.load(), store)
    if config.seed_defaults and not service.snapshot.categories.main:
        service.seed_defaults(config.ledger_year)
    elif config.ledger_year is not None and config.ledger_year != service.snapshot.selected_year:
        service.change_year(config.ledger_year)
    return service


def create_app() -> FastAPI:
    setup_logging()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        logger.info("Initializing ledger...")
        settings.log_environment()

        config = settings.get_settings()
        app.state.ledger = build_ledger_service(config)

        logger.info("Ledger ready (%s, year %s).", config.ledger_path, app.state.ledger.snapshot.selected_year)
        yield
        logger.info("Service shutting down.")

    app = FastAPI(title="Cashflow Ledger", lifespan=lifespan)

    @app.exception_handler(LedgerError)
    async def ledger_error_handler(request: Request, exc: LedgerError) -> JSONResponse:
        return JSONResponse(status_code=status_for_error(exc), content={"detail": exc.message})

    app.include_router(categories.router)
    app.include_router(entries.router)
    app.include_router(holidays.router)
    app.include_router(reports.router)
    app.include_router(ledger.router)

    return app


app = create_app()

"""
ERP Ledger — FastAPI Application.

This is the entry point for the application.
All routers are registered here.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from erp_ledger.config import get_settings
from erp_ledger.logging_config import configure_logging
from erp_ledger.models.base import SessionLocal
from erp_ledger.services.accounting_module import AccountingModule
from erp_ledger.api.health import router as health_router
from erp_ledger.api.ledger import router as ledger_router
from erp_ledger.api.fiscal_periods import router as fiscal_periods_router
from erp_ledger.api.transactions import router as transactions_router
from erp_ledger.api.journal import router as journal_router

settings = get_settings()
configure_logging()

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Make sure the numbering sequences exist before serving."""
    with SessionLocal() as db:
        AccountingModule(db).register_sequences()
        db.commit()
    logger.info("%s %s started", settings.APP_NAME, settings.APP_VERSION)
    yield


app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Double-entry ledger and transaction posting engine",
    lifespan=lifespan,
)

# Register routers
app.include_router(health_router)
app.include_router(ledger_router)
app.include_router(fiscal_periods_router)
app.include_router(transactions_router)
app.include_router(journal_router)

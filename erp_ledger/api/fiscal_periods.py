"""
Fiscal period API endpoints.
"""

from datetime import date

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from erp_ledger.api.errors import to_http_error
from erp_ledger.exceptions import LedgerError, PeriodNotFoundError
from erp_ledger.models.base import get_db
from erp_ledger.models.enums import FiscalPeriodStatus
from erp_ledger.schemas.fiscal_period import (
    FiscalPeriodCreate,
    FiscalPeriodResponse,
    OpenPeriodCheck,
    PeriodStatusChange,
)
from erp_ledger.services.fiscal_period_service import FiscalPeriodService

router = APIRouter(prefix="/fiscal-periods", tags=["Fiscal Periods"])


@router.post("", response_model=FiscalPeriodResponse, status_code=201)
def create_period(
    request: FiscalPeriodCreate,
    db: Session = Depends(get_db),
):
    service = FiscalPeriodService(db)
    try:
        period = service.create_period(
            code=request.code,
            name=request.name,
            start_date=request.start_date,
            end_date=request.end_date,
            actor=request.actor,
            status=request.status,
            description=request.description,
        )
        db.commit()
        return period
    except LedgerError as e:
        db.rollback()
        raise to_http_error(e)


@router.get("", response_model=list[FiscalPeriodResponse])
def list_periods(
    status: FiscalPeriodStatus | None = None,
    db: Session = Depends(get_db),
):
    service = FiscalPeriodService(db)
    if status is not None:
        return service.get_periods_by_status(status)
    return service.get_all_periods()


@router.get("/check", response_model=OpenPeriodCheck)
def check_date(on: date, db: Session = Depends(get_db)):
    """Whether a posting dated `on` would be accepted by the period gate."""
    service = FiscalPeriodService(db)
    return OpenPeriodCheck(
        checked_date=on,
        is_open=service.is_date_in_open_period(on),
    )


@router.get("/{code}", response_model=FiscalPeriodResponse)
def get_period(code: str, db: Session = Depends(get_db)):
    period = FiscalPeriodService(db).get_period_by_code(code)
    if period is None:
        raise to_http_error(
            PeriodNotFoundError(f"Fiscal period with code '{code}' not found")
        )
    return period


@router.post("/{code}/open", response_model=FiscalPeriodResponse)
def open_period(
    code: str,
    request: PeriodStatusChange,
    db: Session = Depends(get_db),
):
    """Open a period. Opening an open period succeeds."""
    return _change_status(db, code, request.actor, FiscalPeriodStatus.OPEN)


@router.post("/{code}/close", response_model=FiscalPeriodResponse)
def close_period(
    code: str,
    request: PeriodStatusChange,
    db: Session = Depends(get_db),
):
    """
    Close a period. Closing a closed period succeeds.

    Waits for any posting into the period that is already under
    way in this process.
    """
    return _change_status(db, code, request.actor, FiscalPeriodStatus.CLOSED)


def _change_status(
    db: Session, code: str, actor: str, status: FiscalPeriodStatus
):
    service = FiscalPeriodService(db)
    try:
        if status == FiscalPeriodStatus.OPEN:
            service.open_period(code, actor)
        else:
            service.close_period(code, actor)
        db.commit()
    except LedgerError as e:
        db.rollback()
        raise to_http_error(e)
    return service.get_period_by_code(code)

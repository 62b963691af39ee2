"""
Journal API endpoints: entry queries and reports.

Everything here is read-only.
"""

from datetime import date

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from erp_ledger.models.base import get_db
from erp_ledger.schemas.journal import (
    AccountActivityReport,
    AuditTrail,
    JournalQueryOptions,
    JournalReport,
)
from erp_ledger.schemas.transaction import LedgerEntryResponse
from erp_ledger.services.accounting_module import AccountingModule

router = APIRouter(prefix="/journal", tags=["Journal"])


@router.get("/entries", response_model=list[LedgerEntryResponse])
def get_entries(
    options: JournalQueryOptions = Depends(),
    db: Session = Depends(get_db),
):
    """
    Ledger entries matching the query string filters.

    Defaults to every entry, posted or not, ordered by ledger
    entry number.
    """
    return AccountingModule(db).get_journal_entries(options)


@router.get("/report", response_model=JournalReport)
def get_report(
    options: JournalQueryOptions = Depends(),
    db: Session = Depends(get_db),
):
    return AccountingModule(db).generate_journal_report(options)


@router.get("/audit/{transaction_number}", response_model=AuditTrail)
def get_audit_trail(
    transaction_number: str,
    db: Session = Depends(get_db),
):
    """Audit trail of one transaction. found is false for unknown numbers."""
    return AccountingModule(db).generate_audit_trail(transaction_number)


@router.get(
    "/accounts/{account_code}/activity",
    response_model=AccountActivityReport,
)
def get_account_activity(
    account_code: str,
    from_date: date,
    to_date: date,
    db: Session = Depends(get_db),
):
    return AccountingModule(db).generate_account_activity(
        account_code, from_date, to_date
    )

"""
Ledger API endpoints.

Chart of accounts, account balances and the trial balance.
The API layer is thin: it handles HTTP concerns (status codes,
response formatting) and delegates to the services.
"""

from datetime import date

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from erp_ledger.api.errors import to_http_error
from erp_ledger.exceptions import LedgerError
from erp_ledger.models.base import get_db
from erp_ledger.schemas.ledger import (
    AccountCreate,
    AccountResponse,
    AccountBalanceResponse,
    TurnoverResponse,
    TrialBalance,
)
from erp_ledger.services.account_service import AccountService
from erp_ledger.services.accounting_module import AccountingModule

router = APIRouter(prefix="/ledger", tags=["Ledger"])


@router.post("/accounts", response_model=AccountResponse, status_code=201)
def create_account(
    request: AccountCreate,
    db: Session = Depends(get_db),
):
    """
    Create a new account in the chart of accounts.

    Entries reference accounts by code; the trial balance lists
    every account created here that is not archived.
    """
    service = AccountService(db)
    try:
        account = service.create_account(request)
        db.commit()
        return account
    except LedgerError as e:
        db.rollback()
        raise to_http_error(e)


@router.get("/accounts", response_model=list[AccountResponse])
def list_accounts(
    include_archived: bool = False,
    db: Session = Depends(get_db),
):
    return AccountService(db).list_accounts(include_archived=include_archived)


@router.get("/accounts/{code}", response_model=AccountResponse)
def get_account(code: str, db: Session = Depends(get_db)):
    try:
        return AccountService(db).get_account(code)
    except LedgerError as e:
        raise to_http_error(e)


@router.post("/accounts/{code}/archive", response_model=AccountResponse)
def archive_account(code: str, db: Session = Depends(get_db)):
    """Archive an account. Its posted history is kept."""
    service = AccountService(db)
    try:
        account = service.archive_account(code)
        db.commit()
        return account
    except LedgerError as e:
        db.rollback()
        raise to_http_error(e)


@router.get(
    "/accounts/{code}/balance",
    response_model=AccountBalanceResponse,
)
def get_account_balance(
    code: str,
    as_of: date | None = None,
    db: Session = Depends(get_db),
):
    """
    Balance of an account as of a date (default: today).

    Balance is calculated from posted entries, not stored.
    """
    as_of = as_of or date.today()
    module = AccountingModule(db)
    try:
        balance = module.get_account_balance(code, as_of)
    except LedgerError as e:
        raise to_http_error(e)

    return AccountBalanceResponse(
        account_code=code,
        as_of_date=as_of,
        balance=balance,
    )


@router.get(
    "/accounts/{code}/turnover",
    response_model=TurnoverResponse,
)
def get_account_turnover(
    code: str,
    start_date: date,
    end_date: date,
    db: Session = Depends(get_db),
):
    module = AccountingModule(db)
    debits, credits = module.balances.turnover(code, start_date, end_date)
    return TurnoverResponse(
        account_code=code,
        start_date=start_date,
        end_date=end_date,
        debit_turnover=debits,
        credit_turnover=credits,
    )


@router.get("/trial-balance", response_model=TrialBalance)
def get_trial_balance(
    as_of: date | None = None,
    db: Session = Depends(get_db),
):
    return AccountingModule(db).generate_trial_balance(as_of or date.today())

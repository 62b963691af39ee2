"""
Pydantic schemas for accounts, balances and trial balances.

These define the API contract. They are separate from the
database models because the API shape and the storage shape
are often different; trial balance rows are not stored at all.
"""

from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, Field

from erp_ledger.models.enums import AccountType


# --- Request Schemas ---

class AccountCreate(BaseModel):
    """Request to create a new account in the chart of accounts."""
    code: str = Field(min_length=1, max_length=50)
    name: str = Field(min_length=1, max_length=150)
    account_type: AccountType
    parent_code: str | None = Field(default=None, max_length=50)


# --- Response Schemas ---

class AccountResponse(BaseModel):
    id: int
    code: str
    name: str
    account_type: AccountType
    parent_code: str | None
    is_archived: bool
    created_at: datetime

    model_config = {"from_attributes": True}


class AccountBalanceResponse(BaseModel):
    """
    Balance of one account as of a date.

    balance is debits minus credits: positive is a net debit.
    """
    account_code: str
    as_of_date: date
    balance: Decimal


class TurnoverResponse(BaseModel):
    account_code: str
    start_date: date
    end_date: date
    debit_turnover: Decimal
    credit_turnover: Decimal


class TrialBalanceRow(BaseModel):
    """One account line of a trial balance."""
    account_code: str
    account_name: str
    account_type: AccountType
    debit_balance: Decimal = Decimal("0")
    credit_balance: Decimal = Decimal("0")
    # Signed by the account's natural side: positive means the
    # account carries a balance on its normal side.
    net_balance: Decimal = Decimal("0")


class TrialBalance(BaseModel):
    as_of_date: date
    rows: list[TrialBalanceRow]
    total_debits: Decimal
    total_credits: Decimal
    is_balanced: bool
    generated_at: datetime = Field(default_factory=datetime.utcnow)

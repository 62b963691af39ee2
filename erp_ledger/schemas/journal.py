"""
Pydantic schemas for journal queries and reports.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Literal

from pydantic import BaseModel, Field

from erp_ledger.models.enums import EntryType
from erp_ledger.schemas.transaction import LedgerEntryResponse


SortField = Literal[
    "ledger_entry_number", "transaction_number", "account_code", "amount"
]


class JournalQueryOptions(BaseModel):
    """Filters, sorting and paging for a journal entry query."""
    account_code: str | None = None
    from_date: date | None = None
    to_date: date | None = None
    only_posted: bool = False
    transaction_number: str | None = None
    entry_type: EntryType | None = None
    document_number: str | None = None
    sort_by: SortField = "ledger_entry_number"
    sort_descending: bool = False
    skip: int | None = Field(default=None, ge=0)
    limit: int | None = Field(default=None, ge=1)


class JournalReport(BaseModel):
    title: str = "Journal Entry Report"
    from_date: date | None = None
    to_date: date | None = None
    account_code_filter: str | None = None
    transaction_number_filter: str | None = None
    entries: list[LedgerEntryResponse] = Field(default_factory=list)
    total_debits: Decimal = Decimal("0")
    total_credits: Decimal = Decimal("0")
    total_entries: int = 0
    is_balanced: bool = True
    generated_at: datetime = Field(default_factory=datetime.utcnow)


class AuditTrail(BaseModel):
    """Everything needed to re-check one transaction after the fact."""
    transaction_number: str
    found: bool = False
    document_number: str | None = None
    transaction_date: date | None = None
    description: str = ""
    is_posted: bool = False
    entries: list[LedgerEntryResponse] = Field(default_factory=list)
    total_debits: Decimal = Decimal("0")
    total_credits: Decimal = Decimal("0")
    is_balanced: bool = True
    affected_accounts: list[str] = Field(default_factory=list)
    generated_at: datetime = Field(default_factory=datetime.utcnow)


class AccountActivityReport(BaseModel):
    account_code: str
    account_name: str
    from_date: date
    to_date: date
    opening_balance: Decimal
    closing_balance: Decimal
    entries: list[LedgerEntryResponse] = Field(default_factory=list)
    total_debits: Decimal = Decimal("0")
    total_credits: Decimal = Decimal("0")
    total_transactions: int = 0
    generated_at: datetime = Field(default_factory=datetime.utcnow)

"""
Pydantic schemas for documents and transactions.

A Document is what the rest of the ERP hands to the ledger: a
dated, numbered business document with totals, each total
knowing which accounts it hits.
"""

import uuid
from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, Field

from erp_ledger.models.enums import EntryType


# --- Request Schemas ---

class DocumentTotal(BaseModel):
    """One total line of a document (e.g. subtotal, VAT, grand total)."""
    concept: str = Field(min_length=1, max_length=255)
    total: Decimal
    debit_account_code: str | None = None
    credit_account_code: str | None = None
    include_in_transaction: bool = True


class Document(BaseModel):
    document_number: str = Field(min_length=1, max_length=50)
    document_type: str = Field(min_length=1, max_length=50)
    document_date: date
    totals: list[DocumentTotal] = Field(default_factory=list)


class CreateFromDocumentRequest(BaseModel):
    document: Document
    description: str | None = Field(default=None, max_length=255)


# --- Response Schemas ---

class LedgerEntryResponse(BaseModel):
    id: int | None = None
    ledger_entry_number: str
    transaction_number: str
    account_code: str
    account_name: str
    entry_type: EntryType
    amount: Decimal

    model_config = {"from_attributes": True}


class TransactionResponse(BaseModel):
    id: uuid.UUID
    transaction_number: str
    transaction_date: date
    description: str
    document_number: str | None
    is_posted: bool
    posted_at: datetime | None
    entries: list[LedgerEntryResponse]

    model_config = {"from_attributes": True}


class OperationResult(BaseModel):
    """Outcome of post / unpost / validate."""
    transaction_id: uuid.UUID
    transaction_number: str
    success: bool

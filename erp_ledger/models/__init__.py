"""
Database models package.

All models must be imported here so that Alembic can discover
them through Base.metadata when generating migrations.
"""

from erp_ledger.models.base import Base
from erp_ledger.models.enums import (
    AccountType,
    EntryType,
    FiscalPeriodStatus,
    BatchStatus,
)
from erp_ledger.models.activity_record import ActivityRecord
from erp_ledger.models.ledger_account import Account
from erp_ledger.models.fiscal_period import FiscalPeriod
from erp_ledger.models.sequence import Sequence
from erp_ledger.models.transaction_batch import TransactionBatch
from erp_ledger.models.transaction import Transaction
from erp_ledger.models.ledger_entry import LedgerEntry

__all__ = [
    "Base",
    "AccountType",
    "EntryType",
    "FiscalPeriodStatus",
    "BatchStatus",
    "ActivityRecord",
    "Account",
    "FiscalPeriod",
    "Sequence",
    "TransactionBatch",
    "Transaction",
    "LedgerEntry",
]

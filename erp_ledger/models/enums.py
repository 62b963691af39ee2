"""
Shared enumerations for database models.

Using Python enums mapped to database enums ensures that
only valid values can be stored.
"""

import enum


class AccountType(str, enum.Enum):
    """The five fundamental accounting categories."""
    ASSET = "ASSET"
    LIABILITY = "LIABILITY"
    EQUITY = "EQUITY"
    REVENUE = "REVENUE"
    EXPENSE = "EXPENSE"

    @property
    def is_debit_normal(self) -> bool:
        """Increases are recorded as debits (Asset, Expense)."""
        return self in DEBIT_NORMAL_TYPES


DEBIT_NORMAL_TYPES = frozenset({AccountType.ASSET, AccountType.EXPENSE})


class EntryType(str, enum.Enum):
    """Direction of a ledger entry."""
    DEBIT = "DEBIT"
    CREDIT = "CREDIT"


class FiscalPeriodStatus(str, enum.Enum):
    """Whether a fiscal period accepts postings."""
    OPEN = "OPEN"
    CLOSED = "CLOSED"


class BatchStatus(str, enum.Enum):
    """Lifecycle of a transaction batch."""
    DRAFT = "DRAFT"
    APPROVED = "APPROVED"
    PROCESSED = "PROCESSED"

"""
Ledger entry model.

Each entry is one debit or credit line of a transaction, tied
to one account. The amount is always a non-negative magnitude;
the direction lives in entry_type and nowhere else.
"""

import uuid
from decimal import Decimal

from sqlalchemy import (
    String, Integer, Numeric, ForeignKey,
    Enum as SAEnum, Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship, validates

from erp_ledger.exceptions import ValidationError
from erp_ledger.models.base import Base
from erp_ledger.models.enums import EntryType


class LedgerEntry(Base):
    """
    A debit or credit line owned by a transaction.

    ledger_entry_number and transaction_number stay empty until
    the posting engine assigns them. The sum of DEBIT amounts
    must equal the sum of CREDIT amounts within a transaction;
    that rule is enforced by the posting engine, not here.
    """

    __tablename__ = "ledger_entries"

    id: Mapped[int] = mapped_column(primary_key=True)
    transaction_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("transactions.id"), nullable=False, index=True
    )
    position: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0
    )
    ledger_entry_number: Mapped[str] = mapped_column(
        String(50), nullable=False, default="", index=True
    )
    transaction_number: Mapped[str] = mapped_column(
        String(50), nullable=False, default="", index=True
    )
    account_code: Mapped[str] = mapped_column(
        String(50), nullable=False, index=True
    )
    entry_type: Mapped[EntryType] = mapped_column(
        SAEnum(EntryType, name="entry_type_enum"),
        nullable=False,
    )
    amount: Mapped[Decimal] = mapped_column(
        Numeric(19, 4), nullable=False
    )
    account_name: Mapped[str] = mapped_column(
        String(255), nullable=False, default=""
    )

    transaction: Mapped["Transaction"] = relationship(
        back_populates="entries"
    )

    def __init__(self, **kwargs):
        kwargs.setdefault("ledger_entry_number", "")
        kwargs.setdefault("transaction_number", "")
        kwargs.setdefault("account_name", "")
        super().__init__(**kwargs)

    @validates("amount")
    def _validate_amount(self, key, value):
        amount = Decimal(str(value))
        if amount < 0:
            raise ValidationError(
                f"Ledger entry amount must not be negative: {amount}"
            )
        return amount

    def __repr__(self) -> str:
        return (
            f"<LedgerEntry {self.ledger_entry_number or '-'} "
            f"{self.entry_type.value} {self.account_code} {self.amount}>"
        )

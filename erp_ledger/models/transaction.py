"""
Transaction model.

A transaction is the accounting record of one business document:
a dated header plus the ledger entries it owns. It is created
unposted by the document translation layer and only the posting
engine changes it afterwards (numbers, is_posted).

Transactions are never deleted. A posted transaction can only be
taken back with an unpost while its fiscal period is open.
"""

import uuid
from datetime import date, datetime
from decimal import Decimal

from sqlalchemy import (
    String, Date, DateTime, Boolean, ForeignKey, Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.ext.orderinglist import ordering_list

from erp_ledger.models.base import Base
from erp_ledger.models.enums import EntryType


class Transaction(Base):
    __tablename__ = "transactions"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid, primary_key=True, default=uuid.uuid4
    )
    transaction_number: Mapped[str] = mapped_column(
        String(50), nullable=False, default="", index=True
    )
    transaction_date: Mapped[date] = mapped_column(
        Date, nullable=False, index=True
    )
    description: Mapped[str] = mapped_column(
        String(255), nullable=False, default=""
    )
    document_number: Mapped[str | None] = mapped_column(
        String(50), nullable=True, index=True
    )
    is_posted: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False
    )
    batch_id: Mapped[uuid.UUID | None] = mapped_column(
        ForeignKey("transaction_batches.id"), nullable=True, index=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.utcnow
    )
    posted_at: Mapped[datetime | None] = mapped_column(
        DateTime, nullable=True
    )

    # The transaction exclusively owns its entries. ordering_list
    # keeps LedgerEntry.position in step with list order.
    entries: Mapped[list["LedgerEntry"]] = relationship(
        back_populates="transaction",
        cascade="all, delete-orphan",
        order_by="LedgerEntry.position",
        collection_class=ordering_list("position"),
    )
    batch: Mapped["TransactionBatch | None"] = relationship(
        back_populates="transactions"
    )

    def __init__(self, **kwargs):
        # Column defaults only apply at flush time; an unposted
        # transaction must already look unposted in memory.
        kwargs.setdefault("id", uuid.uuid4())
        kwargs.setdefault("transaction_number", "")
        kwargs.setdefault("description", "")
        kwargs.setdefault("is_posted", False)
        super().__init__(**kwargs)

    @property
    def total_debits(self) -> Decimal:
        return sum(
            (e.amount for e in self.entries if e.entry_type == EntryType.DEBIT),
            Decimal("0"),
        )

    @property
    def total_credits(self) -> Decimal:
        return sum(
            (e.amount for e in self.entries if e.entry_type == EntryType.CREDIT),
            Decimal("0"),
        )

    def __repr__(self) -> str:
        state = "posted" if self.is_posted else "unposted"
        return (
            f"<Transaction {self.transaction_number or self.id} "
            f"{self.transaction_date} ({state})>"
        )

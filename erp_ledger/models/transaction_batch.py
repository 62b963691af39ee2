"""
Transaction batch model.

A batch groups transactions that are posted and unposted
together, e.g. the month-end payroll run.
"""

import uuid
from datetime import date, datetime

from sqlalchemy import String, Date, DateTime, Boolean, Enum as SAEnum, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from erp_ledger.models.base import Base
from erp_ledger.models.enums import BatchStatus


class TransactionBatch(Base):
    __tablename__ = "transaction_batches"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid, primary_key=True, default=uuid.uuid4
    )
    batch_number: Mapped[str] = mapped_column(
        String(50), nullable=False, default=""
    )
    reference_code: Mapped[str] = mapped_column(
        String(50), nullable=False, default=""
    )
    batch_date: Mapped[date] = mapped_column(Date, nullable=False)
    description: Mapped[str] = mapped_column(
        String(255), nullable=False, default=""
    )
    status: Mapped[BatchStatus] = mapped_column(
        SAEnum(BatchStatus, name="batch_status_enum"),
        nullable=False,
        default=BatchStatus.DRAFT,
    )
    is_posted: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.utcnow
    )

    transactions: Mapped[list["Transaction"]] = relationship(
        back_populates="batch"
    )

    def __init__(self, **kwargs):
        kwargs.setdefault("id", uuid.uuid4())
        kwargs.setdefault("batch_number", "")
        kwargs.setdefault("reference_code", "")
        kwargs.setdefault("description", "")
        kwargs.setdefault("status", BatchStatus.DRAFT)
        kwargs.setdefault("is_posted", False)
        super().__init__(**kwargs)

    def __repr__(self) -> str:
        return (
            f"<TransactionBatch {self.batch_number or self.reference_code} "
            f"({self.status.value})>"
        )

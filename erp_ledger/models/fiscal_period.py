"""
Fiscal period model.

A fiscal period is an inclusive date range with an Open/Closed
status. Postings and unpostings are only allowed for dates that
fall inside an open period. Periods never overlap; that is
checked when a period is created, not on every lookup.
"""

from datetime import date, datetime

from sqlalchemy import String, Date, DateTime, Enum as SAEnum
from sqlalchemy.orm import Mapped, mapped_column

from erp_ledger.models.base import Base
from erp_ledger.models.enums import FiscalPeriodStatus


class FiscalPeriod(Base):
    __tablename__ = "fiscal_periods"

    id: Mapped[int] = mapped_column(primary_key=True)
    code: Mapped[str] = mapped_column(
        String(50), unique=True, nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[str] = mapped_column(
        String(255), nullable=False, default=""
    )
    start_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    end_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    status: Mapped[FiscalPeriodStatus] = mapped_column(
        SAEnum(FiscalPeriodStatus, name="fiscal_period_status_enum"),
        nullable=False,
        default=FiscalPeriodStatus.OPEN,
    )
    inserted_by: Mapped[str] = mapped_column(String(100), nullable=False)
    inserted_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.utcnow
    )
    updated_by: Mapped[str] = mapped_column(String(100), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.utcnow
    )

    @property
    def is_open(self) -> bool:
        return self.status == FiscalPeriodStatus.OPEN

    @property
    def duration_days(self) -> int:
        return (self.end_date - self.start_date).days + 1

    def contains_date(self, value: date) -> bool:
        return self.start_date <= value <= self.end_date

    def overlaps(self, start: date, end: date) -> bool:
        return start <= self.end_date and end >= self.start_date

    def __repr__(self) -> str:
        return (
            f"<FiscalPeriod {self.code} {self.start_date}..{self.end_date} "
            f"({self.status.value})>"
        )

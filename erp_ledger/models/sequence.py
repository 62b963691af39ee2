"""
Sequence model.

A named counter that hands out human-facing document numbers
(transaction numbers, ledger entry numbers, batch numbers).
current_number only ever goes up.
"""

from datetime import datetime

from sqlalchemy import String, Integer, Boolean, DateTime
from sqlalchemy.orm import Mapped, mapped_column

from erp_ledger.models.base import Base


class Sequence(Base):
    __tablename__ = "sequences"

    id: Mapped[int] = mapped_column(primary_key=True)
    code: Mapped[str] = mapped_column(
        String(50), unique=True, nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    prefix: Mapped[str] = mapped_column(String(20), nullable=False, default="")
    suffix: Mapped[str] = mapped_column(String(20), nullable=False, default="")
    current_number: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0
    )
    padding_length: Mapped[int] = mapped_column(
        Integer, nullable=False, default=4
    )
    padding_char: Mapped[str] = mapped_column(
        String(1), nullable=False, default="0"
    )
    is_active: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True
    )
    last_used_at: Mapped[datetime | None] = mapped_column(
        DateTime, nullable=True
    )

    def format_number(self, number: int) -> str:
        """Render a counter value as prefix + padded number + suffix."""
        body = str(number).rjust(self.padding_length, self.padding_char)
        return f"{self.prefix}{body}{self.suffix}"

    def __repr__(self) -> str:
        return f"<Sequence {self.code} at {self.current_number}>"

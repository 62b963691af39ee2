"""
Ledger account model (chart of accounts).

Entries reference accounts by their official code, not by a
foreign key: the chart of accounts is maintained by a separate
import service and the ledger must keep working while it is
being reloaded.
"""

from datetime import datetime

from sqlalchemy import String, Boolean, DateTime, Enum as SAEnum
from sqlalchemy.orm import Mapped, mapped_column

from erp_ledger.models.base import Base
from erp_ledger.models.enums import AccountType


class Account(Base):
    """
    A single account in the chart of accounts.

    Once used by entries, an account is never deleted —
    only archived via is_archived=True.
    """

    __tablename__ = "accounts"

    id: Mapped[int] = mapped_column(primary_key=True)
    code: Mapped[str] = mapped_column(
        String(50), unique=True, nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String(150), nullable=False)
    account_type: Mapped[AccountType] = mapped_column(
        SAEnum(AccountType, name="account_type_enum"),
        nullable=False,
    )
    parent_code: Mapped[str | None] = mapped_column(
        String(50), nullable=True, default=None
    )
    is_archived: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.utcnow
    )

    @property
    def is_debit_normal(self) -> bool:
        return self.account_type.is_debit_normal

    def __repr__(self) -> str:
        return f"<Account {self.code} ({self.account_type.value})>"

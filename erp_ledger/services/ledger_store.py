"""
Ledger store — the persistence boundary of the ledger.

Transactions and their entries go in through add_transaction()
and come back out through the finder methods. The posting
engine, balance calculator and journal queries never build SQL
for ledger data themselves; they ask the store.

The store takes the caller's session. The caller controls the
transaction boundary and decides when to commit or rollback.
"""

import uuid
from datetime import date

from sqlalchemy import select, func
from sqlalchemy.orm import Session, selectinload

from erp_ledger.models.transaction import Transaction
from erp_ledger.models.ledger_entry import LedgerEntry
from erp_ledger.models.enums import EntryType


# Sort keys accepted by find_entries(). Numbers are compared by
# length first so that "LE10000" sorts after "LE9999".
SORTABLE_FIELDS = {
    "ledger_entry_number": (
        func.length(LedgerEntry.ledger_entry_number),
        LedgerEntry.ledger_entry_number,
    ),
    "transaction_number": (
        func.length(LedgerEntry.transaction_number),
        LedgerEntry.transaction_number,
    ),
    "account_code": (LedgerEntry.account_code,),
    "amount": (LedgerEntry.amount,),
}

DEFAULT_SORT = "ledger_entry_number"


class LedgerStore:
    """Storage and lookup of transactions and their ledger entries."""

    def __init__(self, db: Session):
        self.db = db

    # --- Writes ---

    def add_transaction(self, transaction: Transaction) -> None:
        """Append a transaction and every entry it owns."""
        self.db.add(transaction)
        for entry in transaction.entries:
            self.add_entry(entry)

    def add_entry(self, entry: LedgerEntry) -> None:
        self.db.add(entry)

    def flush(self) -> None:
        self.db.flush()

    # --- Transactions ---

    def get_transaction(self, transaction_id: uuid.UUID) -> Transaction | None:
        return self.db.execute(
            select(Transaction)
            .where(Transaction.id == transaction_id)
            .options(selectinload(Transaction.entries))
        ).scalar_one_or_none()

    def get_transaction_by_number(
        self, transaction_number: str
    ) -> Transaction | None:
        if not transaction_number:
            return None
        return self.db.execute(
            select(Transaction)
            .where(Transaction.transaction_number == transaction_number)
            .options(selectinload(Transaction.entries))
        ).scalars().first()

    def find_transactions(
        self,
        document_number: str | None = None,
        posted_only: bool = False,
    ) -> list[Transaction]:
        stmt = select(Transaction).order_by(
            Transaction.transaction_date, Transaction.created_at
        )
        if document_number:
            stmt = stmt.where(Transaction.document_number == document_number)
        if posted_only:
            stmt = stmt.where(Transaction.is_posted.is_(True))
        return list(self.db.execute(stmt).scalars().all())

    # --- Entries ---

    def find_entries(
        self,
        account_code: str | None = None,
        start_date: date | None = None,
        end_date: date | None = None,
        posted_only: bool = False,
        transaction_number: str | None = None,
        entry_type: EntryType | None = None,
        document_number: str | None = None,
        sort_by: str | None = None,
        descending: bool = False,
        offset: int | None = None,
        limit: int | None = None,
    ) -> list[LedgerEntry]:
        """
        Return the ledger entries matching every given filter.

        Date filters apply to the owning transaction's date and
        are inclusive on both ends.
        """
        stmt = select(LedgerEntry).join(
            Transaction, LedgerEntry.transaction_id == Transaction.id
        )

        if account_code:
            stmt = stmt.where(LedgerEntry.account_code == account_code)
        if start_date is not None:
            stmt = stmt.where(Transaction.transaction_date >= start_date)
        if end_date is not None:
            stmt = stmt.where(Transaction.transaction_date <= end_date)
        if posted_only:
            stmt = stmt.where(Transaction.is_posted.is_(True))
        if transaction_number:
            stmt = stmt.where(
                LedgerEntry.transaction_number == transaction_number
            )
        if entry_type is not None:
            stmt = stmt.where(LedgerEntry.entry_type == entry_type)
        if document_number:
            stmt = stmt.where(Transaction.document_number == document_number)

        columns = SORTABLE_FIELDS.get(sort_by or DEFAULT_SORT)
        if columns is None:
            columns = SORTABLE_FIELDS[DEFAULT_SORT]
        if descending:
            order = [c.desc() for c in columns] + [LedgerEntry.id.desc()]
        else:
            order = [c.asc() for c in columns] + [LedgerEntry.id.asc()]
        stmt = stmt.order_by(*order)

        if offset:
            stmt = stmt.offset(offset)
        if limit is not None:
            stmt = stmt.limit(limit)

        return list(self.db.execute(stmt).scalars().all())

    def get_entry_by_number(self, ledger_entry_number: str) -> LedgerEntry | None:
        if not ledger_entry_number:
            return None
        return self.db.execute(
            select(LedgerEntry).where(
                LedgerEntry.ledger_entry_number == ledger_entry_number
            )
        ).scalars().first()

    def posted_account_codes(self) -> list[str]:
        """Distinct account codes that appear in posted transactions."""
        codes = self.db.execute(
            select(LedgerEntry.account_code)
            .join(Transaction, LedgerEntry.transaction_id == Transaction.id)
            .where(Transaction.is_posted.is_(True))
            .distinct()
            .order_by(LedgerEntry.account_code)
        ).scalars().all()
        return list(codes)

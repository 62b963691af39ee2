"""
Journal service — read-only queries over posted and unposted
ledger entries.
"""

from decimal import Decimal

from sqlalchemy.orm import Session

from erp_ledger.models.ledger_entry import LedgerEntry
from erp_ledger.schemas.journal import JournalQueryOptions
from erp_ledger.services.balance_calculator import split_amounts
from erp_ledger.services.ledger_store import LedgerStore


class JournalService:
    """Read-only queries over ledger entries."""

    def __init__(self, db: Session, store: LedgerStore | None = None):
        self.db = db
        self.store = store or LedgerStore(db)

    def query_entries(self, options: JournalQueryOptions) -> list[LedgerEntry]:
        return self.store.find_entries(
            account_code=options.account_code,
            start_date=options.from_date,
            end_date=options.to_date,
            posted_only=options.only_posted,
            transaction_number=options.transaction_number,
            entry_type=options.entry_type,
            document_number=options.document_number,
            sort_by=options.sort_by,
            descending=options.sort_descending,
            offset=options.skip,
            limit=options.limit,
        )

    def entries_by_transaction(self, transaction_number: str) -> list[LedgerEntry]:
        if not transaction_number:
            return []
        return self.store.find_entries(transaction_number=transaction_number)

    def entry_by_number(self, ledger_entry_number: str) -> LedgerEntry | None:
        return self.store.get_entry_by_number(ledger_entry_number)

    def is_transaction_posted(self, transaction_number: str) -> bool:
        transaction = self.store.get_transaction_by_number(transaction_number)
        return transaction is not None and transaction.is_posted

    def transaction_totals(self, transaction_number: str) -> tuple[Decimal, Decimal]:
        """(total debits, total credits) of one transaction."""
        return split_amounts(self.entries_by_transaction(transaction_number))

    def affected_accounts(self, transaction_number: str) -> list[str]:
        """Distinct account codes touched, in entry order."""
        codes = []
        for entry in self.entries_by_transaction(transaction_number):
            if entry.account_code not in codes:
                codes.append(entry.account_code)
        return codes

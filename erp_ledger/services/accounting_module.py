"""
Accounting module — the public face of the ledger.

Wires the sequencer, fiscal period registry, posting engine,
balance calculator and journal/report services together over
one database session, and translates business documents into
unposted transactions.

Like every other service it never commits; the caller does.
"""

import logging
import uuid
from datetime import date
from decimal import Decimal

from sqlalchemy.orm import Session

from erp_ledger.config import Settings, get_settings
from erp_ledger.exceptions import TransactionNotFoundError, ValidationError
from erp_ledger.models.enums import EntryType
from erp_ledger.models.ledger_entry import LedgerEntry
from erp_ledger.models.transaction import Transaction
from erp_ledger.models.transaction_batch import TransactionBatch
from erp_ledger.schemas.journal import (
    AccountActivityReport,
    AuditTrail,
    JournalQueryOptions,
    JournalReport,
)
from erp_ledger.schemas.ledger import TrialBalance
from erp_ledger.schemas.transaction import Document
from erp_ledger.services.account_service import AccountService
from erp_ledger.services.activity_service import ActivityService
from erp_ledger.services.balance_calculator import BalanceCalculator
from erp_ledger.services.fiscal_period_service import FiscalPeriodService
from erp_ledger.services.journal_service import JournalService
from erp_ledger.services.ledger_store import LedgerStore
from erp_ledger.services.posting_engine import PostingEngine
from erp_ledger.services.report_service import ReportService
from erp_ledger.services.sequencer_service import SequencerService

logger = logging.getLogger(__name__)


class AccountingModule:
    """
    Entry point for callers outside the ledger: documents in,
    posted transactions, balances and reports out.
    """

    def __init__(
        self,
        db: Session,
        settings: Settings | None = None,
        sequencer: SequencerService | None = None,
        periods: FiscalPeriodService | None = None,
    ):
        self.db = db
        self.settings = settings or get_settings()
        self.store = LedgerStore(db)
        self.sequencer = sequencer or SequencerService(db)
        self.periods = periods or FiscalPeriodService(db)
        self.accounts = AccountService(db)
        self.activity = ActivityService(db)
        self.engine = PostingEngine(
            db,
            sequencer=self.sequencer,
            periods=self.periods,
            store=self.store,
            activity=self.activity,
            settings=self.settings,
            accounts=self.accounts,
        )
        self.balances = BalanceCalculator(db, store=self.store, accounts=self.accounts)
        self.journal = JournalService(db, store=self.store)
        self.reports = ReportService(
            db, journal=self.journal, balances=self.balances, accounts=self.accounts
        )

    # --- Setup ---

    def register_sequences(self) -> None:
        """Create the transaction, ledger entry and batch sequences if missing."""
        s = self.settings
        wanted = [
            (s.TRANSACTION_SEQUENCE_CODE, "Transaction Numbers",
             s.TRANSACTION_SEQUENCE_PREFIX, s.TRANSACTION_SEQUENCE_SUFFIX),
            (s.LEDGER_ENTRY_SEQUENCE_CODE, "Ledger Entry Numbers",
             s.LEDGER_ENTRY_SEQUENCE_PREFIX, s.LEDGER_ENTRY_SEQUENCE_SUFFIX),
            (s.BATCH_SEQUENCE_CODE, "Transaction Batch Numbers",
             s.BATCH_SEQUENCE_PREFIX, s.BATCH_SEQUENCE_SUFFIX),
        ]
        for code, name, prefix, suffix in wanted:
            if self.sequencer.get_sequence(code) is not None:
                continue
            self.sequencer.create_sequence(
                code,
                prefix=prefix,
                suffix=suffix,
                name=name,
                padding_length=s.SEQUENCE_PADDING_LENGTH,
            )

    # --- Documents and transactions ---

    def create_transaction_from_document(
        self, document: Document, description: str | None = None
    ) -> Transaction:
        """
        Build an unposted transaction from a document's totals.

        Each total marked include_in_transaction with a positive
        amount yields a debit entry if it names a debit account and
        a credit entry if it names a credit account. Nothing is
        written to the database.
        """
        transaction = Transaction(
            transaction_date=document.document_date,
            description=description
            or f"Document {document.document_type} #{document.document_number}",
            document_number=document.document_number,
        )

        for total in document.totals:
            if not total.include_in_transaction or total.total <= Decimal("0"):
                continue
            if total.debit_account_code:
                transaction.entries.append(LedgerEntry(
                    account_code=total.debit_account_code,
                    entry_type=EntryType.DEBIT,
                    amount=total.total,
                    account_name=total.concept,
                ))
            if total.credit_account_code:
                transaction.entries.append(LedgerEntry(
                    account_code=total.credit_account_code,
                    entry_type=EntryType.CREDIT,
                    amount=total.total,
                    account_name=total.concept,
                ))

        logger.debug(
            "Built transaction for document %s with %d entries",
            document.document_number, len(transaction.entries),
        )
        return transaction

    def save_draft(self, transaction: Transaction) -> Transaction:
        """Keep an unposted transaction so it can be posted later by id."""
        if transaction.is_posted:
            raise ValidationError("Only unposted transactions are saved as drafts")
        self.db.add(transaction)
        self.db.flush()
        return transaction

    def get_transaction(self, transaction_id: uuid.UUID) -> Transaction:
        transaction = self.store.get_transaction(transaction_id)
        if transaction is None:
            raise TransactionNotFoundError(
                f"Transaction {transaction_id} not found"
            )
        return transaction

    def create_batch(
        self,
        reference_code: str,
        batch_date: date,
        transactions: list[Transaction],
        description: str = "",
    ) -> TransactionBatch:
        batch = TransactionBatch(
            reference_code=reference_code,
            batch_date=batch_date,
            description=description,
        )
        batch.transactions.extend(transactions)
        return batch

    def post_transaction(self, transaction: Transaction) -> bool:
        return self.engine.post(transaction)

    def unpost_transaction(self, transaction: Transaction) -> bool:
        return self.engine.unpost(transaction)

    def validate_transaction(self, transaction: Transaction) -> bool:
        return self.engine.validate(transaction)

    def post_batch(self, batch: TransactionBatch) -> bool:
        return self.engine.post_batch(batch)

    def unpost_batch(self, batch: TransactionBatch) -> bool:
        return self.engine.unpost_batch(batch)

    # --- Balances ---

    def get_account_balance(self, account_code: str, as_of: date) -> Decimal:
        """
        Balance of a chart account as of a date.

        Raises ValidationError for an empty code and
        AccountNotFoundError for a code not in the chart.
        """
        if not account_code:
            raise ValidationError("Account code cannot be empty")
        self.accounts.get_account(account_code)
        return self.balances.balance_as_of(account_code, as_of)

    # --- Fiscal periods ---

    def open_fiscal_period(self, code: str, actor: str) -> bool:
        return self.periods.open_period(code, actor)

    def close_fiscal_period(self, code: str, actor: str) -> bool:
        return self.periods.close_period(code, actor)

    def is_date_in_open_period(self, value: date) -> bool:
        return self.periods.is_date_in_open_period(value)

    # --- Journal and reports ---

    def get_journal_entries(self, options: JournalQueryOptions) -> list[LedgerEntry]:
        return self.journal.query_entries(options)

    def generate_journal_report(self, options: JournalQueryOptions) -> JournalReport:
        return self.reports.generate_report(options)

    def generate_audit_trail(self, transaction_number: str) -> AuditTrail:
        return self.reports.audit_trail(transaction_number)

    def generate_account_activity(
        self, account_code: str, from_date: date, to_date: date
    ) -> AccountActivityReport:
        return self.reports.account_activity(account_code, from_date, to_date)

    def generate_trial_balance(self, as_of: date) -> TrialBalance:
        return self.reports.trial_balance_report(as_of)

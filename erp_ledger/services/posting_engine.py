"""
Posting engine — moves transactions between unposted and posted.

Posting a transaction:
1. Returns straight away if it is already posted
2. Finds the fiscal period covering the transaction date and
   refuses if there is none or it is closed
3. Checks that debits equal credits, exactly, and that every
   entry names an account in the chart
4. Draws a transaction number and ledger entry numbers
5. Re-checks the period status, then stamps the numbers
6. Appends the transaction and its entries to the ledger store
7. Marks it posted and records the activity

Steps 2 and 3 never touch the transaction or the store, and no
number is drawn before they pass. Steps 2 to 7 run while holding
the period's lock, the same lock a period close takes.

Unposting keeps every number already assigned; posting the
transaction again reuses them.
"""

import logging
from contextlib import ExitStack, contextmanager
from dataclasses import dataclass, field
from datetime import date, datetime

from sqlalchemy.orm import Session

from erp_ledger.config import Settings, get_settings
from erp_ledger.exceptions import (
    AccountNotFoundError,
    ClosedPeriodError,
    MissingAccountCodeError,
    PeriodNotFoundError,
    UnbalancedTransactionError,
    ValidationError,
)
from erp_ledger.models.enums import BatchStatus, EntryType, FiscalPeriodStatus
from erp_ledger.models.fiscal_period import FiscalPeriod
from erp_ledger.models.transaction import Transaction
from erp_ledger.models.transaction_batch import TransactionBatch
from erp_ledger.services.account_service import AccountService
from erp_ledger.services.activity_service import ActivityService
from erp_ledger.services.fiscal_period_service import FiscalPeriodService
from erp_ledger.services.ledger_store import LedgerStore
from erp_ledger.services.sequencer_service import SequencerService

logger = logging.getLogger(__name__)


@dataclass
class NumberPlan:
    """Numbers drawn for one transaction, not yet stamped on it."""
    transaction: Transaction
    transaction_number: str
    entry_numbers: list[str] = field(default_factory=list)


def check_balance(transaction: Transaction) -> None:
    """
    The double-entry rule.

    A transaction needs at least one entry, every entry needs an
    account code, and total debits must equal total credits with
    no rounding tolerance. Raises a ValidationError otherwise.
    """
    if not transaction.entries:
        raise ValidationError("Transaction has no ledger entries")

    for entry in transaction.entries:
        if not entry.account_code:
            raise MissingAccountCodeError(
                f"Ledger entry '{entry.account_name}' has no account code"
            )
        if entry.entry_type not in (EntryType.DEBIT, EntryType.CREDIT):
            raise ValidationError(
                f"Ledger entry for {entry.account_code} has no entry type"
            )

    total_debits = transaction.total_debits
    total_credits = transaction.total_credits
    if total_debits != total_credits:
        raise UnbalancedTransactionError(total_debits, total_credits)


class PostingEngine:
    """
    Posts and unposts transactions and batches.

    The engine never commits. The caller commits after a successful
    post, or rolls back after an error.
    """

    def __init__(
        self,
        db: Session,
        sequencer: SequencerService | None = None,
        periods: FiscalPeriodService | None = None,
        store: LedgerStore | None = None,
        activity: ActivityService | None = None,
        settings: Settings | None = None,
        accounts: AccountService | None = None,
    ):
        self.db = db
        self.accounts = accounts or AccountService(db)
        self.sequencer = sequencer or SequencerService(db)
        self.periods = periods or FiscalPeriodService(db)
        self.store = store or LedgerStore(db)
        self.activity = activity or ActivityService(db)
        self.settings = settings or get_settings()

    # --- Public operations ---

    def validate(self, transaction: Transaction) -> bool:
        """Check the balance rule without side effects."""
        try:
            check_balance(transaction)
        except ValidationError:
            return False
        return True

    def post(self, transaction: Transaction) -> bool:
        """
        Post a transaction.

        Returns True, including when it was already posted.
        Raises PeriodNotFoundError, ClosedPeriodError,
        AccountNotFoundError or a ValidationError, in which case
        nothing has changed.
        """
        if transaction.is_posted:
            return True

        with self._open_periods([transaction.transaction_date], "post"):
            check_balance(transaction)
            self._check_accounts(transaction)
            plan = self._draw_numbers(transaction)
            self._recheck_periods([transaction.transaction_date], "post")

            self._apply_numbers(plan)
            self.store.add_transaction(transaction)
            transaction.is_posted = True
            transaction.posted_at = datetime.utcnow()
            self.store.flush()

        logger.info(
            "Posted transaction %s dated %s (%d entries, %s)",
            transaction.transaction_number,
            transaction.transaction_date,
            len(transaction.entries),
            transaction.total_debits,
        )
        self._record(transaction, "Posted")
        return True

    def unpost(self, transaction: Transaction) -> bool:
        """
        Take a posted transaction back to unposted.

        Numbers stay assigned. Returns True, including when it was
        not posted. Raises PeriodNotFoundError or ClosedPeriodError.
        """
        if not transaction.is_posted:
            return True

        with self._open_periods([transaction.transaction_date], "unpost"):
            self._recheck_periods([transaction.transaction_date], "unpost")
            self.store.add_transaction(transaction)
            transaction.is_posted = False
            transaction.posted_at = None
            self.store.flush()

        logger.info("Unposted transaction %s", transaction.transaction_number)
        self._record(transaction, "Unposted")
        return True

    def post_batch(self, batch: TransactionBatch) -> bool:
        """
        Post a batch and every transaction in it, all or nothing.

        Every transaction is gated and balance-checked before any
        number is drawn.
        """
        if batch.is_posted:
            return True

        pending = [t for t in batch.transactions if not t.is_posted]
        dates = [batch.batch_date] + [t.transaction_date for t in pending]

        with self._open_periods(dates, "post"):
            for transaction in pending:
                check_balance(transaction)
                self._check_accounts(transaction)

            batch_number = batch.batch_number or self.sequencer.get_next_number(
                self.settings.BATCH_SEQUENCE_CODE
            )
            plans = [self._draw_numbers(t) for t in pending]
            self._recheck_periods(dates, "post")

            now = datetime.utcnow()
            for plan in plans:
                self._apply_numbers(plan)
                self.store.add_transaction(plan.transaction)
                plan.transaction.is_posted = True
                plan.transaction.posted_at = now

            batch.batch_number = batch_number
            batch.is_posted = True
            batch.status = BatchStatus.PROCESSED
            self.db.add(batch)
            self.store.flush()

        logger.info(
            "Posted batch %s with %d transactions", batch.batch_number, len(pending)
        )
        for transaction in pending:
            self._record(transaction, "Posted")
        self._record_batch(batch, "Posted")
        return True

    def unpost_batch(self, batch: TransactionBatch) -> bool:
        """Unpost a batch and every transaction in it, all or nothing."""
        if not batch.is_posted:
            return True

        posted = [t for t in batch.transactions if t.is_posted]
        dates = [batch.batch_date] + [t.transaction_date for t in posted]

        with self._open_periods(dates, "unpost"):
            self._recheck_periods(dates, "unpost")
            for transaction in posted:
                self.store.add_transaction(transaction)
                transaction.is_posted = False
                transaction.posted_at = None

            batch.is_posted = False
            batch.status = BatchStatus.APPROVED
            self.db.add(batch)
            self.store.flush()

        logger.info("Unposted batch %s", batch.batch_number)
        for transaction in posted:
            self._record(transaction, "Unposted")
        self._record_batch(batch, "Unposted")
        return True

    # --- Period gate ---

    def _require_open_period(self, value: date, action: str) -> FiscalPeriod:
        period = self.periods.get_period_for_date(value)
        if period is None:
            logger.warning("Refused to %s: no fiscal period covers %s", action, value)
            raise PeriodNotFoundError(f"No fiscal period found for date {value}")
        if not period.is_open:
            logger.warning(
                "Refused to %s into closed fiscal period %s", action, period.code
            )
            raise ClosedPeriodError(period.name, action)
        return period

    @contextmanager
    def _open_periods(self, dates: list[date], action: str):
        """
        Gate on every period covering the given dates and hold
        their locks for the duration of the block.

        Locks are taken in code order so two batches spanning the
        same periods cannot deadlock.
        """
        periods = {}
        for value in dates:
            period = self._require_open_period(value, action)
            periods[period.code.upper()] = period

        with ExitStack() as stack:
            for code in sorted(periods):
                stack.enter_context(self.periods.locked(code))
            yield list(periods.values())

    def _recheck_periods(self, dates: list[date], action: str) -> None:
        """Re-read period status right before the store write."""
        seen = set()
        for value in dates:
            period = self._require_open_period(value, action)
            if period.id in seen:
                continue
            seen.add(period.id)
            if self.periods.refresh_status(period) != FiscalPeriodStatus.OPEN:
                logger.warning(
                    "Fiscal period %s closed while a %s was in progress",
                    period.code, action,
                )
                raise ClosedPeriodError(period.name, action)

    def _check_accounts(self, transaction: Transaction) -> None:
        for code in sorted({entry.account_code for entry in transaction.entries}):
            if self.accounts.find_account(code) is None:
                logger.warning(
                    "Refused to post: account %s is not in the chart", code
                )
                raise AccountNotFoundError(f"Account {code} not found")

    # --- Numbering ---

    def _draw_numbers(self, transaction: Transaction) -> NumberPlan:
        transaction_number = (
            transaction.transaction_number
            or self.sequencer.get_next_number(
                self.settings.TRANSACTION_SEQUENCE_CODE
            )
        )
        entry_numbers = [
            entry.ledger_entry_number
            or self.sequencer.get_next_number(
                self.settings.LEDGER_ENTRY_SEQUENCE_CODE
            )
            for entry in transaction.entries
        ]
        return NumberPlan(transaction, transaction_number, entry_numbers)

    def _apply_numbers(self, plan: NumberPlan) -> None:
        plan.transaction.transaction_number = plan.transaction_number
        for entry, number in zip(plan.transaction.entries, plan.entry_numbers):
            entry.ledger_entry_number = number
            entry.transaction_number = plan.transaction_number

    # --- Activity ---

    def _record(self, transaction: Transaction, verb: str) -> None:
        self.activity.record_activity(
            actor=self.settings.SYSTEM_ACTOR,
            verb=verb,
            target_type="Transaction",
            target_id=str(transaction.id),
            target_display=(
                f"Transaction {transaction.transaction_number} "
                f"on {transaction.transaction_date}"
            ),
        )

    def _record_batch(self, batch: TransactionBatch, verb: str) -> None:
        self.activity.record_activity(
            actor=self.settings.SYSTEM_ACTOR,
            verb=verb,
            target_type="TransactionBatch",
            target_id=str(batch.id),
            target_display=(
                f"Transaction batch {batch.batch_number} '{batch.reference_code}'"
            ),
        )

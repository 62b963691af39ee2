"""
Report service — journal reports, audit trails and account
activity built on the journal queries.

Reports are plain pydantic objects; rendering them is left to
whoever asked for them.
"""

import logging
import time
from contextlib import contextmanager
from datetime import date, timedelta

from sqlalchemy.orm import Session

from erp_ledger.schemas.journal import (
    AccountActivityReport,
    AuditTrail,
    JournalQueryOptions,
    JournalReport,
)
from erp_ledger.schemas.ledger import TrialBalance
from erp_ledger.schemas.transaction import LedgerEntryResponse
from erp_ledger.services.account_service import AccountService
from erp_ledger.services.balance_calculator import BalanceCalculator, split_amounts
from erp_ledger.services.journal_service import JournalService

logger = logging.getLogger(__name__)


@contextmanager
def _timed(report_name: str):
    started = time.perf_counter()
    yield
    elapsed_ms = (time.perf_counter() - started) * 1000
    logger.debug("Generated %s in %.1f ms", report_name, elapsed_ms)


def build_report_title(options: JournalQueryOptions) -> str:
    """E.g. 'Journal Entry Report - 2020-01-01 to 2020-01-31 - Account: 1100'."""
    title = "Journal Entry Report"

    if options.from_date or options.to_date:
        title += " - "
        if options.from_date and options.to_date:
            title += f"{options.from_date.isoformat()} to {options.to_date.isoformat()}"
        elif options.from_date:
            title += f"From {options.from_date.isoformat()}"
        else:
            title += f"Up to {options.to_date.isoformat()}"

    if options.account_code:
        title += f" - Account: {options.account_code}"
    if options.transaction_number:
        title += f" - Transaction: {options.transaction_number}"
    return title


class ReportService:
    """
    Builds journal reports, audit trails, account activity and
    the trial balance report.
    """

    def __init__(
        self,
        db: Session,
        journal: JournalService | None = None,
        balances: BalanceCalculator | None = None,
        accounts: AccountService | None = None,
    ):
        self.db = db
        self.journal = journal or JournalService(db)
        self.balances = balances or BalanceCalculator(db)
        self.accounts = accounts or AccountService(db)

    def generate_report(self, options: JournalQueryOptions) -> JournalReport:
        with _timed("journal report"):
            entries = self.journal.query_entries(options)
            total_debits, total_credits = split_amounts(entries)

            return JournalReport(
                title=build_report_title(options),
                from_date=options.from_date,
                to_date=options.to_date,
                account_code_filter=options.account_code,
                transaction_number_filter=options.transaction_number,
                entries=[LedgerEntryResponse.model_validate(e) for e in entries],
                total_debits=total_debits,
                total_credits=total_credits,
                total_entries=len(entries),
                is_balanced=total_debits == total_credits,
            )

    def audit_trail(self, transaction_number: str) -> AuditTrail:
        """
        Everything recorded for one transaction.

        An unknown number gives an empty trail with found=False
        rather than an error.
        """
        with _timed("audit trail"):
            transaction = self.journal.store.get_transaction_by_number(
                transaction_number
            )
            if transaction is None:
                return AuditTrail(transaction_number=transaction_number)

            entries = self.journal.entries_by_transaction(transaction_number)
            total_debits, total_credits = split_amounts(entries)

            return AuditTrail(
                transaction_number=transaction_number,
                found=True,
                document_number=transaction.document_number,
                transaction_date=transaction.transaction_date,
                description=transaction.description,
                is_posted=transaction.is_posted,
                entries=[LedgerEntryResponse.model_validate(e) for e in entries],
                total_debits=total_debits,
                total_credits=total_credits,
                is_balanced=total_debits == total_credits,
                affected_accounts=self.journal.affected_accounts(
                    transaction_number
                ),
            )

    def account_activity(
        self, account_code: str, from_date: date, to_date: date
    ) -> AccountActivityReport:
        """
        Posted movement on one account over [from_date, to_date].

        closing_balance = opening_balance + total_debits - total_credits
        """
        with _timed("account activity report"):
            account = self.accounts.find_account(account_code)
            account_name = account.name if account else "Unknown Account"

            entries = self.journal.query_entries(JournalQueryOptions(
                account_code=account_code,
                from_date=from_date,
                to_date=to_date,
                only_posted=True,
            ))
            total_debits, total_credits = split_amounts(entries)
            opening = self.balances.balance_as_of(
                account_code, from_date - timedelta(days=1)
            )

            return AccountActivityReport(
                account_code=account_code,
                account_name=account_name,
                from_date=from_date,
                to_date=to_date,
                opening_balance=opening,
                closing_balance=opening + total_debits - total_credits,
                entries=[LedgerEntryResponse.model_validate(e) for e in entries],
                total_debits=total_debits,
                total_credits=total_credits,
                total_transactions=len({e.transaction_number for e in entries}),
            )

    def trial_balance_report(self, as_of: date) -> TrialBalance:
        with _timed("trial balance"):
            return self.balances.trial_balance(as_of)

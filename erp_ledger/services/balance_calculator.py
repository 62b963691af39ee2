"""
Balance calculator — point-in-time balances and trial balances.

Only entries of posted transactions count. Sums are taken over
Decimal amounts in Python rather than with SQL SUM(), which on
some backends (SQLite) comes back as a float.
"""

import logging
from datetime import date, timedelta
from decimal import Decimal

from sqlalchemy.orm import Session

from erp_ledger.models.enums import AccountType, EntryType
from erp_ledger.models.ledger_entry import LedgerEntry
from erp_ledger.schemas.ledger import TrialBalance, TrialBalanceRow
from erp_ledger.services.account_service import AccountService
from erp_ledger.services.ledger_store import LedgerStore

logger = logging.getLogger(__name__)

ZERO = Decimal("0")


def split_amounts(entries: list[LedgerEntry]) -> tuple[Decimal, Decimal]:
    debits = ZERO
    credits = ZERO
    for entry in entries:
        if entry.entry_type == EntryType.DEBIT:
            debits += entry.amount
        else:
            credits += entry.amount
    return debits, credits


class BalanceCalculator:
    """
    Derives balances from posted ledger entries.

    Nothing here is stored; every figure is recomputed from the
    entries on each call.
    """

    def __init__(
        self,
        db: Session,
        store: LedgerStore | None = None,
        accounts: AccountService | None = None,
    ):
        self.db = db
        self.store = store or LedgerStore(db)
        self.accounts = accounts or AccountService(db)

    def balance_as_of(self, account_code: str, as_of: date) -> Decimal:
        """
        Debits minus credits for the account, up to and including
        as_of. Positive means a net debit balance.
        """
        entries = self.store.find_entries(
            account_code=account_code, end_date=as_of, posted_only=True
        )
        debits, credits = split_amounts(entries)
        return debits - credits

    def turnover(
        self, account_code: str, start_date: date, end_date: date
    ) -> tuple[Decimal, Decimal]:
        """Gross (debit, credit) movement over [start_date, end_date]."""
        entries = self.store.find_entries(
            account_code=account_code,
            start_date=start_date,
            end_date=end_date,
            posted_only=True,
        )
        return split_amounts(entries)

    def opening_balance(self, account_code: str, on: date) -> Decimal:
        """Balance at the close of the day before `on`."""
        return self.balance_as_of(account_code, on - timedelta(days=1))

    def has_transactions(self, account_code: str) -> bool:
        entries = self.store.find_entries(
            account_code=account_code, posted_only=True, limit=1
        )
        return len(entries) > 0

    def accounts_with_transactions(self) -> list[str]:
        return self.store.posted_account_codes()

    def all_balances(self, as_of: date) -> dict[str, Decimal]:
        """Balance of every account that has posted activity."""
        return {
            code: self.balance_as_of(code, as_of)
            for code in self.accounts_with_transactions()
        }

    def trial_balance(self, as_of: date) -> TrialBalance:
        """
        Trial balance over every non-archived account.

        A debit-normal account shows its balance in the debit
        column and a credit-normal account in the credit column.
        An account carrying a balance against its natural side
        shows the magnitude in the other column, so the totals
        still close when the ledger balances.
        """
        rows = []
        total_debits = ZERO
        total_credits = ZERO

        for account in self.accounts.list_accounts():
            net = self.balance_as_of(account.code, as_of)
            debit_balance = max(net, ZERO)
            credit_balance = max(-net, ZERO)
            net_balance = net if account.is_debit_normal else -net

            rows.append(TrialBalanceRow(
                account_code=account.code,
                account_name=account.name,
                account_type=account.account_type,
                debit_balance=debit_balance,
                credit_balance=credit_balance,
                net_balance=net_balance,
            ))
            total_debits += debit_balance
            total_credits += credit_balance

        is_balanced = total_debits == total_credits
        if not is_balanced:
            logger.warning(
                "Trial balance as of %s does not balance: %s != %s",
                as_of, total_debits, total_credits,
            )

        return TrialBalance(
            as_of_date=as_of,
            rows=rows,
            total_debits=total_debits,
            total_credits=total_credits,
            is_balanced=is_balanced,
        )

    def verify_accounting_equation(self, as_of: date) -> bool:
        """Assets = Liabilities + Equity + (Revenue - Expenses)."""
        totals = {account_type: ZERO for account_type in AccountType}
        for account in self.accounts.list_accounts(include_archived=True):
            net = self.balance_as_of(account.code, as_of)
            if account.is_debit_normal:
                totals[account.account_type] += net
            else:
                totals[account.account_type] -= net

        assets = totals[AccountType.ASSET]
        right_side = (
            totals[AccountType.LIABILITY]
            + totals[AccountType.EQUITY]
            + totals[AccountType.REVENUE]
            - totals[AccountType.EXPENSE]
        )
        return assets == right_side

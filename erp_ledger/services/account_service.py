"""
Account service — the chart of accounts as seen by the ledger.

The chart itself is loaded by an import service elsewhere in the
ERP; the ledger only needs to create, look up and archive
accounts, and to know each account's natural side.
"""

import logging

from sqlalchemy import select
from sqlalchemy.orm import Session

from erp_ledger.exceptions import AccountNotFoundError, ValidationError
from erp_ledger.models.ledger_account import Account
from erp_ledger.schemas.ledger import AccountCreate

logger = logging.getLogger(__name__)


class AccountService:
    """Looks up, creates and archives chart accounts."""

    def __init__(self, db: Session):
        self.db = db

    def create_account(self, request: AccountCreate) -> Account:
        """
        Create a new account.

        Raises ValidationError if the account code already exists.
        """
        if self.find_account(request.code) is not None:
            raise ValidationError(
                f"Account with code '{request.code}' already exists"
            )

        account = Account(
            code=request.code,
            name=request.name,
            account_type=request.account_type,
            parent_code=request.parent_code,
            is_archived=False,
        )
        self.db.add(account)
        self.db.flush()
        logger.info(
            "Created account %s (%s)", account.code, account.account_type.value
        )
        return account

    def find_account(self, code: str) -> Account | None:
        return self.db.execute(
            select(Account).where(Account.code == code)
        ).scalar_one_or_none()

    def get_account(self, code: str) -> Account:
        """Get an account by code or raise AccountNotFoundError."""
        account = self.find_account(code)
        if account is None:
            raise AccountNotFoundError(f"Account {code} not found")
        return account

    def list_accounts(self, include_archived: bool = False) -> list[Account]:
        stmt = select(Account).order_by(Account.code)
        if not include_archived:
            stmt = stmt.where(Account.is_archived.is_(False))
        return list(self.db.execute(stmt).scalars().all())

    def archive_account(self, code: str) -> Account:
        """Archive an account. Its history stays in the ledger."""
        account = self.get_account(code)
        account.is_archived = True
        self.db.flush()
        return account

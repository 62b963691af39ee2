"""
Shared test fixtures.

Sets up an isolated test database so tests never touch
the real database. Tables are created before and dropped after
every test, so no test data persists.
"""

from datetime import date
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from erp_ledger.main import app
from erp_ledger.models import Base
from erp_ledger.models.base import get_db
from erp_ledger.models.enums import AccountType, EntryType
from erp_ledger.models.ledger_entry import LedgerEntry
from erp_ledger.models.transaction import Transaction
from erp_ledger.schemas.ledger import AccountCreate
from erp_ledger.services.accounting_module import AccountingModule


# Use SQLite for tests — no external database needed.
TEST_DATABASE_URL = "sqlite:///./test.db"

engine = create_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
)

TestSessionLocal = sessionmaker(
    bind=engine,
    autocommit=False,
    autoflush=False,
    expire_on_commit=False,
)

CHART = [
    ("1100", "Cash", AccountType.ASSET),
    ("1200", "Accounts Receivable", AccountType.ASSET),
    ("2100", "Accounts Payable", AccountType.LIABILITY),
    ("2200", "VAT Payable", AccountType.LIABILITY),
    ("3100", "Owner's Capital", AccountType.EQUITY),
    ("4100", "Sales", AccountType.REVENUE),
    ("5100", "Office Supplies", AccountType.EXPENSE),
]


@pytest.fixture(autouse=True)
def setup_database():
    """
    Create all tables before each test, drop them after.

    autouse=True means every test gets this automatically.
    """
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db_session():
    """Provide a database session for direct service testing."""
    session = TestSessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture
def module(db_session):
    """An accounting module with its numbering sequences registered."""
    accounting = AccountingModule(db_session)
    accounting.register_sequences()
    db_session.commit()
    return accounting


@pytest.fixture
def chart(module, db_session):
    """A small chart of accounts covering all five account types."""
    accounts = [
        module.accounts.create_account(
            AccountCreate(code=code, name=name, account_type=account_type)
        )
        for code, name, account_type in CHART
    ]
    db_session.commit()
    return {account.code: account for account in accounts}


@pytest.fixture
def jan_2020(module, db_session):
    """Open fiscal period Jan-2020 covering 2020-01-01..2020-01-31."""
    period = module.periods.create_period(
        code="JAN-2020",
        name="Jan-2020",
        start_date=date(2020, 1, 1),
        end_date=date(2020, 1, 31),
        actor="controller",
    )
    db_session.commit()
    return period


@pytest.fixture
def client(db_session):
    """
    Provide a test client with the test database.

    We override the get_db dependency so the FastAPI app
    uses our test session instead of the real database.
    """
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


def build_transaction(on, lines, description="Test transaction", document_number=None):
    """
    Build an unposted transaction.

    lines is a list of (account_code, entry_type, amount) tuples.
    """
    transaction = Transaction(
        transaction_date=on,
        description=description,
        document_number=document_number,
    )
    for account_code, entry_type, amount in lines:
        transaction.entries.append(LedgerEntry(
            account_code=account_code,
            entry_type=entry_type,
            amount=Decimal(amount),
            account_name=account_code,
        ))
    return transaction


def build_supplies_purchase(on=date(2020, 1, 15), amount="100.00"):
    """Debit Office Supplies, credit Cash."""
    return build_transaction(on, [
        ("5100", EntryType.DEBIT, amount),
        ("1100", EntryType.CREDIT, amount),
    ], description="Office supplies")


@pytest.fixture
def make_transaction():
    return build_transaction


@pytest.fixture
def supplies_purchase():
    return build_supplies_purchase

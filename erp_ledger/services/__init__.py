"""Business logic services."""

from erp_ledger.services.account_service import AccountService
from erp_ledger.services.accounting_module import AccountingModule
from erp_ledger.services.activity_service import ActivityService
from erp_ledger.services.balance_calculator import BalanceCalculator
from erp_ledger.services.fiscal_period_service import FiscalPeriodService
from erp_ledger.services.journal_service import JournalService
from erp_ledger.services.ledger_store import LedgerStore
from erp_ledger.services.posting_engine import PostingEngine
from erp_ledger.services.report_service import ReportService
from erp_ledger.services.sequencer_service import SequencerService

__all__ = [
    "AccountService",
    "AccountingModule",
    "ActivityService",
    "BalanceCalculator",
    "FiscalPeriodService",
    "JournalService",
    "LedgerStore",
    "PostingEngine",
    "ReportService",
    "SequencerService",
]

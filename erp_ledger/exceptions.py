"""
Ledger domain errors.

Every error raised by the ledger core derives from LedgerError.
LedgerError is a ValueError so callers that only care about
"the request was rejected" can keep catching ValueError.

The three branches tell the caller what went wrong:
- ValidationError: the input is wrong (unbalanced, missing account)
- StateError: the input is fine but the system state forbids it
- NotFoundError: something the request refers to does not exist
"""


class LedgerError(ValueError):
    """Base exception for all ledger failures."""


# --- Validation ---

class ValidationError(LedgerError):
    """Raised when a request is malformed or violates a ledger rule."""


class UnbalancedTransactionError(ValidationError):
    """Raised when total debits do not equal total credits."""

    def __init__(self, total_debits, total_credits):
        self.total_debits = total_debits
        self.total_credits = total_credits
        super().__init__(
            f"Transaction does not balance: "
            f"debits={total_debits}, credits={total_credits}"
        )


class MissingAccountCodeError(ValidationError):
    """Raised when a ledger entry has no account code."""


class DuplicateSequenceError(ValidationError):
    """Raised when a sequence code is registered twice."""


class InvalidPeriodError(ValidationError):
    """Raised when a fiscal period definition is invalid or overlaps another."""


# --- State ---

class StateError(LedgerError):
    """Raised when the current state forbids the requested operation."""


class ClosedPeriodError(StateError):
    """Raised when posting or unposting into a closed fiscal period."""

    def __init__(self, period_name: str, action: str = "post"):
        self.period_name = period_name
        super().__init__(
            f"Cannot {action} transaction: "
            f"fiscal period '{period_name}' is closed"
        )


class InactiveSequenceError(StateError):
    """Raised when drawing a number from a deactivated sequence."""


# --- Not found ---

class NotFoundError(LedgerError):
    """Raised when a referenced object does not exist."""


class PeriodNotFoundError(NotFoundError):
    """Raised when no fiscal period matches a code or covers a date."""


class SequenceNotFoundError(NotFoundError):
    """Raised when a sequence code is not registered."""


class AccountNotFoundError(NotFoundError):
    """Raised when an account code is not in the chart of accounts."""


class TransactionNotFoundError(NotFoundError):
    """Raised when a transaction id or number is unknown."""

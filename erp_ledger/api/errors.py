"""
Translate ledger exceptions into HTTP errors.

Routers catch LedgerError and re-raise through to_http_error()
so every endpoint answers the same way for the same failure.
"""

from fastapi import HTTPException

from erp_ledger.exceptions import LedgerError, NotFoundError, StateError


def status_code_for(error: LedgerError) -> int:
    if isinstance(error, NotFoundError):
        return 404
    if isinstance(error, StateError):
        return 409
    return 400


def to_http_error(error: LedgerError) -> HTTPException:
    return HTTPException(status_code=status_code_for(error), detail=str(error))

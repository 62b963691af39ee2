"""
Transaction API endpoints.

Documents come in, unposted transactions are stored as drafts,
and posting / unposting happens by transaction id.
"""

import uuid

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from erp_ledger.api.errors import to_http_error
from erp_ledger.exceptions import LedgerError
from erp_ledger.models.base import get_db
from erp_ledger.schemas.transaction import (
    CreateFromDocumentRequest,
    OperationResult,
    TransactionResponse,
)
from erp_ledger.services.accounting_module import AccountingModule

router = APIRouter(prefix="/transactions", tags=["Transactions"])


@router.post(
    "/from-document",
    response_model=TransactionResponse,
    status_code=201,
)
def create_from_document(
    request: CreateFromDocumentRequest,
    db: Session = Depends(get_db),
):
    """
    Translate a document into an unposted transaction.

    The transaction is stored as a draft; it gets its numbers
    when it is posted.
    """
    module = AccountingModule(db)
    try:
        transaction = module.create_transaction_from_document(
            request.document, request.description
        )
        module.save_draft(transaction)
        db.commit()
        return transaction
    except LedgerError as e:
        db.rollback()
        raise to_http_error(e)


@router.get("/{transaction_id}", response_model=TransactionResponse)
def get_transaction(
    transaction_id: uuid.UUID,
    db: Session = Depends(get_db),
):
    try:
        return AccountingModule(db).get_transaction(transaction_id)
    except LedgerError as e:
        raise to_http_error(e)


@router.post("/{transaction_id}/post", response_model=OperationResult)
def post_transaction(
    transaction_id: uuid.UUID,
    db: Session = Depends(get_db),
):
    """
    Post a transaction.

    409 if its fiscal period is closed, 404 if no period covers
    its date or an entry names an account outside the chart,
    400 if it does not balance. Posting a posted
    transaction succeeds without changing it.
    """
    module = AccountingModule(db)
    try:
        transaction = module.get_transaction(transaction_id)
        module.post_transaction(transaction)
        db.commit()
    except LedgerError as e:
        db.rollback()
        raise to_http_error(e)

    return OperationResult(
        transaction_id=transaction.id,
        transaction_number=transaction.transaction_number,
        success=True,
    )


@router.post("/{transaction_id}/unpost", response_model=OperationResult)
def unpost_transaction(
    transaction_id: uuid.UUID,
    db: Session = Depends(get_db),
):
    """Unpost a transaction. Its numbers are kept for the next post."""
    module = AccountingModule(db)
    try:
        transaction = module.get_transaction(transaction_id)
        module.unpost_transaction(transaction)
        db.commit()
    except LedgerError as e:
        db.rollback()
        raise to_http_error(e)

    return OperationResult(
        transaction_id=transaction.id,
        transaction_number=transaction.transaction_number,
        success=True,
    )


@router.post("/{transaction_id}/validate", response_model=OperationResult)
def validate_transaction(
    transaction_id: uuid.UUID,
    db: Session = Depends(get_db),
):
    """Check that debits equal credits. Changes nothing."""
    module = AccountingModule(db)
    try:
        transaction = module.get_transaction(transaction_id)
    except LedgerError as e:
        raise to_http_error(e)

    return OperationResult(
        transaction_id=transaction.id,
        transaction_number=transaction.transaction_number,
        success=module.validate_transaction(transaction),
    )

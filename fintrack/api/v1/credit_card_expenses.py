"""/v1/credit-cards/{card_id}/expenses and invoices - Installments and invoice state"""

import uuid

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from fintrack.api.dependencies import get_credit_card_expense_service, get_current_user_id
from fintrack.api.v1.schemas import (
    CreditCardExpenseCreate,
    CreditCardExpenseListResponse,
    CreditCardExpenseResponse,
    CreditCardExpenseUpdate,
    InvoiceResponse,
)
from fintrack.domain.exceptions import DomainException
from fintrack.domain.invoices import INVOICE_MONTH_PATTERN
from fintrack.domain.models import CardPurchase, ExpenseScope
from fintrack.infrastructure.database.session import get_db
from fintrack.services.credit_card_expenses import CreditCardExpenseService

router = APIRouter()

SCOPE_DESCRIPTION = "'single' targets one installment, 'group' every installment of the purchase"


def _expense_list(expenses) -> CreditCardExpenseListResponse:
    return CreditCardExpenseListResponse(
        expenses=[CreditCardExpenseResponse.model_validate(expense) for expense in expenses]
    )


@router.post(
    "/credit-cards/{card_id}/expenses",
    response_model=CreditCardExpenseListResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_credit_card_expense(
    card_id: uuid.UUID,
    body: CreditCardExpenseCreate,
    user_id: str = Depends(get_current_user_id),
    service: CreditCardExpenseService = Depends(get_credit_card_expense_service),
    db: Session = Depends(get_db),
):
    """
    Register a card purchase, creating one row per installment.

    Each installment is charged on consecutive invoices starting at the
    invoice the purchase date falls in (given the card's closing day).
    """
    purchase = CardPurchase(
        description=body.description,
        total_amount=body.amount,
        purchase_date=body.purchase_date,
        installment_count=body.installments,
    )
    try:
        expenses = service.create(user_id, card_id, purchase)
        db.commit()
    except DomainException:
        db.rollback()
        raise
    return _expense_list(expenses)


@router.get("/credit-cards/{card_id}/expenses", response_model=CreditCardExpenseListResponse)
def list_credit_card_expenses(
    card_id: uuid.UUID,
    user_id: str = Depends(get_current_user_id),
    service: CreditCardExpenseService = Depends(get_credit_card_expense_service),
):
    return _expense_list(service.list_by_card(user_id, card_id))


@router.put("/credit-cards/{card_id}/expenses/{expense_id}", response_model=CreditCardExpenseListResponse)
def update_credit_card_expense(
    card_id: uuid.UUID,
    expense_id: uuid.UUID,
    body: CreditCardExpenseUpdate,
    scope: ExpenseScope = Query(ExpenseScope.SINGLE, description=SCOPE_DESCRIPTION),
    user_id: str = Depends(get_current_user_id),
    service: CreditCardExpenseService = Depends(get_credit_card_expense_service),
    db: Session = Depends(get_db),
):
    """
    Update one installment or the whole purchase.

    Returns 409 when any affected installment sits on a closed invoice; in
    that case nothing is changed.
    """
    try:
        expenses = service.update(user_id, card_id, expense_id, body.description, body.amount, scope)
        db.commit()
    except DomainException:
        db.rollback()
        raise
    return _expense_list(expenses)


@router.delete("/credit-cards/{card_id}/expenses/{expense_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_credit_card_expense(
    card_id: uuid.UUID,
    expense_id: uuid.UUID,
    scope: ExpenseScope = Query(ExpenseScope.SINGLE, description=SCOPE_DESCRIPTION),
    user_id: str = Depends(get_current_user_id),
    service: CreditCardExpenseService = Depends(get_credit_card_expense_service),
    db: Session = Depends(get_db),
):
    """Delete one installment or the whole purchase, only while every affected invoice is open"""
    try:
        service.remove(user_id, card_id, expense_id, scope)
        db.commit()
    except DomainException:
        db.rollback()
        raise
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/credit-cards/{card_id}/invoices", response_model=InvoiceResponse)
def get_credit_card_invoice(
    card_id: uuid.UUID,
    month: str = Query(..., pattern=INVOICE_MONTH_PATTERN.pattern, description="Invoice month (YYYY-MM)"),
    user_id: str = Depends(get_current_user_id),
    service: CreditCardExpenseService = Depends(get_credit_card_expense_service),
):
    """
    Retrieve the installments charged on one invoice month.

    The invoice is closed once the current time passes the card's closing
    day in that month; closed invoices no longer accept changes.
    """
    return InvoiceResponse.model_validate(service.get_invoice(user_id, card_id, month))

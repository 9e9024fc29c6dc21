"""GET /v1/transactions - Materialized expense transactions"""

import uuid
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query

from fintrack.api.dependencies import get_current_user_id, get_recurring_expense_service
from fintrack.api.v1.schemas import TransactionListResponse, TransactionResponse
from fintrack.services.recurring_expenses import RecurringExpenseService

router = APIRouter()


@router.get("/transactions", response_model=TransactionListResponse)
def list_transactions(
    start_date: Optional[date] = Query(None),
    end_date: Optional[date] = Query(None),
    recurring_expense_id: Optional[uuid.UUID] = Query(None),
    user_id: str = Depends(get_current_user_id),
    service: RecurringExpenseService = Depends(get_recurring_expense_service),
):
    """List the caller's transactions ordered by date"""
    transactions = service.list_transactions(user_id, start_date, end_date, recurring_expense_id)
    return TransactionListResponse(
        transactions=[TransactionResponse.model_validate(txn) for txn in transactions]
    )

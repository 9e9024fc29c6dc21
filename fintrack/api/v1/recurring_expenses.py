"""/v1/recurring-expenses - Recurring plans and occurrence projection"""

import uuid
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from fintrack.api.dependencies import get_current_user_id, get_recurring_expense_service
from fintrack.api.v1.schemas import (
    OccurrencesResponse,
    OccurrenceWindowQuery,
    RecurringExpenseCreate,
    RecurringExpensePageResponse,
    RecurringExpenseResponse,
    RecurringExpenseUpdate,
)
from fintrack.config import settings
from fintrack.domain.exceptions import DomainException
from fintrack.domain.models import DateWindow, RecurringExpensePlan
from fintrack.domain.validation import unwrap, validate
from fintrack.infrastructure.database.session import get_db
from fintrack.services.recurring_expenses import RecurringExpenseService

router = APIRouter()


@router.post(
    "/recurring-expenses",
    response_model=RecurringExpenseResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_recurring_expense(
    body: RecurringExpenseCreate,
    user_id: str = Depends(get_current_user_id),
    service: RecurringExpenseService = Depends(get_recurring_expense_service),
    db: Session = Depends(get_db),
):
    """
    Create a recurring plan.

    Bounded plans (total_installments > 0) immediately get one EXPENSE
    transaction per remaining occurrence.
    """
    plan = RecurringExpensePlan(
        start_date=body.start_date,
        end_date=body.end_date,
        frequency=body.frequency,
        custom_interval_days=body.custom_interval_days,
        total_installments=body.total_installments,
        current_installment=body.current_installment,
    )
    try:
        recurring = service.create(user_id, body.description, body.amount, plan, body.type, body.category_id)
        db.commit()
    except DomainException:
        db.rollback()
        raise
    return RecurringExpenseResponse.model_validate(recurring)


@router.get("/recurring-expenses", response_model=RecurringExpensePageResponse)
def list_recurring_expenses(
    page: int = Query(1, ge=1),
    page_size: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
    start_date: Optional[date] = Query(None),
    end_date: Optional[date] = Query(None),
    user_id: str = Depends(get_current_user_id),
    service: RecurringExpenseService = Depends(get_recurring_expense_service),
):
    result = service.list_paginated(user_id, page, page_size, start_date, end_date)
    return RecurringExpensePageResponse(
        items=[RecurringExpenseResponse.model_validate(item) for item in result.items],
        page=result.page,
        page_size=result.page_size,
        total=result.total,
        total_pages=result.total_pages,
    )


@router.get("/recurring-expenses/{recurring_id}", response_model=RecurringExpenseResponse)
def get_recurring_expense(
    recurring_id: uuid.UUID,
    user_id: str = Depends(get_current_user_id),
    service: RecurringExpenseService = Depends(get_recurring_expense_service),
):
    return RecurringExpenseResponse.model_validate(service.get(user_id, recurring_id))


@router.put("/recurring-expenses/{recurring_id}", response_model=RecurringExpenseResponse)
def update_recurring_expense(
    recurring_id: uuid.UUID,
    body: RecurringExpenseUpdate,
    user_id: str = Depends(get_current_user_id),
    service: RecurringExpenseService = Depends(get_recurring_expense_service),
    db: Session = Depends(get_db),
):
    """Partial update; already materialized transactions are left untouched"""
    try:
        recurring = service.update(user_id, recurring_id, body.model_dump(exclude_unset=True))
        db.commit()
    except DomainException:
        db.rollback()
        raise
    return RecurringExpenseResponse.model_validate(recurring)


@router.delete("/recurring-expenses/{recurring_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_recurring_expense(
    recurring_id: uuid.UUID,
    user_id: str = Depends(get_current_user_id),
    service: RecurringExpenseService = Depends(get_recurring_expense_service),
    db: Session = Depends(get_db),
):
    try:
        service.delete(user_id, recurring_id)
        db.commit()
    except DomainException:
        db.rollback()
        raise
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/recurring-expenses/{recurring_id}/occurrences", response_model=OccurrencesResponse)
def get_recurring_occurrences(
    recurring_id: uuid.UUID,
    start: date = Query(..., description="First day of the window (inclusive)"),
    end: date = Query(..., description="Last day of the window (inclusive)"),
    user_id: str = Depends(get_current_user_id),
    service: RecurringExpenseService = Depends(get_recurring_expense_service),
):
    """
    Project the plan's occurrences inside a display window.

    Occurrences already materialized (index below current_installment) are
    skipped.
    """
    window = unwrap(validate(OccurrenceWindowQuery, {"start": start, "end": end}), "Invalid occurrence window")
    occurrences = service.occurrences(user_id, recurring_id, DateWindow(start=window.start, end=window.end))
    return OccurrencesResponse(recurring_expense_id=recurring_id, occurrences=occurrences)

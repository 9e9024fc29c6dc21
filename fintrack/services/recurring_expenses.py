"""Recurring expense plans and the transactions materialized from them"""

import math
import uuid
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from fintrack.domain.exceptions import NotFoundError
from fintrack.domain.installments import round_amount
from fintrack.domain.models import DateWindow, RecurringExpensePlan, RecurringExpenseType, RecurringFrequency
from fintrack.domain.recurrence import project_occurrences
from fintrack.domain.validation import unwrap, validate_recurring_plan
from fintrack.infrastructure.clock import Clock
from fintrack.infrastructure.database.models import RecurringExpense, Transaction
from fintrack.infrastructure.database.repositories import RecurringExpenseRepository, TransactionRepository
from fintrack.infrastructure.observability.logging import log_recurring_materialized
from fintrack.infrastructure.observability.metrics import recurring_materialized_counter

RECURRING_NOT_FOUND = "Recurring expense not found"
RECURRING_PAYMENT_METHOD = "Recorrente"
EXPENSE_TRANSACTION = "EXPENSE"

# Fields that may be explicitly cleared with null on update
NULLABLE_FIELDS = {"end_date", "custom_interval_days", "category_id"}


@dataclass
class RecurringExpensePage:
    items: List[RecurringExpense]
    page: int
    page_size: int
    total: int
    total_pages: int


def plan_from_row(row: RecurringExpense) -> RecurringExpensePlan:
    """Build the projection input from a persisted plan"""
    return RecurringExpensePlan(
        start_date=row.start_date,
        end_date=row.end_date,
        frequency=RecurringFrequency(row.frequency),
        custom_interval_days=row.custom_interval_days,
        total_installments=row.total_installments or 0,
        current_installment=row.current_installment or 0,
    )


class RecurringExpenseService:
    def __init__(self, db: Session, clock: Clock):
        self.repository = RecurringExpenseRepository(db)
        self.transactions = TransactionRepository(db)
        self.clock = clock

    def list_paginated(
        self,
        user_id: str,
        page: int = 1,
        page_size: int = 20,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> RecurringExpensePage:
        items, total = self.repository.find_paginated(page, page_size, user_id, start_date, end_date)
        return RecurringExpensePage(
            items=items,
            page=page,
            page_size=page_size,
            total=total,
            total_pages=max(1, math.ceil(total / page_size)),
        )

    def get(self, user_id: str, recurring_id: uuid.UUID) -> RecurringExpense:
        recurring = self.repository.find_by_id(recurring_id, user_id)
        if recurring is None:
            raise NotFoundError(RECURRING_NOT_FOUND)
        return recurring

    def create(
        self,
        user_id: str,
        description: str,
        amount: Decimal,
        plan: RecurringExpensePlan,
        expense_type: RecurringExpenseType,
        category_id: Optional[str] = None,
    ) -> RecurringExpense:
        """
        Persist a plan and materialize its transactions.

        Raises:
            ValidationError: When the plan breaks a cross-field rule
        """
        plan = unwrap(validate_recurring_plan(plan), "Invalid recurring expense")

        recurring = self.repository.create(
            user_id=user_id,
            description=description,
            amount=round_amount(amount),
            start_date=plan.start_date,
            end_date=plan.end_date,
            frequency=plan.frequency.value,
            custom_interval_days=plan.custom_interval_days,
            total_installments=plan.total_installments,
            current_installment=plan.current_installment,
            type=expense_type.value,
            category_id=category_id,
        )

        self._materialize_transactions(user_id, recurring, plan)
        return recurring

    def update(self, user_id: str, recurring_id: uuid.UUID, changes: Dict[str, Any]) -> RecurringExpense:
        """
        Apply a partial update and re-validate the resulting plan.

        Keys absent from `changes` are untouched; None clears nullable fields
        and is ignored for the others.
        """
        recurring = self.get(user_id, recurring_id)

        for field, value in changes.items():
            if value is None and field not in NULLABLE_FIELDS:
                continue
            if field == "amount":
                value = round_amount(value)
            elif isinstance(value, (RecurringFrequency, RecurringExpenseType)):
                value = value.value
            setattr(recurring, field, value)

        unwrap(validate_recurring_plan(plan_from_row(recurring)), "Invalid recurring expense")
        return self.repository.update(recurring)

    def delete(self, user_id: str, recurring_id: uuid.UUID) -> None:
        recurring = self.get(user_id, recurring_id)
        self.repository.delete(recurring)

    def occurrences(self, user_id: str, recurring_id: uuid.UUID, window: DateWindow) -> List[date]:
        """Project the occurrences of a stored plan falling inside a window"""
        recurring = self.get(user_id, recurring_id)
        return project_occurrences(plan_from_row(recurring), window)

    def list_transactions(
        self,
        user_id: str,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        recurring_expense_id: Optional[uuid.UUID] = None,
    ) -> List[Transaction]:
        return self.transactions.find_by_user(user_id, start_date, end_date, recurring_expense_id)

    def _materialize_transactions(self, user_id: str, recurring: RecurringExpense, plan: RecurringExpensePlan) -> None:
        """Create one EXPENSE transaction per occurrence of a bounded plan"""
        if plan.total_installments <= 0:
            return

        occurrences = project_occurrences(plan)
        if not occurrences:
            return

        self.transactions.create_many(
            Transaction(
                user_id=user_id,
                recurring_expense_id=recurring.id,
                description=recurring.description,
                amount=recurring.amount,
                type=EXPENSE_TRANSACTION,
                date=occurrence,
                payment_method=RECURRING_PAYMENT_METHOD,
                is_recurring=True,
                category_id=recurring.category_id,
            )
            for occurrence in occurrences
        )
        recurring.last_generated_at = self.clock.now()

        recurring_materialized_counter.inc(len(occurrences))
        log_recurring_materialized(user_id, str(recurring.id), len(occurrences))

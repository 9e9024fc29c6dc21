"""Card purchases, installments and invoices"""

import uuid
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import List, Optional

from sqlalchemy.orm import Session

from fintrack.domain.exceptions import ConflictError, NotFoundError
from fintrack.domain.installments import allocate_installments, round_amount
from fintrack.domain.invoices import closing_date, ensure_invoices_open, is_closed_on
from fintrack.domain.models import CardPurchase, ExpenseScope
from fintrack.infrastructure.clock import Clock
from fintrack.infrastructure.database.models import CreditCard, CreditCardExpense
from fintrack.infrastructure.database.repositories import CreditCardExpenseRepository
from fintrack.infrastructure.observability.logging import log_expense_created, log_invoice_gate_rejection
from fintrack.infrastructure.observability.metrics import installments_created_counter, record_invoice_gate_rejection
from fintrack.services.credit_cards import CreditCardService

EXPENSE_NOT_FOUND = "Expense not found"
GROUP_NOT_FOUND = "Installment group not found"


@dataclass
class InvoiceSummary:
    """Installments charged on one invoice month of a card"""

    invoice_month: str
    is_closed: bool
    closing_day: int
    closing_date: date
    due_day: int
    expenses: List[CreditCardExpense]
    total: Decimal


class CreditCardExpenseService:
    """
    Installment lifecycle for card purchases.

    Mutations are gated on the invoice of every affected installment: with
    scope=group the whole group is checked before anything changes, so one
    closed invoice rejects the batch. Changes are only flushed; the caller
    commits or rolls back the session.
    """

    def __init__(self, db: Session, clock: Clock):
        self.repository = CreditCardExpenseRepository(db)
        self.cards = CreditCardService(db)
        self.clock = clock

    def create(self, user_id: str, card_id: uuid.UUID, purchase: CardPurchase) -> List[CreditCardExpense]:
        card = self.cards.get(user_id, card_id)
        records = allocate_installments(purchase, card.closing_day)

        expenses = self.repository.create_many(
            CreditCardExpense(
                credit_card_id=card.id,
                user_id=user_id,
                group_id=record.group_id,
                description=record.description,
                amount=record.amount_per_installment,
                purchase_date=record.purchase_date,
                installments=record.installment_count,
                current_installment=record.installment_index,
                invoice_month=record.invoice_month,
            )
            for record in records
        )

        installments_created_counter.inc(len(expenses))
        log_expense_created(user_id, str(card.id), records[0].group_id, len(records), records[0].invoice_month)
        return expenses

    def list_by_card(self, user_id: str, card_id: uuid.UUID) -> List[CreditCardExpense]:
        self.cards.get(user_id, card_id)
        return self.repository.find_by_card(card_id, user_id)

    def update(
        self,
        user_id: str,
        card_id: uuid.UUID,
        expense_id: uuid.UUID,
        description: Optional[str] = None,
        amount: Optional[Decimal] = None,
        scope: ExpenseScope = ExpenseScope.SINGLE,
    ) -> List[CreditCardExpense]:
        card = self.cards.get(user_id, card_id)
        targets = self._resolve_targets(card, user_id, expense_id, scope)
        self._ensure_open(card, targets, user_id, expense_id, "update", scope)

        for expense in targets:
            if description is not None:
                expense.description = description
            if amount is not None:
                expense.amount = round_amount(amount)

        return self.repository.save_many(targets)

    def remove(
        self,
        user_id: str,
        card_id: uuid.UUID,
        expense_id: uuid.UUID,
        scope: ExpenseScope = ExpenseScope.SINGLE,
    ) -> None:
        card = self.cards.get(user_id, card_id)
        targets = self._resolve_targets(card, user_id, expense_id, scope)
        self._ensure_open(card, targets, user_id, expense_id, "delete", scope)
        self.repository.remove_many(targets)

    def get_invoice(self, user_id: str, card_id: uuid.UUID, month: str) -> InvoiceSummary:
        card = self.cards.get(user_id, card_id)
        closes_on = closing_date(card.closing_day, month)  # Raises ValidationError on a bad month
        expenses = self.repository.find_by_invoice_month(card_id, user_id, month)
        total = sum((Decimal(expense.amount) for expense in expenses), Decimal("0"))

        return InvoiceSummary(
            invoice_month=month,
            is_closed=is_closed_on(closes_on, self.clock.now()),
            closing_day=card.closing_day,
            closing_date=closes_on,
            due_day=card.due_day,
            expenses=expenses,
            total=round_amount(total),
        )

    def _resolve_targets(
        self,
        card: CreditCard,
        user_id: str,
        expense_id: uuid.UUID,
        scope: ExpenseScope,
    ) -> List[CreditCardExpense]:
        expense = self.repository.find_by_id(expense_id, user_id, card.id)
        if expense is None:
            raise NotFoundError(EXPENSE_NOT_FOUND)

        if scope == ExpenseScope.SINGLE:
            return [expense]

        group = self.repository.find_by_group(card.id, user_id, expense.group_id, for_update=True)
        if not group:
            raise NotFoundError(GROUP_NOT_FOUND)
        return group

    def _ensure_open(
        self,
        card: CreditCard,
        targets: List[CreditCardExpense],
        user_id: str,
        expense_id: uuid.UUID,
        operation: str,
        scope: ExpenseScope,
    ) -> None:
        try:
            ensure_invoices_open(card.closing_day, [expense.invoice_month for expense in targets], self.clock.now())
        except ConflictError:
            record_invoice_gate_rejection(operation, scope.value)
            log_invoice_gate_rejection(user_id, str(card.id), str(expense_id), operation, scope.value)
            raise

"""Data access layer for finance entities"""

import uuid
from datetime import date
from typing import Iterable, List, Optional, Tuple
from sqlalchemy import func
from sqlalchemy.orm import Session
from fintrack.infrastructure.database.models import CreditCard, CreditCardExpense, RecurringExpense, Transaction


class CreditCardRepository:
    """Repository for credit cards"""

    def __init__(self, db: Session):
        self.db = db

    def find_by_user(self, user_id: str) -> List[CreditCard]:
        return (
            self.db.query(CreditCard)
            .filter(CreditCard.user_id == user_id)
            .order_by(CreditCard.created_at, CreditCard.name)
            .all()
        )

    def find_by_id(self, card_id: uuid.UUID, user_id: str) -> Optional[CreditCard]:
        """Fetch a card only when owned by the user"""
        return (
            self.db.query(CreditCard)
            .filter(CreditCard.id == card_id, CreditCard.user_id == user_id)
            .first()
        )

    def create(self, **fields) -> CreditCard:
        card = CreditCard(**fields)
        self.db.add(card)
        self.db.flush()  # Get ID without committing
        return card

    def update(self, card: CreditCard) -> CreditCard:
        self.db.flush()
        return card

    def delete(self, card: CreditCard) -> None:
        self.db.delete(card)
        self.db.flush()


class CreditCardExpenseRepository:
    """Repository for card installments"""

    def __init__(self, db: Session):
        self.db = db

    def _owned(self, card_id: uuid.UUID, user_id: str):
        return self.db.query(CreditCardExpense).filter(
            CreditCardExpense.credit_card_id == card_id,
            CreditCardExpense.user_id == user_id,
        )

    def find_by_id(self, expense_id: uuid.UUID, user_id: str, card_id: uuid.UUID) -> Optional[CreditCardExpense]:
        return self._owned(card_id, user_id).filter(CreditCardExpense.id == expense_id).first()

    def find_by_card(self, card_id: uuid.UUID, user_id: str) -> List[CreditCardExpense]:
        return (
            self._owned(card_id, user_id)
            .order_by(CreditCardExpense.purchase_date.desc(), CreditCardExpense.current_installment)
            .all()
        )

    def find_by_invoice_month(self, card_id: uuid.UUID, user_id: str, invoice_month: str) -> List[CreditCardExpense]:
        return (
            self._owned(card_id, user_id)
            .filter(CreditCardExpense.invoice_month == invoice_month)
            .order_by(CreditCardExpense.current_installment)
            .all()
        )

    def find_by_group(
        self,
        card_id: uuid.UUID,
        user_id: str,
        group_id: str,
        for_update: bool = False,
    ) -> List[CreditCardExpense]:
        """Fetch every installment of a purchase, optionally row-locked"""
        query = (
            self._owned(card_id, user_id)
            .filter(CreditCardExpense.group_id == group_id)
            .order_by(CreditCardExpense.current_installment)
        )
        if for_update:
            query = query.with_for_update()
        return query.all()

    def create_many(self, expenses: Iterable[CreditCardExpense]) -> List[CreditCardExpense]:
        expenses = list(expenses)
        self.db.add_all(expenses)
        self.db.flush()
        return expenses

    def save_many(self, expenses: List[CreditCardExpense]) -> List[CreditCardExpense]:
        self.db.flush()
        return expenses

    def remove_many(self, expenses: Iterable[CreditCardExpense]) -> None:
        for expense in expenses:
            self.db.delete(expense)
        self.db.flush()


class RecurringExpenseRepository:
    """Repository for recurring expense plans"""

    def __init__(self, db: Session):
        self.db = db

    def find_by_id(self, recurring_id: uuid.UUID, user_id: str) -> Optional[RecurringExpense]:
        return (
            self.db.query(RecurringExpense)
            .filter(RecurringExpense.id == recurring_id, RecurringExpense.user_id == user_id)
            .first()
        )

    def find_paginated(
        self,
        page: int,
        page_size: int,
        user_id: str,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> Tuple[List[RecurringExpense], int]:
        """Return one page of plans plus the total count matching the filters"""
        query = self.db.query(RecurringExpense).filter(RecurringExpense.user_id == user_id)
        if start_date is not None:
            query = query.filter(RecurringExpense.start_date >= start_date)
        if end_date is not None:
            query = query.filter(RecurringExpense.start_date <= end_date)

        total = query.with_entities(func.count(RecurringExpense.id)).scalar() or 0
        items = (
            query.order_by(RecurringExpense.start_date.desc(), RecurringExpense.created_at.desc())
            .offset((page - 1) * page_size)
            .limit(page_size)
            .all()
        )
        return items, total

    def create(self, **fields) -> RecurringExpense:
        recurring = RecurringExpense(**fields)
        self.db.add(recurring)
        self.db.flush()
        return recurring

    def update(self, recurring: RecurringExpense) -> RecurringExpense:
        self.db.flush()
        return recurring

    def delete(self, recurring: RecurringExpense) -> None:
        self.db.delete(recurring)
        self.db.flush()


class TransactionRepository:
    """Repository for materialized transactions"""

    def __init__(self, db: Session):
        self.db = db

    def create_many(self, transactions: Iterable[Transaction]) -> List[Transaction]:
        transactions = list(transactions)
        self.db.add_all(transactions)
        self.db.flush()
        return transactions

    def find_by_user(
        self,
        user_id: str,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        recurring_expense_id: Optional[uuid.UUID] = None,
    ) -> List[Transaction]:
        query = self.db.query(Transaction).filter(Transaction.user_id == user_id)
        if start_date is not None:
            query = query.filter(Transaction.date >= start_date)
        if end_date is not None:
            query = query.filter(Transaction.date <= end_date)
        if recurring_expense_id is not None:
            query = query.filter(Transaction.recurring_expense_id == recurring_expense_id)
        return query.order_by(Transaction.date, Transaction.created_at).all()

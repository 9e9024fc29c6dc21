"""Dependency injection for FastAPI endpoints"""

from fastapi import Depends, Header, Request
from sqlalchemy.orm import Session

from fintrack.infrastructure.clock import Clock, SystemClock
from fintrack.infrastructure.database.session import get_db
from fintrack.services.credit_card_expenses import CreditCardExpenseService
from fintrack.services.credit_cards import CreditCardService
from fintrack.services.recurring_expenses import RecurringExpenseService


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_current_user_id(x_user_id: str = Header(..., min_length=1, description="Caller identifier")) -> str:
    """Identify the caller; authentication happens upstream"""
    return x_user_id


def get_clock() -> Clock:
    """Provide the clock used for invoice gate decisions and materialization stamps"""
    return SystemClock()


def get_credit_card_service(db: Session = Depends(get_db)) -> CreditCardService:
    return CreditCardService(db)


def get_credit_card_expense_service(
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
) -> CreditCardExpenseService:
    return CreditCardExpenseService(db, clock)


def get_recurring_expense_service(
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
) -> RecurringExpenseService:
    return RecurringExpenseService(db, clock)

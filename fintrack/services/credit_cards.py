"""Credit card management"""

import uuid
from decimal import Decimal
from typing import List, Optional

from sqlalchemy.orm import Session

from fintrack.domain.exceptions import NotFoundError
from fintrack.domain.installments import round_amount
from fintrack.infrastructure.database.models import CreditCard
from fintrack.infrastructure.database.repositories import CreditCardRepository

CARD_NOT_FOUND = "Credit card not found"


class CreditCardService:
    def __init__(self, db: Session):
        self.repository = CreditCardRepository(db)

    def list(self, user_id: str) -> List[CreditCard]:
        return self.repository.find_by_user(user_id)

    def get(self, user_id: str, card_id: uuid.UUID) -> CreditCard:
        """
        Raises:
            NotFoundError: When the card does not exist or belongs to another user
        """
        card = self.repository.find_by_id(card_id, user_id)
        if card is None:
            raise NotFoundError(CARD_NOT_FOUND)
        return card

    def create(
        self,
        user_id: str,
        name: str,
        brand: str,
        last_four_digits: str,
        credit_limit: Decimal,
        closing_day: int,
        due_day: int,
    ) -> CreditCard:
        return self.repository.create(
            user_id=user_id,
            name=name,
            brand=brand,
            last_four_digits=last_four_digits,
            credit_limit=round_amount(credit_limit),
            closing_day=closing_day,
            due_day=due_day,
        )

    def update(
        self,
        user_id: str,
        card_id: uuid.UUID,
        name: Optional[str] = None,
        brand: Optional[str] = None,
        last_four_digits: Optional[str] = None,
        credit_limit: Optional[Decimal] = None,
        closing_day: Optional[int] = None,
        due_day: Optional[int] = None,
    ) -> CreditCard:
        """Apply the provided fields, leaving the others untouched"""
        card = self.get(user_id, card_id)

        if name is not None:
            card.name = name
        if brand is not None:
            card.brand = brand
        if last_four_digits is not None:
            card.last_four_digits = last_four_digits
        if credit_limit is not None:
            card.credit_limit = round_amount(credit_limit)
        if closing_day is not None:
            card.closing_day = closing_day
        if due_day is not None:
            card.due_day = due_day

        return self.repository.update(card)

    def remove(self, user_id: str, card_id: uuid.UUID) -> None:
        card = self.get(user_id, card_id)
        self.repository.delete(card)

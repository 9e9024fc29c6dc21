"""/v1/credit-cards - Credit card management"""

import uuid
from typing import List

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from fintrack.api.dependencies import get_credit_card_service, get_current_user_id
from fintrack.api.v1.schemas import CreditCardCreate, CreditCardResponse, CreditCardUpdate
from fintrack.domain.exceptions import DomainException
from fintrack.infrastructure.database.session import get_db
from fintrack.services.credit_cards import CreditCardService

router = APIRouter()


@router.post("/credit-cards", response_model=CreditCardResponse, status_code=status.HTTP_201_CREATED)
def create_credit_card(
    body: CreditCardCreate,
    user_id: str = Depends(get_current_user_id),
    service: CreditCardService = Depends(get_credit_card_service),
    db: Session = Depends(get_db),
):
    card = service.create(user_id, **body.model_dump())
    db.commit()
    return CreditCardResponse.model_validate(card)


@router.get("/credit-cards", response_model=List[CreditCardResponse])
def list_credit_cards(
    user_id: str = Depends(get_current_user_id),
    service: CreditCardService = Depends(get_credit_card_service),
):
    return [CreditCardResponse.model_validate(card) for card in service.list(user_id)]


@router.get("/credit-cards/{card_id}", response_model=CreditCardResponse)
def get_credit_card(
    card_id: uuid.UUID,
    user_id: str = Depends(get_current_user_id),
    service: CreditCardService = Depends(get_credit_card_service),
):
    return CreditCardResponse.model_validate(service.get(user_id, card_id))


@router.put("/credit-cards/{card_id}", response_model=CreditCardResponse)
def update_credit_card(
    card_id: uuid.UUID,
    body: CreditCardUpdate,
    user_id: str = Depends(get_current_user_id),
    service: CreditCardService = Depends(get_credit_card_service),
    db: Session = Depends(get_db),
):
    try:
        card = service.update(user_id, card_id, **body.model_dump(exclude_unset=True))
        db.commit()
    except DomainException:
        db.rollback()
        raise
    return CreditCardResponse.model_validate(card)


@router.delete("/credit-cards/{card_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_credit_card(
    card_id: uuid.UUID,
    user_id: str = Depends(get_current_user_id),
    service: CreditCardService = Depends(get_credit_card_service),
    db: Session = Depends(get_db),
):
    """Remove a card together with all of its installments"""
    try:
        service.remove(user_id, card_id)
        db.commit()
    except DomainException:
        db.rollback()
        raise
    return Response(status_code=status.HTTP_204_NO_CONTENT)

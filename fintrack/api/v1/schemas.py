"""Pydantic schemas for API request/response validation"""

import uuid
from datetime import date
from decimal import Decimal
from typing import Annotated, List, Optional

from pydantic import BaseModel, ConfigDict, Field, PlainSerializer, model_validator

from fintrack.config import settings
from fintrack.domain.models import RecurringExpenseType, RecurringFrequency

# Amounts travel as fixed two-decimal strings in JSON responses
Money = Annotated[Decimal, PlainSerializer(lambda value: f"{value:.2f}", return_type=str, when_used="json")]


class OrmModel(BaseModel):
    model_config = ConfigDict(from_attributes=True)


# Credit cards


class CreditCardCreate(BaseModel):
    """Request body for POST /v1/credit-cards"""

    name: str = Field(..., min_length=1, max_length=255)
    brand: str = Field(..., min_length=1, max_length=255)
    last_four_digits: str = Field(..., min_length=4, max_length=4)
    credit_limit: Money = Field(..., ge=0, decimal_places=2)
    closing_day: int = Field(..., ge=1, le=31)
    due_day: int = Field(..., ge=1, le=31)


class CreditCardUpdate(BaseModel):
    """Request body for PUT /v1/credit-cards/{card_id}"""

    name: Optional[str] = Field(None, min_length=1, max_length=255)
    brand: Optional[str] = Field(None, min_length=1, max_length=255)
    last_four_digits: Optional[str] = Field(None, min_length=4, max_length=4)
    credit_limit: Optional[Money] = Field(None, ge=0, decimal_places=2)
    closing_day: Optional[int] = Field(None, ge=1, le=31)
    due_day: Optional[int] = Field(None, ge=1, le=31)


class CreditCardResponse(OrmModel):
    id: uuid.UUID
    name: str
    brand: str
    last_four_digits: str
    credit_limit: Money
    closing_day: int
    due_day: int


# Card expenses


class CreditCardExpenseCreate(BaseModel):
    """Request body for POST /v1/credit-cards/{card_id}/expenses"""

    description: str = Field(..., min_length=1, max_length=255)
    amount: Money = Field(..., gt=0, decimal_places=2)
    purchase_date: date
    installments: int = Field(1, ge=1, le=settings.max_installments)


class CreditCardExpenseUpdate(BaseModel):
    """Request body for PUT /v1/credit-cards/{card_id}/expenses/{expense_id}"""

    description: Optional[str] = Field(None, min_length=1, max_length=255)
    amount: Optional[Money] = Field(None, gt=0, decimal_places=2)


class CreditCardExpenseResponse(OrmModel):
    """Single installment of a card purchase"""

    id: uuid.UUID
    credit_card_id: uuid.UUID
    group_id: str
    description: str
    amount: Money
    purchase_date: date
    installments: int
    current_installment: int
    invoice_month: str


class CreditCardExpenseListResponse(BaseModel):
    expenses: List[CreditCardExpenseResponse]


class InvoiceResponse(OrmModel):
    """Response for GET /v1/credit-cards/{card_id}/invoices"""

    invoice_month: str
    is_closed: bool
    closing_day: int
    closing_date: date
    due_day: int
    expenses: List[CreditCardExpenseResponse]
    total: Money


# Recurring expenses


class RecurringExpenseCreate(BaseModel):
    """Request body for POST /v1/recurring-expenses"""

    description: str = Field(..., min_length=3, max_length=255)
    amount: Money = Field(..., decimal_places=2)
    start_date: date
    end_date: Optional[date] = None
    frequency: RecurringFrequency
    custom_interval_days: Optional[int] = Field(None, ge=1)
    total_installments: int = Field(..., ge=0)
    current_installment: int = Field(0, ge=0)
    type: RecurringExpenseType
    category_id: Optional[str] = None


class RecurringExpenseUpdate(BaseModel):
    """Request body for PUT /v1/recurring-expenses/{recurring_id}, every field optional"""

    description: Optional[str] = Field(None, min_length=3, max_length=255)
    amount: Optional[Money] = Field(None, decimal_places=2)
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    frequency: Optional[RecurringFrequency] = None
    custom_interval_days: Optional[int] = Field(None, ge=1)
    total_installments: Optional[int] = Field(None, ge=0)
    current_installment: Optional[int] = Field(None, ge=0)
    type: Optional[RecurringExpenseType] = None
    category_id: Optional[str] = None


class RecurringExpenseResponse(OrmModel):
    id: uuid.UUID
    description: str
    amount: Money
    start_date: date
    end_date: Optional[date] = None
    frequency: RecurringFrequency
    custom_interval_days: Optional[int] = None
    total_installments: int
    current_installment: int
    type: RecurringExpenseType
    category_id: Optional[str] = None


class RecurringExpensePageResponse(BaseModel):
    items: List[RecurringExpenseResponse]
    page: int
    page_size: int
    total: int
    total_pages: int


class OccurrenceWindowQuery(BaseModel):
    """Display window for GET /v1/recurring-expenses/{recurring_id}/occurrences"""

    start: date
    end: date

    @model_validator(mode="after")
    def _check_order(self):
        if self.end < self.start:
            raise ValueError("end must not be before start")
        return self


class OccurrencesResponse(BaseModel):
    recurring_expense_id: uuid.UUID
    occurrences: List[date]


# Transactions


class TransactionResponse(OrmModel):
    id: uuid.UUID
    recurring_expense_id: Optional[uuid.UUID] = None
    description: str
    amount: Money
    type: str
    date: date
    payment_method: Optional[str] = None
    is_recurring: bool
    category_id: Optional[str] = None


class TransactionListResponse(BaseModel):
    transactions: List[TransactionResponse]

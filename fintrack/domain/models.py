"""Domain models - pure Python dataclasses representing business entities"""

import enum
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional


class RecurringFrequency(str, enum.Enum):
    MONTHLY = "MONTHLY"
    YEARLY = "YEARLY"
    CUSTOM = "CUSTOM"


class RecurringExpenseType(str, enum.Enum):
    FINANCING = "FINANCING"
    LOAN = "LOAN"
    SUBSCRIPTION = "SUBSCRIPTION"
    OTHER = "OTHER"


class ExpenseScope(str, enum.Enum):
    """Target of an installment mutation"""

    SINGLE = "single"
    GROUP = "group"


@dataclass(frozen=True)
class CardBillingProfile:
    """Billing cycle attributes of a credit card"""

    closing_day: int  # 1..31
    due_day: int  # 1..31


@dataclass(frozen=True)
class CardPurchase:
    """Purchase made with a credit card, before installment fan-out"""

    description: str
    total_amount: Decimal
    purchase_date: date
    installment_count: Optional[int] = 1


@dataclass(frozen=True)
class InstallmentRecord:
    """One installment of a card purchase, charged against a single invoice"""

    group_id: str
    installment_index: int  # 1-based
    installment_count: int
    amount_per_installment: Decimal
    invoice_month: str  # YYYY-MM
    purchase_date: date
    description: str


@dataclass(frozen=True)
class RecurringExpensePlan:
    """Schedule of a recurring charge"""

    start_date: date
    frequency: RecurringFrequency
    end_date: Optional[date] = None
    custom_interval_days: Optional[int] = None
    total_installments: int = 0  # 0 = unbounded
    current_installment: int = 0  # occurrences already materialized


@dataclass(frozen=True)
class DateWindow:
    """Inclusive date range used to restrict a projection"""

    start: date
    end: date

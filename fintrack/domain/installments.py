"""Installment fan-out for credit card purchases"""

import uuid
from datetime import date
from decimal import Decimal, ROUND_HALF_UP
from typing import List, Optional

from fintrack.domain.exceptions import ValidationError
from fintrack.domain.models import CardPurchase, InstallmentRecord
from fintrack.utils.date_utils import add_months, first_day_of_month, format_year_month

CENTS = Decimal("0.01")


def round_amount(amount: Decimal) -> Decimal:
    """Round a monetary amount to 2 decimal places (half up)"""
    return Decimal(amount).quantize(CENTS, rounding=ROUND_HALF_UP)


def calculate_base_invoice_month(purchase_date: date, closing_day: int) -> date:
    """
    Return the first day of the invoice month a purchase is charged against.

    Purchases made after the closing day roll into the next month's invoice;
    a purchase made on the closing day itself stays in the current one.
    """
    base = first_day_of_month(purchase_date)
    if purchase_date.day > closing_day:
        base = add_months(base, 1)
    return base


def allocate_installments(
    purchase: CardPurchase,
    closing_day: int,
    group_id: Optional[str] = None,
) -> List[InstallmentRecord]:
    """
    Expand a card purchase into one record per installment.

    Requirements:
    - Installment i (1-based) is charged on the invoice base + (i - 1) months
    - Every installment carries the purchase amount rounded to 2 decimals,
      the total is not divided across installments
    - All installments share the same group id

    Args:
        purchase: Purchase facts (installment_count defaults to 1 when absent or <= 0)
        closing_day: Card closing day (1..31)
        group_id: Group identifier to reuse, a new uuid4 by default

    Raises:
        ValidationError: When an installment would land after invoice month 9999-12

    Example:
        300.00 in 3x on 2025-01-15, closing day 10
        -> 2025-02, 2025-03, 2025-04, each 300.00
    """
    count = purchase.installment_count if purchase.installment_count and purchase.installment_count > 0 else 1
    group_id = group_id or str(uuid.uuid4())
    invoice_months = _invoice_months(purchase.purchase_date, closing_day, count)
    amount = round_amount(purchase.total_amount)

    return [
        InstallmentRecord(
            group_id=group_id,
            installment_index=index,
            installment_count=count,
            amount_per_installment=amount,
            invoice_month=invoice_months[index - 1],
            purchase_date=purchase.purchase_date,
            description=purchase.description,
        )
        for index in range(1, count + 1)
    ]


def _invoice_months(purchase_date: date, closing_day: int, count: int) -> List[str]:
    """
    Raises:
        ValidationError: When the last installment would be billed after 9999-12
    """
    try:
        base_month = calculate_base_invoice_month(purchase_date, closing_day)
        return [format_year_month(add_months(base_month, offset)) for offset in range(count)]
    except (ValueError, OverflowError):
        raise ValidationError(
            "Invalid purchase",
            [f"purchase_date: {count} installment(s) from {purchase_date.isoformat()} run past the last invoice month"],
        )

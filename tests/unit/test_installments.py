"""Unit tests for card purchase installment allocation"""

import pytest
from datetime import date
from decimal import Decimal
from fintrack.domain.exceptions import ValidationError
from fintrack.domain.installments import allocate_installments, calculate_base_invoice_month, round_amount
from fintrack.domain.models import CardPurchase


def test_allocate_installments_scenario(sample_purchase: CardPurchase):
    """300.00 in 3x on 2025-01-15, closing day 10 -> Feb, Mar, Apr at full amount"""
    records = allocate_installments(sample_purchase, closing_day=10)

    assert [r.invoice_month for r in records] == ["2025-02", "2025-03", "2025-04"]
    assert all(r.amount_per_installment == Decimal("300.00") for r in records)  # Not split into 100.00
    assert [r.installment_index for r in records] == [1, 2, 3]
    assert all(r.installment_count == 3 for r in records)


def test_allocate_installments_share_group_id(sample_purchase: CardPurchase):
    records = allocate_installments(sample_purchase, closing_day=10)

    assert len({r.group_id for r in records}) == 1
    assert allocate_installments(sample_purchase, closing_day=10)[0].group_id != records[0].group_id


def test_allocate_installments_reuses_given_group_id(sample_purchase: CardPurchase):
    records = allocate_installments(sample_purchase, closing_day=10, group_id="fixed-group")
    assert all(r.group_id == "fixed-group" for r in records)


def test_purchase_on_closing_day_stays_in_current_invoice():
    """Purchase dated exactly on the closing day belongs to the current month"""
    assert calculate_base_invoice_month(date(2025, 3, 10), closing_day=10) == date(2025, 3, 1)


def test_purchase_after_closing_day_rolls_to_next_invoice():
    """Purchase dated the day after closing belongs to next month"""
    assert calculate_base_invoice_month(date(2025, 3, 11), closing_day=10) == date(2025, 4, 1)


def test_base_invoice_month_year_rollover():
    assert calculate_base_invoice_month(date(2025, 12, 28), closing_day=25) == date(2026, 1, 1)


@pytest.mark.parametrize("count", [1, 2, 6, 12, 24])
def test_invoice_months_are_consecutive(count: int):
    """N installments land on N strictly consecutive invoice months"""
    purchase = CardPurchase("Laptop", Decimal("1200"), date(2025, 11, 5), count)
    records = allocate_installments(purchase, closing_day=3)

    assert len(records) == count
    months = [tuple(int(p) for p in r.invoice_month.split("-")) for r in records]
    for (year, month), (next_year, next_month) in zip(months, months[1:]):
        assert (next_year * 12 + next_month) - (year * 12 + month) == 1
    assert records[0].invoice_month == "2025-12"


def test_installments_cross_year_boundary():
    purchase = CardPurchase("Trip", Decimal("900"), date(2025, 11, 20), 4)
    records = allocate_installments(purchase, closing_day=10)

    assert [r.invoice_month for r in records] == ["2025-12", "2026-01", "2026-02", "2026-03"]


@pytest.mark.parametrize("count", [None, 0, -3])
def test_installment_count_defaults_to_one(count):
    purchase = CardPurchase("Coffee", Decimal("4.5"), date(2025, 5, 2), count)
    records = allocate_installments(purchase, closing_day=10)

    assert len(records) == 1
    assert records[0].installment_count == 1
    assert records[0].invoice_month == "2025-05"


def test_closing_day_31_keeps_whole_month_in_current_invoice():
    purchase = CardPurchase("Book", Decimal("50"), date(2025, 1, 31), 2)
    records = allocate_installments(purchase, closing_day=31)

    assert [r.invoice_month for r in records] == ["2025-01", "2025-02"]


def test_round_amount_half_up():
    assert round_amount(Decimal("10.005")) == Decimal("10.01")
    assert round_amount(Decimal("10.004")) == Decimal("10.00")
    assert round_amount(Decimal("7")) == Decimal("7.00")


def test_last_representable_invoice_month():
    purchase = CardPurchase("Time capsule", Decimal("10"), date(9999, 12, 5), 1)
    records = allocate_installments(purchase, closing_day=10)

    assert [r.invoice_month for r in records] == ["9999-12"]


@pytest.mark.parametrize(
    "purchase_date,count",
    [(date(9999, 12, 20), 1), (date(9999, 12, 5), 2), (date(9999, 1, 5), 13)],
)
def test_installments_past_year_9999_rejected(purchase_date: date, count: int):
    purchase = CardPurchase("Time capsule", Decimal("10"), purchase_date, count)

    with pytest.raises(ValidationError) as exc_info:
        allocate_installments(purchase, closing_day=10)

    assert exc_info.value.status_code == 400
    assert exc_info.value.details[0].startswith("purchase_date")

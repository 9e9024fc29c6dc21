"""Unit tests for explicit validation results"""

import pytest
from dataclasses import replace
from datetime import date
from fintrack.api.v1.schemas import CreditCardExpenseCreate, OccurrenceWindowQuery
from fintrack.domain.exceptions import ValidationError
from fintrack.domain.models import RecurringExpensePlan, RecurringFrequency
from fintrack.domain.validation import Err, FieldError, Ok, unwrap, validate, validate_recurring_plan


def test_validate_returns_ok_with_parsed_model():
    result = validate(CreditCardExpenseCreate, {"description": "Shoes", "amount": "89.90", "purchase_date": "2025-03-02"})

    assert isinstance(result, Ok)
    assert result.value.installments == 1
    assert result.value.purchase_date == date(2025, 3, 2)


def test_validate_returns_field_errors():
    result = validate(CreditCardExpenseCreate, {"description": "", "amount": -1, "purchase_date": "2025-03-02"})

    assert isinstance(result, Err)
    assert {error.field for error in result.errors} == {"description", "amount"}


def test_validate_model_level_error():
    result = validate(OccurrenceWindowQuery, {"start": "2025-05-01", "end": "2025-04-01"})
    assert isinstance(result, Err)


def test_unwrap_raises_validation_error_with_details():
    with pytest.raises(ValidationError) as exc_info:
        unwrap(Err([FieldError("month", "bad format")]))

    assert exc_info.value.status_code == 400
    assert exc_info.value.details == ["month: bad format"]


def test_unwrap_returns_value():
    assert unwrap(Ok(42)) == 42


def test_recurring_plan_custom_requires_interval(monthly_plan: RecurringExpensePlan):
    plan = replace(monthly_plan, frequency=RecurringFrequency.CUSTOM, custom_interval_days=None)
    result = validate_recurring_plan(plan)

    assert isinstance(result, Err)
    assert result.errors[0].field == "custom_interval_days"


def test_recurring_plan_end_before_start(monthly_plan: RecurringExpensePlan):
    result = validate_recurring_plan(replace(monthly_plan, end_date=date(2024, 12, 31)))

    assert isinstance(result, Err)
    assert [error.field for error in result.errors] == ["end_date"]


def test_recurring_plan_valid(monthly_plan: RecurringExpensePlan):
    custom = replace(monthly_plan, frequency=RecurringFrequency.CUSTOM, custom_interval_days=7)

    assert validate_recurring_plan(monthly_plan) == Ok(monthly_plan)
    assert isinstance(validate_recurring_plan(custom), Ok)

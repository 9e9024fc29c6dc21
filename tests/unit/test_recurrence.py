"""Unit tests for recurring expense occurrence projection"""

import pytest
from dataclasses import replace
from datetime import date, timedelta
from fintrack.domain.models import DateWindow, RecurringExpensePlan, RecurringFrequency
from fintrack.domain.recurrence import advance_occurrence, iter_occurrences, project_occurrences


def test_project_bounded_by_total_installments(monthly_plan: RecurringExpensePlan):
    """12 installments and no end date -> exactly 12 dates"""
    occurrences = project_occurrences(monthly_plan)

    assert len(occurrences) == 12
    assert occurrences[0] == date(2025, 1, 15)
    assert occurrences[-1] == date(2025, 12, 15)


def test_project_empty_once_all_installments_consumed(monthly_plan: RecurringExpensePlan):
    assert project_occurrences(replace(monthly_plan, current_installment=12)) == []


def test_project_skips_consumed_prefix(monthly_plan: RecurringExpensePlan):
    occurrences = project_occurrences(replace(monthly_plan, current_installment=10))
    assert occurrences == [date(2025, 11, 15), date(2025, 12, 15)]


def test_project_stops_at_end_date(monthly_plan: RecurringExpensePlan):
    plan = replace(monthly_plan, total_installments=0, end_date=date(2025, 4, 15))
    assert project_occurrences(plan) == [
        date(2025, 1, 15),
        date(2025, 2, 15),
        date(2025, 3, 15),
        date(2025, 4, 15),
    ]


def test_project_window_restricts_emitted_dates(monthly_plan: RecurringExpensePlan):
    window = DateWindow(start=date(2025, 3, 1), end=date(2025, 3, 31))
    assert project_occurrences(monthly_plan, window) == [date(2025, 3, 15)]


def test_project_window_counts_skipped_occurrences_toward_index(monthly_plan: RecurringExpensePlan):
    """Index advances for occurrences outside the window too"""
    plan = replace(monthly_plan, total_installments=3)
    window = DateWindow(start=date(2025, 4, 1), end=date(2025, 4, 30))
    assert project_occurrences(plan, window) == []


def test_project_unbounded_plan_with_window():
    plan = RecurringExpensePlan(start_date=date(2020, 6, 1), frequency=RecurringFrequency.YEARLY)
    window = DateWindow(start=date(2025, 1, 1), end=date(2026, 12, 31))
    assert project_occurrences(plan, window) == [date(2025, 6, 1), date(2026, 6, 1)]


def test_project_unbounded_plan_without_window_is_empty():
    plan = RecurringExpensePlan(start_date=date(2025, 1, 1), frequency=RecurringFrequency.MONTHLY)
    assert project_occurrences(plan) == []


def test_project_window_before_start_is_empty(monthly_plan: RecurringExpensePlan):
    window = DateWindow(start=date(2024, 1, 1), end=date(2024, 12, 31))
    assert project_occurrences(monthly_plan, window) == []


def test_monthly_advance_clamps_month_end():
    """2025-01-31 + 1 month -> 2025-02-28 (relativedelta clamps)"""
    assert advance_occurrence(date(2025, 1, 31), RecurringFrequency.MONTHLY) == date(2025, 2, 28)


def test_monthly_projection_from_month_end_keeps_clamped_day():
    plan = RecurringExpensePlan(
        start_date=date(2025, 1, 31), frequency=RecurringFrequency.MONTHLY, total_installments=3
    )
    assert project_occurrences(plan) == [date(2025, 1, 31), date(2025, 2, 28), date(2025, 3, 28)]


def test_yearly_advance_from_leap_day():
    assert advance_occurrence(date(2024, 2, 29), RecurringFrequency.YEARLY) == date(2025, 2, 28)


def test_custom_advance_by_interval():
    plan = RecurringExpensePlan(
        start_date=date(2025, 1, 1),
        frequency=RecurringFrequency.CUSTOM,
        custom_interval_days=15,
        total_installments=4,
    )
    occurrences = project_occurrences(plan)

    assert len(occurrences) == 4
    assert all(b - a == timedelta(days=15) for a, b in zip(occurrences, occurrences[1:]))


@pytest.mark.parametrize("interval", [None, 0, -5])
def test_custom_without_positive_interval_stops_after_first(interval):
    """Advancing does not move the date, so the guard stops the loop"""
    plan = RecurringExpensePlan(
        start_date=date(2025, 1, 1),
        frequency=RecurringFrequency.CUSTOM,
        custom_interval_days=interval,
        total_installments=10,
    )
    assert project_occurrences(plan) == [date(2025, 1, 1)]


def test_projection_is_repeatable(monthly_plan: RecurringExpensePlan):
    window = DateWindow(start=date(2025, 2, 1), end=date(2025, 8, 31))
    assert project_occurrences(monthly_plan, window) == project_occurrences(monthly_plan, window)
    assert list(iter_occurrences(monthly_plan)) == project_occurrences(monthly_plan)


def test_projection_is_ascending():
    plan = RecurringExpensePlan(
        start_date=date(2025, 1, 31),
        frequency=RecurringFrequency.CUSTOM,
        custom_interval_days=30,
        end_date=date(2026, 1, 31),
    )
    occurrences = project_occurrences(plan)
    assert occurrences == sorted(occurrences)
    assert occurrences[-1] <= date(2026, 1, 31)


def test_last_installment_in_year_9999():
    """Every emitted date is representable, so the projection must not step past it"""
    plan = RecurringExpensePlan(
        start_date=date(9999, 12, 15),
        frequency=RecurringFrequency.MONTHLY,
        total_installments=1,
    )
    assert project_occurrences(plan) == [date(9999, 12, 15)]


@pytest.mark.parametrize(
    "frequency,interval",
    [(RecurringFrequency.MONTHLY, None), (RecurringFrequency.YEARLY, None), (RecurringFrequency.CUSTOM, 30)],
)
def test_projection_stops_at_max_date(frequency, interval):
    plan = RecurringExpensePlan(
        start_date=date(9999, 11, 1),
        frequency=frequency,
        custom_interval_days=interval,
        end_date=date.max,
    )
    occurrences = project_occurrences(plan, DateWindow(start=date(9999, 1, 1), end=date.max))

    assert occurrences[0] == date(9999, 11, 1)
    assert occurrences[-1] <= date.max

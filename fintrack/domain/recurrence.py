"""Occurrence projection for recurring expenses"""

from datetime import date, timedelta
from typing import Iterator, List, Optional

from fintrack.domain.models import DateWindow, RecurringExpensePlan, RecurringFrequency
from fintrack.utils.date_utils import add_months, add_years


def advance_occurrence(
    current: date,
    frequency: RecurringFrequency,
    custom_interval_days: Optional[int] = None,
) -> date:
    """
    Step to the next occurrence date.

    CUSTOM without a positive interval returns `current` unchanged, which the
    projector treats as a stall and stops on.
    """
    if frequency == RecurringFrequency.YEARLY:
        return add_years(current, 1)

    if frequency == RecurringFrequency.CUSTOM:
        if custom_interval_days and custom_interval_days > 0:
            return current + timedelta(days=custom_interval_days)
        return current

    return add_months(current, 1)


def iter_occurrences(plan: RecurringExpensePlan, window: Optional[DateWindow] = None) -> Iterator[date]:
    """
    Lazily yield occurrence dates of a plan in ascending order.

    Stops at the window end, the plan end date, the installment bound, when
    advancing no longer moves the date, or when the next date would fall past
    `date.max`. Occurrences whose index is below `current_installment` are
    counted but not yielded. A plan bounded by nothing (no window, no end
    date, unbounded installments) yields nothing.
    """
    if window is None and plan.end_date is None and plan.total_installments <= 0:
        return

    occurrence = plan.start_date
    index = 0

    while True:
        if window is not None and occurrence > window.end:
            break
        if plan.end_date is not None and occurrence > plan.end_date:
            break

        in_window = window is None or window.start <= occurrence <= window.end
        if index >= plan.current_installment and in_window:
            yield occurrence

        # Last installment reached: the next date is never needed
        if plan.total_installments > 0 and index + 1 >= plan.total_installments:
            break

        try:
            next_occurrence = advance_occurrence(occurrence, plan.frequency, plan.custom_interval_days)
        except (ValueError, OverflowError):
            break  # year 9999 exhausted
        if next_occurrence == occurrence:
            break

        occurrence = next_occurrence
        index += 1


def project_occurrences(plan: RecurringExpensePlan, window: Optional[DateWindow] = None) -> List[date]:
    """
    Main entry point: materialize the projected occurrences as a list.

    Pure function of (plan, window): calling it twice gives the same result.
    """
    return list(iter_occurrences(plan, window))

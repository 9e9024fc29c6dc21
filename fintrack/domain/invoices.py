"""Invoice gate: decides whether a card invoice still accepts changes"""

import re
from datetime import MAXYEAR, MINYEAR, date, datetime, time
from typing import Iterable, Tuple

from fintrack.domain.exceptions import ConflictError, ValidationError
from fintrack.utils.date_utils import last_day_of_month

INVOICE_MONTH_PATTERN = re.compile(r"^\d{4}-\d{2}$")
CLOSING_TIME = time(23, 59, 59, 999000)
CLOSED_INVOICE_MESSAGE = "Invoice is closed, this expense can no longer be modified"


def parse_invoice_month(invoice_month: str) -> Tuple[int, int]:
    """Split a YYYY-MM label into (year, month)"""
    if not isinstance(invoice_month, str) or not INVOICE_MONTH_PATTERN.match(invoice_month):
        raise ValidationError("Invalid invoice month", [f"month: expected YYYY-MM, got {invoice_month!r}"])

    year, month = (int(part) for part in invoice_month.split("-"))
    if not 1 <= month <= 12:
        raise ValidationError("Invalid invoice month", [f"month: {month} is not a calendar month"])
    if not MINYEAR <= year <= MAXYEAR:
        raise ValidationError("Invalid invoice month", [f"month: year {year} is out of range"])
    return year, month


def closing_date(closing_day: int, invoice_month: str) -> date:
    """Closing day of the invoice, clamped to the last day of short months"""
    year, month = parse_invoice_month(invoice_month)
    return date(year, month, min(closing_day, last_day_of_month(year, month)))


def closing_instant(closing_day: int, invoice_month: str) -> datetime:
    """Last moment (23:59:59.999 local time) the invoice is still open"""
    return end_of_closing_day(closing_date(closing_day, invoice_month))


def end_of_closing_day(closes_on: date) -> datetime:
    return datetime.combine(closes_on, CLOSING_TIME)


def is_closed_on(closes_on: date, now: datetime) -> bool:
    """Gate decision for an already resolved closing date"""
    return now > end_of_closing_day(closes_on)


def is_invoice_closed(closing_day: int, invoice_month: str, now: datetime) -> bool:
    """
    An invoice is closed once `now` is strictly after its closing instant.

    There is no stored state: OPEN turns into CLOSED as time passes and never
    goes back.
    """
    return is_closed_on(closing_date(closing_day, invoice_month), now)


def ensure_invoice_open(closing_day: int, invoice_month: str, now: datetime) -> None:
    """
    Raises:
        ConflictError: When the invoice is already closed
    """
    if is_invoice_closed(closing_day, invoice_month, now):
        raise ConflictError(CLOSED_INVOICE_MESSAGE, [f"invoice_month: {invoice_month} closed"])


def ensure_invoices_open(closing_day: int, invoice_months: Iterable[str], now: datetime) -> None:
    """
    Check every affected invoice before any change is applied.

    One closed invoice rejects the whole batch.
    """
    for invoice_month in invoice_months:
        ensure_invoice_open(closing_day, invoice_month, now)

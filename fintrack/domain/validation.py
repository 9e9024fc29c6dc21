"""
Explicit validation results.

Validators return `Ok(value)` or `Err(errors)` instead of raising, so callers
decide whether a failure is fatal. `unwrap` converts an `Err` into the
ValidationError surfaced to HTTP clients as a 400.
"""

from dataclasses import dataclass, field
from typing import Any, Generic, List, Type, TypeVar, Union

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from fintrack.domain.exceptions import ValidationError
from fintrack.domain.models import RecurringExpensePlan, RecurringFrequency

T = TypeVar("T")
M = TypeVar("M", bound=BaseModel)


@dataclass(frozen=True)
class FieldError:
    field: str
    message: str

    def __str__(self) -> str:
        return f"{self.field}: {self.message}"


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T


@dataclass(frozen=True)
class Err:
    errors: List[FieldError] = field(default_factory=list)


Result = Union[Ok[T], Err]


def unwrap(result: "Result[T]", message: str = "Validation failed") -> T:
    """
    Return the parsed value of an Ok result.

    Raises:
        ValidationError: With one detail per field error when result is Err
    """
    if isinstance(result, Err):
        raise ValidationError(message, [str(error) for error in result.errors])
    return result.value


def field_errors_from_pydantic(exc: PydanticValidationError) -> List[FieldError]:
    """Flatten pydantic errors into dotted-path field errors"""
    errors = []
    for error in exc.errors():
        location = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path", "header")]
        errors.append(FieldError(field=".".join(location) or "__root__", message=error.get("msg", "invalid")))
    return errors


def validate(schema: Type[M], data: Any) -> "Result[M]":
    """Parse raw data with a pydantic schema"""
    try:
        return Ok(schema.model_validate(data))
    except PydanticValidationError as exc:
        return Err(field_errors_from_pydantic(exc))


def validate_recurring_plan(plan: RecurringExpensePlan) -> "Result[RecurringExpensePlan]":
    """
    Check the cross-field rules of a recurring plan before projection.

    - CUSTOM frequency requires a positive custom_interval_days
    - end_date, when set, is not before start_date
    - installment counters are non-negative
    """
    errors = []

    if plan.frequency == RecurringFrequency.CUSTOM and not (
        plan.custom_interval_days and plan.custom_interval_days > 0
    ):
        errors.append(FieldError("custom_interval_days", "must be a positive integer when frequency is CUSTOM"))

    if plan.end_date is not None and plan.end_date < plan.start_date:
        errors.append(FieldError("end_date", "must not be before start_date"))

    if plan.total_installments < 0:
        errors.append(FieldError("total_installments", "must be greater than or equal to 0"))

    if plan.current_installment < 0:
        errors.append(FieldError("current_installment", "must be greater than or equal to 0"))

    return Err(errors) if errors else Ok(plan)

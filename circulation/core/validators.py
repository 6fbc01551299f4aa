"""Input checks applied to a loan before anything touches storage."""

from datetime import date
from typing import Optional
from circulation.configs import LOAN_PERIOD_DAYS, MAX_LOAN_DAYS
from circulation.core.exceptions import InvalidArgumentError


def is_positive_id(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value > 0


def require_positive_id(value, name: str) -> int:
    if not is_positive_id(value):
        raise InvalidArgumentError(f"{name} must be a positive number.")
    return value


def require_date(value, name: str) -> date:
    if value is None:
        raise InvalidArgumentError(f"{name} is required.")
    if not isinstance(value, date):
        raise InvalidArgumentError(f"{name} must be a date.")
    return value


def validate_loan_fields(book_id, member_id, checkout_date, due_date,
                         return_date: Optional[date] = None) -> None:
    """Raises InvalidArgumentError unless the proposed loan is well formed.

    Ids must be positive, checkout and due dates present, and neither the
    due date nor a return date may fall before the checkout date.
    """
    require_positive_id(book_id, "book_id")
    require_positive_id(member_id, "member_id")
    require_date(checkout_date, "checkout_date")
    require_date(due_date, "due_date")
    if due_date < checkout_date:
        raise InvalidArgumentError("due_date cannot be before checkout_date.")
    if return_date is not None:
        require_date(return_date, "return_date")
        if return_date < checkout_date:
            raise InvalidArgumentError("return_date cannot be before checkout_date.")


def normalize_loan_days(days: Optional[int], default: int = LOAN_PERIOD_DAYS,
                        maximum: int = MAX_LOAN_DAYS) -> int:
    """0 (or None) selects the default loan length."""
    if days is None or days == 0:
        return default
    if isinstance(days, bool) or not isinstance(days, int):
        raise InvalidArgumentError("loan length must be a whole number of days.")
    if days < 0:
        raise InvalidArgumentError("loan length cannot be negative.")
    if days > maximum:
        raise InvalidArgumentError(f"loan length cannot exceed {maximum} days.")
    return days

from datetime import date, timedelta
import pytest
from circulation.core.validators import (
    validate_loan_fields,
    normalize_loan_days,
    require_positive_id,
    is_positive_id,
)
from circulation.core.exceptions import InvalidArgumentError
from circulation.core import validators
from circulation import configs
from circulation.configs import LOAN_PERIOD_DAYS, MAX_LOAN_DAYS

D0 = date(2025, 1, 1)


def test_valid_loan_passes():
    validate_loan_fields(1, 1, D0, D0 + timedelta(days=14))
    validate_loan_fields(1, 1, D0, D0, return_date=D0)


@pytest.mark.parametrize("book_id, member_id", [
    (0, 1), (-3, 1), (1, 0), (1, -1), (None, 1), (1, None), (True, 1), ("1", 1),
])
def test_non_positive_or_non_integer_ids_rejected(book_id, member_id):
    with pytest.raises(InvalidArgumentError):
        validate_loan_fields(book_id, member_id, D0, D0)


def test_missing_dates_rejected():
    with pytest.raises(InvalidArgumentError, match="checkout_date"):
        validate_loan_fields(1, 1, None, D0)
    with pytest.raises(InvalidArgumentError, match="due_date"):
        validate_loan_fields(1, 1, D0, None)


def test_due_before_checkout_rejected():
    with pytest.raises(InvalidArgumentError, match="due_date cannot be before checkout_date"):
        validate_loan_fields(1, 1, D0, D0 - timedelta(days=1))


def test_return_before_checkout_rejected():
    with pytest.raises(InvalidArgumentError, match="return_date cannot be before checkout_date"):
        validate_loan_fields(1, 1, D0, D0 + timedelta(days=7), return_date=D0 - timedelta(days=1))


def test_invalid_argument_is_a_value_error():
    with pytest.raises(ValueError):
        require_positive_id(0, "loan_id")
    assert is_positive_id(7)
    assert not is_positive_id(False)


def test_normalize_loan_days():
    assert normalize_loan_days(0) == LOAN_PERIOD_DAYS
    assert normalize_loan_days(None) == LOAN_PERIOD_DAYS
    assert normalize_loan_days(0, default=21) == 21
    assert normalize_loan_days(30) == 30
    assert normalize_loan_days(MAX_LOAN_DAYS) == MAX_LOAN_DAYS
    with pytest.raises(InvalidArgumentError):
        normalize_loan_days(-1)
    with pytest.raises(InvalidArgumentError):
        normalize_loan_days(MAX_LOAN_DAYS + 1)
    with pytest.raises(InvalidArgumentError):
        normalize_loan_days(40, maximum=30)


def test_loan_length_defaults_come_from_configuration():
    defaults = normalize_loan_days.__defaults__
    assert defaults == (LOAN_PERIOD_DAYS, MAX_LOAN_DAYS)
    assert not hasattr(validators, "DEFAULT_LOAN_DAYS")
    assert validators.MAX_LOAN_DAYS is configs.MAX_LOAN_DAYS

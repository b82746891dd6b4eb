import pytest
from pydantic import ValidationError

from churnguard.dashboard.forms import DEFAULT_FORM, coerce_number, record_from_form
from churnguard.inference.schemas import ContractType


def test_default_form_is_valid():
    record = record_from_form(DEFAULT_FORM)
    assert record.tenure_months == 12
    assert record.contract_type == ContractType.MONTH_TO_MONTH


def test_currency_text_is_coerced():
    record = record_from_form({**DEFAULT_FORM, "totalCharges": " ₹7,188 ", "monthlyCharges": "1,234"})
    assert record.total_charges == 7188.0
    assert record.monthly_charges == 1234.0


@pytest.mark.parametrize("value,cast,expected", [
    ("12", int, 12),
    ("12.0", int, 12),
    ("599.50", float, 599.5),
    ("abc", float, "abc"),
    ("", float, ""),
    (7, int, 7),
])
def test_coerce_number(value, cast, expected):
    assert coerce_number(value, cast) == expected


def test_fractional_tenure_is_rejected():
    with pytest.raises(ValidationError):
        record_from_form({**DEFAULT_FORM, "tenureMonths": "12.5"})


@pytest.mark.parametrize("field", ["tenureMonths", "monthlyCharges", "totalCharges"])
def test_negative_values_are_rejected(field):
    with pytest.raises(ValidationError):
        record_from_form({**DEFAULT_FORM, field: "-1"})


def test_blank_payment_method_is_rejected():
    with pytest.raises(ValidationError):
        record_from_form({**DEFAULT_FORM, "paymentMethod": "   "})


def test_unknown_field_is_rejected():
    with pytest.raises(ValidationError):
        record_from_form({**DEFAULT_FORM, "gender": "Female"})

"""
Form Coercion
=============

Turns raw form values into a validated CustomerRecord.
"""

from typing import Any, Mapping

from churnguard.inference.schemas import CustomerRecord

NUMERIC_FIELDS = {
    "tenureMonths": int,
    "monthlyCharges": float,
    "totalCharges": float,
}

DEFAULT_FORM = {
    "tenureMonths": 12,
    "monthlyCharges": 599,
    "totalCharges": 7188,
    "contractType": "Month-to-month",
    "internetService": "Fiber optic",
    "techSupport": "No",
    "paperlessBilling": "Yes",
    "paymentMethod": "UPI",
}


def coerce_number(value: Any, cast=float):
    """
    Convert form text such as ``" ₹7,188 "`` to a number.

    Values that cannot be converted are returned unchanged so that model
    validation reports them against the right field.
    """
    if isinstance(value, bool) or not isinstance(value, str):
        return value

    text = value.strip().replace(",", "").replace("₹", "").replace(" ", "")
    if not text:
        return value

    try:
        number = float(text)
    except ValueError:
        return value

    if cast is int and number.is_integer():
        return int(number)
    return number if cast is float else value


def record_from_form(fields: Mapping[str, Any]) -> CustomerRecord:
    """
    Build a CustomerRecord from form fields.

    Args:
        fields: Field values keyed by wire name (``tenureMonths`` ...)

    Returns:
        Validated CustomerRecord

    Raises:
        pydantic.ValidationError: If a field is missing or invalid
    """
    data = dict(fields)
    for name, cast in NUMERIC_FIELDS.items():
        if name in data:
            data[name] = coerce_number(data[name], cast)
    return CustomerRecord.model_validate(data)

"""Payment form validation, run before anything is sent to the store"""

from datetime import datetime
from typing import Any, Optional, Union

from payment_tracker.domain.exceptions import PaymentValidationError
from payment_tracker.domain.models import PaymentFields, PaymentMethod, to_cents
from payment_tracker.domain.timezone import display_datetime_to_instant


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def validate_payment_form(
    client_name: Optional[str],
    payment_method: Union[PaymentMethod, str, None],
    amount_paid: Any,
    timestamp: Union[datetime, str, None],
    service_type: Optional[str] = None,
) -> PaymentFields:
    """
    Turn raw form input into PaymentFields.

    The timestamp is a wall-clock value in display time and is converted to
    UTC here. Zero and negative amounts are valid (refunds, adjustments).

    Raises:
        PaymentValidationError: on the first missing or malformed field
    """
    if _is_blank(client_name):
        raise PaymentValidationError("client_name", "Client name is required")

    if _is_blank(payment_method):
        raise PaymentValidationError("payment_method", "Payment method is required")
    try:
        method = PaymentMethod(payment_method)
    except ValueError:
        allowed = ", ".join(m.value for m in PaymentMethod)
        raise PaymentValidationError("payment_method", f"Payment method must be one of: {allowed}")

    if _is_blank(amount_paid):
        raise PaymentValidationError("amount_paid", "Amount is required")
    try:
        amount = to_cents(amount_paid)
    except ValueError:
        raise PaymentValidationError("amount_paid", "Amount must be a number")

    if _is_blank(timestamp):
        raise PaymentValidationError("timestamp", "Date and time are required")
    try:
        instant = display_datetime_to_instant(timestamp)
    except ValueError:
        raise PaymentValidationError("timestamp", "Date and time must look like YYYY-MM-DDTHH:MM")

    return PaymentFields(
        client_name=client_name.strip(),
        payment_method=method,
        amount_paid=amount,
        timestamp=instant,
        service_type=None if _is_blank(service_type) else service_type.strip(),
    )

"""Domain models - pure Python dataclasses representing business entities"""

import uuid
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from enum import Enum
from typing import Any, Mapping, Optional, Tuple

CENTS = Decimal("0.01")
ZERO = Decimal("0.00")


class PaymentMethod(str, Enum):
    """Non-card payment methods accepted by the business"""

    CASH = "Cash"
    ZELLE = "Zelle"
    CHECK = "Check"
    HOUSE_ACCOUNT = "Booker CC"  # charge against the external booking account


def to_cents(value: Any) -> Decimal:
    """Coerce a number or numeric string to a Decimal rounded to cents"""
    if isinstance(value, bool):
        raise ValueError("amount must be numeric")
    try:
        amount = Decimal(str(value).strip()) if not isinstance(value, Decimal) else value
    except InvalidOperation as e:
        raise ValueError(f"invalid amount: {value!r}") from e
    if not amount.is_finite():
        raise ValueError(f"invalid amount: {value!r}")
    return amount.quantize(CENTS, rounding=ROUND_HALF_UP)


def ensure_utc(instant: datetime) -> datetime:
    """Attach UTC to naive datetimes and convert aware ones to UTC"""
    if instant.tzinfo is None:
        return instant.replace(tzinfo=timezone.utc)
    return instant.astimezone(timezone.utc)


def _parse_instant(value: Any) -> datetime:
    if isinstance(value, datetime):
        return ensure_utc(value)
    text = str(value).strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    return ensure_utc(datetime.fromisoformat(text))


@dataclass(frozen=True)
class PaymentFields:
    """Editable fields of a payment, supplied by the client on insert and update"""

    client_name: str
    payment_method: PaymentMethod
    amount_paid: Decimal
    timestamp: datetime
    service_type: Optional[str] = None


@dataclass(frozen=True)
class PaymentRecord:
    """Payment as persisted by the record store"""

    id: uuid.UUID
    client_name: str
    payment_method: PaymentMethod
    amount_paid: Decimal
    timestamp: datetime
    service_type: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "PaymentRecord":
        """
        Build a validated record from a loosely-typed store row.

        Raises:
            KeyError: required field missing
            ValueError: field present but malformed
        """
        client_name = data["client_name"]
        if not isinstance(client_name, str) or not client_name.strip():
            raise ValueError("client_name must be non-empty text")
        client_name = client_name.strip()

        service_type = data.get("service_type")
        if service_type is not None:
            if not isinstance(service_type, str):
                raise ValueError("service_type must be text")
            service_type = service_type.strip() or None

        created_at = data.get("created_at")
        updated_at = data.get("updated_at")

        return cls(
            id=data["id"] if isinstance(data["id"], uuid.UUID) else uuid.UUID(str(data["id"])),
            client_name=client_name,
            payment_method=PaymentMethod(data["payment_method"]),
            amount_paid=to_cents(data["amount_paid"]),
            timestamp=_parse_instant(data["timestamp"]),
            service_type=service_type,
            created_at=_parse_instant(created_at) if created_at is not None else None,
            updated_at=_parse_instant(updated_at) if updated_at is not None else None,
        )


@dataclass(frozen=True)
class FilterCriteria:
    """Dashboard filter state; None bounds and method mean unrestricted"""

    search: str = ""
    date_from: Optional[date] = None
    date_to: Optional[date] = None
    payment_method: Optional[PaymentMethod] = None


@dataclass(frozen=True)
class Summary:
    """Per-method sums, grand total and record count of a filtered subset"""

    cash: Decimal = ZERO
    zelle: Decimal = ZERO
    check: Decimal = ZERO
    booker_cc: Decimal = ZERO
    total: Decimal = ZERO
    count: int = 0

    def for_method(self, method: PaymentMethod) -> Decimal:
        return {
            PaymentMethod.CASH: self.cash,
            PaymentMethod.ZELLE: self.zelle,
            PaymentMethod.CHECK: self.check,
            PaymentMethod.HOUSE_ACCOUNT: self.booker_cc,
        }[method]


@dataclass(frozen=True)
class FilteredView:
    """Visible subset of records plus its summary"""

    records: Tuple[PaymentRecord, ...] = field(default_factory=tuple)
    summary: Summary = field(default_factory=Summary)


@dataclass(frozen=True)
class Report:
    """Rendered payment report ready for download"""

    filename: str
    html: str
    summary: Optional[Summary] = None

"""Pydantic schemas for API request/response validation"""

from pydantic import BaseModel, Field, field_validator
from datetime import datetime
from decimal import Decimal
from typing import List, Optional
from uuid import UUID

from payment_tracker.domain.models import PaymentFields, PaymentMethod, PaymentRecord, ensure_utc


class PaymentIn(BaseModel):
    """Request body for POST /v1/payments and PUT /v1/payments/{id}"""

    client_name: str = Field(..., min_length=1, description="Client making the payment")
    payment_method: PaymentMethod
    amount_paid: Decimal = Field(..., max_digits=10, decimal_places=2, description="Signed amount in dollars")
    timestamp: datetime = Field(..., description="When the payment occurred; naive values are UTC")
    service_type: Optional[str] = None

    @field_validator("client_name")
    @classmethod
    def client_name_not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("client_name must not be blank")
        return v

    @field_validator("service_type")
    @classmethod
    def blank_service_type_is_none(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        return v.strip() or None

    def to_fields(self) -> PaymentFields:
        return PaymentFields(
            client_name=self.client_name,
            payment_method=self.payment_method,
            amount_paid=self.amount_paid,
            timestamp=ensure_utc(self.timestamp),
            service_type=self.service_type,
        )


class PaymentOut(BaseModel):
    """Single payment record"""

    id: UUID
    client_name: str
    payment_method: PaymentMethod
    amount_paid: Decimal
    timestamp: datetime
    service_type: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_record(cls, record: PaymentRecord) -> "PaymentOut":
        return cls(
            id=record.id,
            client_name=record.client_name,
            payment_method=record.payment_method,
            amount_paid=record.amount_paid,
            timestamp=record.timestamp,
            service_type=record.service_type,
            created_at=record.created_at,
            updated_at=record.updated_at,
        )


class PaymentListResponse(BaseModel):
    """Response for GET /v1/payments"""

    payments: List[PaymentOut]
    count: int

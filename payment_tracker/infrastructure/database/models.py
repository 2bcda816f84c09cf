"""SQLAlchemy ORM models matching db/schema.sql"""

import uuid
from sqlalchemy import CheckConstraint, Column, DateTime, Index, Numeric, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import declarative_base
from sqlalchemy.sql import func

from payment_tracker.domain.models import PaymentMethod

Base = declarative_base()

_METHOD_VALUES = ", ".join(f"'{m.value}'" for m in PaymentMethod)


class Payment(Base):
    """Non-card payment received from a client"""

    __tablename__ = "payments"
    __table_args__ = (
        CheckConstraint(f"payment_method IN ({_METHOD_VALUES})", name="payments_payment_method_check"),
        Index("idx_payments_client_name", "client_name"),
        Index("idx_payments_timestamp", "timestamp"),
        Index("idx_payments_method", "payment_method"),
    )

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    client_name = Column(Text, nullable=False)
    payment_method = Column(Text, nullable=False)
    amount_paid = Column(Numeric(10, 2), nullable=False)  # sign unconstrained: refunds are negative
    timestamp = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    service_type = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())

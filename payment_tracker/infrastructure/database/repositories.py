"""Data access layer for payment records"""

import uuid
from datetime import date
from typing import List, Optional
from sqlalchemy.orm import Session
from payment_tracker.infrastructure.database.models import Payment
from payment_tracker.domain.exceptions import PaymentNotFoundError
from payment_tracker.domain.filtering import filter_payments
from payment_tracker.domain.models import FilterCriteria, PaymentFields, PaymentMethod, PaymentRecord, ensure_utc


def to_record(row: Payment) -> PaymentRecord:
    """Convert an ORM row to a validated domain record"""
    return PaymentRecord.from_mapping(
        {
            "id": row.id,
            "client_name": row.client_name,
            "payment_method": row.payment_method,
            "amount_paid": row.amount_paid,
            "timestamp": row.timestamp,
            "service_type": row.service_type,
            "created_at": row.created_at,
            "updated_at": row.updated_at,
        }
    )


class PaymentRepository:
    """Repository for payment records"""

    def __init__(self, db: Session):
        self.db = db

    def list(self) -> List[PaymentRecord]:
        """All payments, newest first"""
        rows = (
            self.db.query(Payment)
            .order_by(Payment.timestamp.desc(), Payment.created_at.desc())
            .all()
        )
        return [to_record(row) for row in rows]

    def get(self, payment_id: uuid.UUID) -> Optional[PaymentRecord]:
        row = self._get_row(payment_id)
        return to_record(row) if row else None

    def insert(self, fields: PaymentFields) -> PaymentRecord:
        """Persist a new payment; id and audit timestamps come from the store"""
        row = Payment()
        self._assign(row, fields)
        self.db.add(row)
        self.db.flush()
        self.db.refresh(row)
        return to_record(row)

    def update(self, payment_id: uuid.UUID, fields: PaymentFields) -> PaymentRecord:
        """Replace every editable field of an existing payment"""
        row = self._require_row(payment_id)
        self._assign(row, fields)
        self.db.flush()
        self.db.refresh(row)
        return to_record(row)

    def delete(self, payment_id: uuid.UUID) -> None:
        row = self._require_row(payment_id)
        self.db.delete(row)
        self.db.flush()

    def list_by_date_range(
        self,
        date_from: Optional[date],
        date_to: Optional[date],
        payment_method: Optional[PaymentMethod] = None,
    ) -> List[PaymentRecord]:
        """
        Payments whose display-timezone date falls in [date_from, date_to].

        Reads the full record set in chronological order and applies the
        dashboard filter, so the subset always matches what the dashboard
        shows for the same criteria.
        """
        rows = (
            self.db.query(Payment)
            .order_by(Payment.timestamp.asc(), Payment.created_at.asc())
            .all()
        )
        criteria = FilterCriteria(date_from=date_from, date_to=date_to, payment_method=payment_method)
        return filter_payments((to_record(row) for row in rows), criteria)

    def _get_row(self, payment_id: uuid.UUID) -> Optional[Payment]:
        return self.db.query(Payment).filter(Payment.id == payment_id).first()

    def _require_row(self, payment_id: uuid.UUID) -> Payment:
        row = self._get_row(payment_id)
        if row is None:
            raise PaymentNotFoundError(f"Payment {payment_id} not found")
        return row

    @staticmethod
    def _assign(row: Payment, fields: PaymentFields) -> None:
        row.client_name = fields.client_name
        row.payment_method = fields.payment_method.value
        row.amount_paid = fields.amount_paid
        row.timestamp = ensure_utc(fields.timestamp)
        row.service_type = fields.service_type

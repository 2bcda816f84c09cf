"""/v1/payments - record store endpoints"""

import logging
import uuid
from fastapi import APIRouter, Depends, HTTPException, Request, Response

from payment_tracker.api.v1.schemas import PaymentIn, PaymentOut, PaymentListResponse
from payment_tracker.api.dependencies import get_payment_repository, get_request_id, require_session
from payment_tracker.infrastructure.database.repositories import PaymentRepository
from payment_tracker.domain.exceptions import PaymentNotFoundError
from payment_tracker.infrastructure.observability.metrics import record_store_write
from payment_tracker.infrastructure.observability.logging import log_store_write

router = APIRouter(dependencies=[Depends(require_session)])


@router.get("/payments", response_model=PaymentListResponse)
def list_payments(repo: PaymentRepository = Depends(get_payment_repository)):
    """All payments ordered by timestamp, newest first."""
    records = repo.list()
    return PaymentListResponse(
        payments=[PaymentOut.from_record(r) for r in records],
        count=len(records),
    )


@router.get("/payments/{payment_id}", response_model=PaymentOut)
def get_payment(payment_id: uuid.UUID, repo: PaymentRepository = Depends(get_payment_repository)):
    record = repo.get(payment_id)
    if record is None:
        raise HTTPException(status_code=404, detail="Payment not found")
    return PaymentOut.from_record(record)


@router.post("/payments", response_model=PaymentOut, status_code=201)
def create_payment(
    request_body: PaymentIn,
    request: Request,
    repo: PaymentRepository = Depends(get_payment_repository),
):
    """Insert a payment. The store assigns id, created_at and updated_at."""
    return _write("insert", request, repo, lambda: repo.insert(request_body.to_fields()))


@router.put("/payments/{payment_id}", response_model=PaymentOut)
def update_payment(
    payment_id: uuid.UUID,
    request_body: PaymentIn,
    request: Request,
    repo: PaymentRepository = Depends(get_payment_repository),
):
    """Replace the editable fields of a payment. Last write wins."""
    return _write("update", request, repo, lambda: repo.update(payment_id, request_body.to_fields()))


@router.delete("/payments/{payment_id}", status_code=204)
def delete_payment(
    payment_id: uuid.UUID,
    request: Request,
    repo: PaymentRepository = Depends(get_payment_repository),
):
    _write("delete", request, repo, lambda: repo.delete(payment_id), payment_id=payment_id)
    return Response(status_code=204)


def _write(operation, request: Request, repo: PaymentRepository, action, payment_id=None):
    """Run a mutation in its own transaction: commit fully or roll back fully"""
    request_id = get_request_id(request)
    try:
        result = action()
        repo.db.commit()
    except PaymentNotFoundError as e:
        repo.db.rollback()
        record_store_write(operation, "not_found")
        logging.warning(f"Payment not found: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=404, detail="Payment not found")
    except Exception as e:
        repo.db.rollback()
        record_store_write(operation, "error")
        logging.error(f"Unexpected error during {operation}: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")

    record_store_write(operation, "success")
    if result is None:
        log_store_write(request_id, operation, str(payment_id))
        return None
    log_store_write(request_id, operation, str(result.id))
    return PaymentOut.from_record(result)

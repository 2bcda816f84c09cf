"""GET /v1/reports/payments - downloadable HTML payment report"""

import time
import logging
from datetime import datetime, timezone
from typing import Optional
from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import HTMLResponse, JSONResponse

from payment_tracker.api.dependencies import get_payment_repository, get_request_id, require_session
from payment_tracker.config import settings
from payment_tracker.domain.exceptions import ReportParameterError
from payment_tracker.domain.models import PaymentMethod
from payment_tracker.domain.report import build_report
from payment_tracker.domain.timezone import parse_date_key
from payment_tracker.infrastructure.database.repositories import PaymentRepository
from payment_tracker.infrastructure.observability.logging import log_report
from payment_tracker.infrastructure.observability.metrics import record_report

router = APIRouter(dependencies=[Depends(require_session)])


def _parse_params(date_from: Optional[str], date_to: Optional[str], payment_method: Optional[str]):
    if not date_from or not date_to:
        raise ReportParameterError("dateFrom and dateTo parameters are required")
    try:
        start = parse_date_key(date_from)
        end = parse_date_key(date_to)
    except ValueError:
        raise ReportParameterError("dateFrom and dateTo must be dates in YYYY-MM-DD format")
    method = None
    if payment_method:
        try:
            method = PaymentMethod(payment_method)
        except ValueError:
            raise ReportParameterError(f"Unknown paymentMethod: {payment_method}")
    return start, end, method


@router.get("/reports/payments", response_class=HTMLResponse)
def get_payment_report(
    request: Request,
    date_from: Optional[str] = Query(None, alias="dateFrom", description="First day, YYYY-MM-DD (ET)"),
    date_to: Optional[str] = Query(None, alias="dateTo", description="Last day, YYYY-MM-DD (ET)"),
    payment_method: Optional[str] = Query(None, alias="paymentMethod", description="Method, or empty for all"),
    repo: PaymentRepository = Depends(get_payment_repository),
):
    """
    Render payments for a display-timezone date range as an HTML document.

    Flow:
    1. Validate dateFrom/dateTo (required) and paymentMethod (optional)
    2. Read the full record set and filter by ET calendar date and method
    3. Summarize and render a self-contained document
    4. Return it as a file download
    """
    start_time = time.time()
    request_id = get_request_id(request)

    try:
        start, end, method = _parse_params(date_from, date_to, payment_method)
    except ReportParameterError as e:
        record_report("bad_request")
        logging.warning(f"Invalid report request: {e}", extra={"request_id": request_id})
        return JSONResponse(status_code=400, content={"error": str(e)})

    try:
        records = repo.list_by_date_range(start, end, method)
        report = build_report(
            records,
            start,
            end,
            method,
            generated_at=datetime.now(timezone.utc),
            business_name=settings.business_name,
        )
    except Exception as e:
        record_report("error")
        logging.error(f"Error generating report: {e}", extra={"request_id": request_id})
        return JSONResponse(
            status_code=500,
            content={"error": str(e), "dateFrom": date_from, "dateTo": date_to},
        )

    duration_ms = (time.time() - start_time) * 1000
    record_report("rendered", report.summary.count)
    log_report(request_id, date_from, date_to, payment_method, report.summary.count, duration_ms)

    return HTMLResponse(
        content=report.html,
        headers={"Content-Disposition": f'attachment; filename="{report.filename}"'},
    )

"""Unit tests for the payment store HTTP client"""

import json
import uuid
import httpx
import pytest
from datetime import date, datetime, timezone
from decimal import Decimal
from payment_tracker.domain.exceptions import StoreError
from payment_tracker.domain.models import PaymentFields, PaymentMethod
from payment_tracker.infrastructure.clients.store import PaymentStoreClient

PAYMENT_ID = uuid.uuid4()

ROW = {
    "id": str(PAYMENT_ID),
    "client_name": "Jane Doe",
    "payment_method": "Zelle",
    "amount_paid": "50.00",
    "timestamp": "2025-10-19T14:00:00Z",
    "service_type": None,
    "created_at": "2025-10-19T14:01:00Z",
    "updated_at": "2025-10-19T14:01:00Z",
}


def client_for(handler) -> PaymentStoreClient:
    return PaymentStoreClient(
        base_url="http://store.test",
        token="secret",
        transport=httpx.MockTransport(handler),
    )


async def test_list_parses_records_and_sends_bearer_token():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["auth"] = request.headers["authorization"]
        seen["path"] = request.url.path
        return httpx.Response(200, json={"payments": [ROW], "count": 1})

    records = await client_for(handler).list()

    assert seen == {"auth": "Bearer secret", "path": "/v1/payments"}
    assert records[0].id == PAYMENT_ID
    assert records[0].payment_method == PaymentMethod.ZELLE
    assert records[0].amount_paid == Decimal("50.00")


async def test_insert_sends_editable_fields_only():
    sent = {}

    def handler(request: httpx.Request) -> httpx.Response:
        sent.update(json.loads(request.content))
        return httpx.Response(201, json=ROW)

    fields = PaymentFields(
        client_name="Jane Doe",
        payment_method=PaymentMethod.ZELLE,
        amount_paid=Decimal("50.00"),
        timestamp=datetime(2025, 10, 19, 14, 0, tzinfo=timezone.utc),
    )
    record = await client_for(handler).insert(fields)

    assert sent == {
        "client_name": "Jane Doe",
        "payment_method": "Zelle",
        "amount_paid": "50.00",
        "timestamp": "2025-10-19T14:00:00+00:00",
        "service_type": None,
    }
    assert record.id == PAYMENT_ID


async def test_delete_targets_payment_id():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["method"] = request.method
        seen["path"] = request.url.path
        return httpx.Response(204)

    await client_for(handler).delete(PAYMENT_ID)
    assert seen == {"method": "DELETE", "path": f"/v1/payments/{PAYMENT_ID}"}


@pytest.mark.parametrize("status", [401, 404, 500, 503])
async def test_http_errors_raise_store_error(status):
    client = client_for(lambda request: httpx.Response(status, json={"detail": "nope"}))
    with pytest.raises(StoreError):
        await client.list()


async def test_timeout_raises_store_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectTimeout("timed out", request=request)

    with pytest.raises(StoreError, match="timeout"):
        await client_for(handler).list()


async def test_malformed_payload_raises_store_error():
    bad_row = dict(ROW, payment_method="Card")
    client = client_for(lambda request: httpx.Response(200, json={"payments": [bad_row]}))
    with pytest.raises(StoreError):
        await client.list()

    null_name = dict(ROW, client_name=None)
    client = client_for(lambda request: httpx.Response(200, json={"payments": [null_name]}))
    with pytest.raises(StoreError):
        await client.list()

    client = client_for(lambda request: httpx.Response(200, text="<html>oops</html>"))
    with pytest.raises(StoreError):
        await client.list()


async def test_generate_report_uses_query_and_filename_header():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen.update(dict(request.url.params))
        return httpx.Response(
            200,
            text="<!DOCTYPE html><html></html>",
            headers={
                "content-type": "text/html",
                "content-disposition": 'attachment; filename="report-2025-10-01-to-2025-10-19.html"',
            },
        )

    report = await client_for(handler).generate_report(date(2025, 10, 1), date(2025, 10, 19), PaymentMethod.CASH)

    assert seen == {"dateFrom": "2025-10-01", "dateTo": "2025-10-19", "paymentMethod": "Cash"}
    assert report.filename == "report-2025-10-01-to-2025-10-19.html"
    assert report.html.startswith("<!DOCTYPE html>")

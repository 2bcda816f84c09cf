"""Integration tests for API endpoints"""

import pytest
from fastapi.testclient import TestClient
from payment_tracker.api.dependencies import get_payment_repository


def payment_body(**overrides) -> dict:
    body = {
        "client_name": "Alice Smith",
        "payment_method": "Cash",
        "amount_paid": "100.00",
        "timestamp": "2025-10-19T14:00:00Z",
        "service_type": "Haircut",
    }
    body.update(overrides)
    return body


@pytest.fixture
def seeded(client: TestClient) -> list[dict]:
    """Three payments on Oct 19 ET plus one late-evening payment stored as Oct 20 UTC"""
    bodies = [
        payment_body(),
        payment_body(client_name="Bob Jones", payment_method="Zelle", amount_paid="50.00"),
        payment_body(client_name="Carol White", payment_method="Check", amount_paid="-20.00"),
        payment_body(
            client_name="Dan Brown",
            payment_method="Booker CC",
            amount_paid="75.00",
            timestamp="2025-10-20T14:00:00Z",
        ),
    ]
    return [client.post("/v1/payments", json=b).json() for b in bodies]


def test_health_endpoint(anon_client: TestClient):
    """Test health check endpoint"""
    response = anon_client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_request_id_is_echoed(anon_client: TestClient):
    response = anon_client.get("/health", headers={"X-Request-ID": "abc-123"})
    assert response.headers["x-request-id"] == "abc-123"
    assert anon_client.get("/health").headers["x-request-id"]


def test_metrics_endpoint(client: TestClient):
    """Test Prometheus metrics endpoint"""
    client.get("/v1/payments")
    response = client.get("/metrics")
    assert response.status_code == 200
    assert "http_request_duration_seconds" in response.text


def test_metrics_label_routes_by_full_template(client: TestClient):
    for i in range(3):
        assert client.get(f"/nope/{i}").status_code == 404
    client.get("/v1/payments/00000000-0000-0000-0000-000000000000")

    text = client.get("/metrics").text
    assert 'endpoint="unmatched"' in text
    assert "/nope/1" not in text
    assert 'endpoint="/v1/payments/{payment_id}"' in text
    assert "00000000-0000" not in text


@pytest.mark.parametrize(
    "method,path",
    [
        ("GET", "/v1/payments"),
        ("POST", "/v1/payments"),
        ("GET", "/v1/reports/payments?dateFrom=2025-10-19&dateTo=2025-10-19"),
    ],
)
def test_endpoints_require_bearer_token(anon_client: TestClient, method, path):
    response = anon_client.request(method, path)
    assert response.status_code == 401
    assert response.headers["www-authenticate"] == "Bearer"


def test_wrong_token_rejected(anon_client: TestClient):
    response = anon_client.get("/v1/payments", headers={"Authorization": "Bearer wrong"})
    assert response.status_code == 401


def test_create_payment_sets_store_fields(client: TestClient):
    """Test POST /v1/payments"""
    response = client.post("/v1/payments", json=payment_body(amount_paid="-15.5"))

    assert response.status_code == 201
    data = response.json()
    assert data["id"]
    assert data["created_at"] is not None
    assert data["updated_at"] is not None
    assert data["payment_method"] == "Cash"
    assert data["amount_paid"] == "-15.50"


@pytest.mark.parametrize(
    "override",
    [
        {"client_name": ""},
        {"client_name": "   "},
        {"payment_method": "Visa"},
        {"amount_paid": "12.345"},
        {"timestamp": "yesterday"},
    ],
)
def test_create_payment_validation(client: TestClient, override):
    response = client.post("/v1/payments", json=payment_body(**override))
    assert response.status_code == 422


def test_list_payments_newest_first(client: TestClient, seeded):
    """Test GET /v1/payments"""
    response = client.get("/v1/payments")

    assert response.status_code == 200
    data = response.json()
    assert data["count"] == 4
    assert data["payments"][0]["client_name"] == "Dan Brown"


def test_update_payment_replaces_fields(client: TestClient, seeded):
    """Test PUT /v1/payments/{id}"""
    payment_id = seeded[0]["id"]
    response = client.put(
        f"/v1/payments/{payment_id}",
        json=payment_body(client_name="Alice S.", amount_paid="120.00", service_type=None),
    )

    assert response.status_code == 200
    data = response.json()
    assert data["id"] == payment_id
    assert data["client_name"] == "Alice S."
    assert data["amount_paid"] == "120.00"
    assert data["service_type"] is None

    fetched = client.get(f"/v1/payments/{payment_id}").json()
    assert fetched["client_name"] == "Alice S."


def test_delete_payment(client: TestClient, seeded):
    """Test DELETE /v1/payments/{id}"""
    payment_id = seeded[1]["id"]
    response = client.delete(f"/v1/payments/{payment_id}")

    assert response.status_code == 204
    assert client.get(f"/v1/payments/{payment_id}").status_code == 404
    assert client.get("/v1/payments").json()["count"] == 3


def test_missing_payment_is_404(client: TestClient):
    fake_uuid = "00000000-0000-0000-0000-000000000000"
    assert client.get(f"/v1/payments/{fake_uuid}").status_code == 404
    assert client.put(f"/v1/payments/{fake_uuid}", json=payment_body()).status_code == 404
    assert client.delete(f"/v1/payments/{fake_uuid}").status_code == 404


def test_report_single_day(client: TestClient, seeded):
    """Test GET /v1/reports/payments for one ET day"""
    response = client.get("/v1/reports/payments?dateFrom=2025-10-19&dateTo=2025-10-19&paymentMethod=")

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/html")
    assert response.headers["content-disposition"] == 'attachment; filename="report-2025-10-19.html"'
    html = response.text
    assert "October 19, 2025" in html
    assert "$130.00" in html
    assert "Dan Brown" not in html
    assert "3 payment(s) recorded" in html


def test_report_range_and_method(client: TestClient, seeded):
    response = client.get(
        "/v1/reports/payments",
        params={"dateFrom": "2025-10-19", "dateTo": "2025-10-20", "paymentMethod": "Booker CC"},
    )

    assert response.status_code == 200
    assert 'filename="report-2025-10-19-to-2025-10-20.html"' in response.headers["content-disposition"]
    assert "Dan Brown" in response.text
    assert "Alice Smith" not in response.text
    assert "(Booker CC only)" in response.text


def test_report_empty_range_renders_no_records_state(client: TestClient):
    response = client.get("/v1/reports/payments?dateFrom=2025-10-19&dateTo=2025-10-19")

    assert response.status_code == 200
    assert "No payments recorded for this period" in response.text
    assert "<table>" not in response.text


@pytest.mark.parametrize(
    "query",
    [
        "",
        "?dateFrom=2025-10-19",
        "?dateTo=2025-10-19",
        "?dateFrom=&dateTo=2025-10-19",
    ],
)
def test_report_missing_dates_is_400(client: TestClient, query):
    response = client.get(f"/v1/reports/payments{query}")

    assert response.status_code == 400
    assert response.json() == {"error": "dateFrom and dateTo parameters are required"}


def test_report_malformed_parameters_are_400(client: TestClient):
    bad_date = client.get("/v1/reports/payments?dateFrom=10/19/2025&dateTo=2025-10-19")
    bad_method = client.get("/v1/reports/payments?dateFrom=2025-10-19&dateTo=2025-10-19&paymentMethod=Visa")

    assert bad_date.status_code == 400
    assert "error" in bad_date.json()
    assert bad_method.status_code == 400
    assert "Visa" in bad_method.json()["error"]


def test_report_internal_failure_is_500_with_parameters(client: TestClient):
    class BrokenRepository:
        def list_by_date_range(self, *args):
            raise RuntimeError("database unavailable")

    client.app.dependency_overrides[get_payment_repository] = lambda: BrokenRepository()
    response = client.get("/v1/reports/payments?dateFrom=2025-10-19&dateTo=2025-10-20")

    assert response.status_code == 500
    assert response.json() == {
        "error": "database unavailable",
        "dateFrom": "2025-10-19",
        "dateTo": "2025-10-20",
    }

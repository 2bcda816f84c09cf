"""Payment store HTTP client used by the dashboard"""

import re
import uuid
from datetime import date
from typing import Any, Dict, List, Optional

import httpx

from payment_tracker.config import settings
from payment_tracker.domain.exceptions import StoreError
from payment_tracker.domain.models import PaymentFields, PaymentMethod, PaymentRecord, Report
from payment_tracker.domain.report import report_filename
from payment_tracker.domain.timezone import format_date_key

_FILENAME_RE = re.compile(r'filename="?([^";]+)"?')


def _payload(fields: PaymentFields) -> Dict[str, Any]:
    return {
        "client_name": fields.client_name,
        "payment_method": fields.payment_method.value,
        "amount_paid": str(fields.amount_paid),
        "timestamp": fields.timestamp.isoformat(),
        "service_type": fields.service_type,
    }


class PaymentStoreClient:
    """Client for the payment record store API"""

    def __init__(
        self,
        base_url: str | None = None,
        token: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = (base_url or settings.api_base_url).rstrip("/")
        self.token = token if token is not None else settings.api_token
        self.timeout = timeout or settings.http_timeout_seconds
        self.transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.base_url,
            timeout=self.timeout,
            headers={"Authorization": f"Bearer {self.token}"},
            transport=self.transport,
        )

    async def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        """
        Send a request and raise for non-2xx responses.

        Raises:
            StoreError: On timeout, network failure or HTTP error status
        """
        async with self._client() as client:
            try:
                response = await client.request(method, path, **kwargs)
                response.raise_for_status()
                return response
            except httpx.TimeoutException as e:
                raise StoreError(f"Payment store timeout after {self.timeout}s") from e
            except httpx.HTTPStatusError as e:
                raise StoreError(f"Payment store error: {e.response.status_code}") from e
            except httpx.RequestError as e:
                raise StoreError(f"Payment store unreachable: {e}") from e

    @staticmethod
    def _parse_record(data: Any) -> PaymentRecord:
        try:
            return PaymentRecord.from_mapping(data)
        except (KeyError, ValueError, TypeError) as e:
            raise StoreError(f"Invalid payment data from store: {e}") from e

    @staticmethod
    def _json(response: httpx.Response) -> Any:
        try:
            return response.json()
        except ValueError as e:
            raise StoreError(f"Malformed response from store: {e}") from e

    async def list(self) -> List[PaymentRecord]:
        """All payments, newest first"""
        response = await self._request("GET", "/v1/payments")
        try:
            items = self._json(response)["payments"]
        except (KeyError, ValueError, TypeError) as e:
            raise StoreError(f"Invalid payment list from store: {e}") from e
        return [self._parse_record(item) for item in items]

    async def insert(self, fields: PaymentFields) -> PaymentRecord:
        response = await self._request("POST", "/v1/payments", json=_payload(fields))
        return self._parse_record(self._json(response))

    async def update(self, payment_id: uuid.UUID, fields: PaymentFields) -> PaymentRecord:
        response = await self._request("PUT", f"/v1/payments/{payment_id}", json=_payload(fields))
        return self._parse_record(self._json(response))

    async def delete(self, payment_id: uuid.UUID) -> None:
        await self._request("DELETE", f"/v1/payments/{payment_id}")

    async def generate_report(
        self,
        date_from: date,
        date_to: date,
        payment_method: Optional[PaymentMethod] = None,
    ) -> Report:
        """Download the rendered HTML report for a date range"""
        response = await self._request(
            "GET",
            "/v1/reports/payments",
            params={
                "dateFrom": format_date_key(date_from),
                "dateTo": format_date_key(date_to),
                "paymentMethod": payment_method.value if payment_method else "",
            },
        )
        match = _FILENAME_RE.search(response.headers.get("content-disposition", ""))
        filename = match.group(1) if match else report_filename(date_from, date_to)
        return Report(filename=filename, html=response.text)

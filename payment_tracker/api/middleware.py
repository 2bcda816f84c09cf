"""FastAPI middleware for request tracing, access logging and metrics"""

import uuid
import time
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from payment_tracker.infrastructure.observability.logging import log_request
from payment_tracker.infrastructure.observability.metrics import request_duration_histogram


def _route_label(request: Request) -> str:
    """Route template with its mount prefix; keeps ids and unknown paths out of labels"""
    route = request.scope.get("route")
    if route is None:
        return "unmatched"
    template = route.path
    extra = request.url.path.rstrip("/").count("/") - template.rstrip("/").count("/")
    if extra > 0:
        template = "/".join(request.url.path.split("/")[: extra + 1]) + template
    return template


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Tag each request with an ID, reusing the caller's X-Request-ID when present"""

    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        request.state.request_id = request_id

        response = await call_next(request)
        response.headers["X-Request-ID"] = request_id
        return response


class MetricsMiddleware(BaseHTTPMiddleware):
    """Observe request duration per route and write the access log"""

    async def dispatch(self, request: Request, call_next):
        started = time.perf_counter()
        response = await call_next(request)
        elapsed = time.perf_counter() - started

        endpoint = _route_label(request)
        request_duration_histogram.labels(
            method=request.method,
            endpoint=endpoint,
            status=response.status_code,
        ).observe(elapsed)

        log_request(
            getattr(request.state, "request_id", "-"),
            request.method,
            endpoint,
            response.status_code,
            round(elapsed * 1000, 2),
        )
        return response

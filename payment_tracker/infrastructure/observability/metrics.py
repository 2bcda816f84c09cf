"""Prometheus metrics for monitoring store writes and report generation"""

from prometheus_client import Counter, Histogram

# Store metrics
store_write_counter = Counter(
    "payment_store_writes_total",
    "Payment store writes",
    ["operation", "outcome"],  # insert | update | delete; success | not_found | error
)

# Report metrics
report_counter = Counter(
    "payment_reports_total",
    "Payment reports requested",
    ["outcome"],  # rendered | bad_request | error
)

report_payment_count_histogram = Histogram(
    "payment_report_records",
    "Payments included per rendered report",
    buckets=[0, 1, 5, 10, 25, 50, 100, 250, 500, 1000],
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_store_write(operation: str, outcome: str) -> None:
    store_write_counter.labels(operation=operation, outcome=outcome).inc()


def record_report(outcome: str, payment_count: int | None = None) -> None:
    """Record report outcome and, when rendered, its size"""
    report_counter.labels(outcome=outcome).inc()
    if payment_count is not None:
        report_payment_count_histogram.observe(payment_count)

"""Prometheus metrics for calculation volume, payment sizes and store health"""

from prometheus_client import Counter, Histogram

# Calculation metrics
calculation_counter = Counter(
    "emi_calculations_total",
    "Total EMI calculations handled",
    ["outcome"],  # saved | previewed | invalid | persistence_failed
)

monthly_payment_histogram = Histogram(
    "emi_monthly_payment",
    "Computed monthly payments",
    buckets=[100, 500, 1_000, 5_000, 10_000, 50_000, 100_000, 1_000_000],
)

# Store metrics
persistence_failure_counter = Counter(
    "emi_persistence_failures_total",
    "Failed calculation writes",
    ["backend"],
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_calculation(outcome: str, monthly_payment: float | None = None) -> None:
    """Count a calculation and, when one was computed, observe its payment"""
    calculation_counter.labels(outcome=outcome).inc()

    if monthly_payment is not None:
        monthly_payment_histogram.observe(monthly_payment)

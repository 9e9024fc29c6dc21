"""Prometheus metrics for monitoring installments, invoice gate rejections and recurring materialization"""

from prometheus_client import Counter, Histogram

# Card expense metrics
installments_created_counter = Counter(
    "fintrack_installments_created_total",
    "Installment rows created from card purchases",
)

invoice_gate_rejections_counter = Counter(
    "fintrack_invoice_gate_rejections_total",
    "Mutations rejected because an affected invoice is closed",
    ["operation", "scope"],  # update | delete, single | group
)

# Recurring expense metrics
recurring_materialized_counter = Counter(
    "fintrack_recurring_transactions_materialized_total",
    "Expense transactions materialized from recurring plans",
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_invoice_gate_rejection(operation: str, scope: str) -> None:
    invoice_gate_rejections_counter.labels(operation=operation, scope=scope).inc()

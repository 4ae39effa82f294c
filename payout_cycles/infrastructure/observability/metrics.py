"""Prometheus metrics for payout cycle resolution and settlements"""

from prometheus_client import Counter, Histogram

context_counter = Counter(
    "payout_context_total",
    "Payment contexts computed",
    ["frequency"],
)

cycle_start_source_counter = Counter(
    "payout_cycle_start_source_total",
    "Rule that resolved the current cycle start",
    ["source"],  # pending_record | paid_next_cycle_start | paid_cycle_end | latest_record | none
)

settlement_counter = Counter(
    "payout_settlement_total",
    "Settlements prepared",
    ["maintain_schedule"],
)

invalid_input_counter = Counter(
    "payout_invalid_input_total",
    "Requests rejected for unreadable dates or keys",
    ["reason"],
)

request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_context(frequency: str, start_source: str) -> None:
    """Record which frequency and start rule produced a context"""
    context_counter.labels(frequency=frequency).inc()
    cycle_start_source_counter.labels(source=start_source).inc()


def record_settlement(maintain_schedule: bool) -> None:
    settlement_counter.labels(maintain_schedule="true" if maintain_schedule else "false").inc()

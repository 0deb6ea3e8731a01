"""Prometheus metrics for view throughput, data-quality gaps, and plan health"""

from typing import Iterable
from prometheus_client import Counter, Histogram

from installment_ledger.domain.models import PlanSummary

# View metrics
view_counter = Counter(
    "ledger_view_total",
    "Derived views computed",
    ["view"],  # monthly | plans | expand
)

orphaned_transactions_counter = Counter(
    "ledger_orphaned_transactions_total",
    "Installment transactions omitted because their category did not resolve",
    ["view"],
)

plan_status_counter = Counter(
    "ledger_plan_status_total",
    "Installment plans classified, by lifecycle status",
    ["status"],  # active | overdue | completed
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_view(view: str) -> None:
    view_counter.labels(view=view).inc()


def record_orphans(view: str, count: int) -> None:
    if count > 0:
        orphaned_transactions_counter.labels(view=view).inc(count)


def record_plan_statuses(plans: Iterable[PlanSummary]) -> None:
    """Count classified plans so overdue share can be tracked over time"""
    for plan in plans:
        plan_status_counter.labels(status=plan.status.value).inc()

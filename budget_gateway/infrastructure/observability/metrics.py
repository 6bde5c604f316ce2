"""Prometheus metrics for monitoring plan utilization, data quality and records API health"""

from typing import Optional
from prometheus_client import Counter, Histogram
from budget_gateway.domain.models import BudgetSummary

# Summary metrics
summary_counter = Counter(
    "budget_summary_total",
    "Total budget summaries computed",
    ["outcome"],  # computed | no_active_plan
)

utilization_bucket_counter = Counter(
    "budget_utilization_bucket",
    "Plan utilization at time of summary by bucket",
    ["bucket"],  # 0-30%, 30-75%, 75-90%, 90-100%, over 100%
)

projection_counter = Counter(
    "budget_projection_total",
    "Summaries projecting early depletion or overspend",
    ["kind"],  # early_depletion | overspend
)

# Data quality
data_quality_counter = Counter(
    "budget_data_quality_notes_total",
    "Record inconsistencies tolerated during calculation, counted from data-quality log notes",
    ["reason"],  # "reason" field of the data_quality log record
)

# Records API metrics
records_fetch_failures_counter = Counter(
    "records_fetch_failures_total",
    "Failed clinic records API calls",
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_summary(summary: Optional[BudgetSummary]) -> None:
    """Record summary metrics for monitoring plan utilization distribution"""
    if summary is None:
        summary_counter.labels(outcome="no_active_plan").inc()
        return

    summary_counter.labels(outcome="computed").inc()

    utilization = summary.scalars.utilization_percentage
    if utilization < 30:
        bucket = "0-30%"
    elif utilization <= 75:
        bucket = "30-75%"
    elif utilization <= 90:
        bucket = "75-90%"
    elif utilization <= 100:
        bucket = "90-100%"
    else:
        bucket = "over 100%"

    utilization_bucket_counter.labels(bucket=bucket).inc()

    if summary.scalars.projected_end_date is not None:
        projection_counter.labels(kind="early_depletion").inc()
    if summary.scalars.projected_overspend is not None:
        projection_counter.labels(kind="overspend").inc()

"""Budget utilization engine - main entry point tying the calculators together"""

from datetime import date
from typing import List, Optional
from budget_gateway.domain.models import (
    BudgetItem,
    BudgetPolicy,
    BudgetSettings,
    BudgetSummary,
    SessionRecord,
)
from budget_gateway.domain.summary import calculate_summary
from budget_gateway.domain.timeseries import build_timeseries, projected_remaining_budget
from budget_gateway.domain.usage import aggregate_usage


def build_budget_summary(
    budget_items: List[BudgetItem],
    settings: Optional[BudgetSettings],
    sessions: List[SessionRecord],
    today: date,
    policy: Optional[BudgetPolicy] = None,
) -> Optional[BudgetSummary]:
    """
    Main entry point: aggregate usage, summarize the plan, build the daily series.

    Pure function of its inputs; `today` is the only notion of time.
    Returns None when the client has no active plan.
    """
    if settings is None:
        return None

    policy = policy or BudgetPolicy()

    usage = aggregate_usage(budget_items, sessions, policy)
    scalars = calculate_summary(usage.items_with_usage, settings, usage.spending_events, today, policy)

    daily_spending = build_timeseries(
        usage.spending_events,
        scalars.start_date,
        scalars.end_date,
        scalars.total_budget,
        today,
    )

    return BudgetSummary(
        scalars=scalars,
        items=usage.items_with_usage,
        spending_events=usage.spending_events,
        daily_spending=daily_spending,
        projected_remaining_budget=projected_remaining_budget(
            daily_spending, scalars.total_budget, scalars.remaining_budget
        ),
        unmatched_codes=usage.unmatched_codes,
    )

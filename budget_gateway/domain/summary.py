"""Budget summary calculator - totals, pace and depletion projections"""

import logging
import math
from datetime import date, timedelta
from typing import List, Optional, Tuple
from budget_gateway.domain.models import (
    BudgetPolicy,
    BudgetSettings,
    BudgetSummaryScalars,
    ItemUsage,
    SpendingEvent,
)
from budget_gateway.utils.date_utils import add_months


def resolve_plan_window(
    settings: BudgetSettings,
    today: date,
    policy: BudgetPolicy,
) -> Tuple[date, date]:
    """
    Determine the plan's start and end dates.

    Missing start falls back to the plan's creation date, then today.
    Missing end falls back to start + default_plan_months (6).
    """
    start_date = settings.start_date or settings.created_at
    if start_date is None:
        logging.warning(
            "Budget plan has no start date, using evaluation date",
            extra={"step": "data_quality", "reason": "missing_start_date", "client_id": settings.client_id},
        )
        start_date = today

    end_date = settings.end_date
    if end_date is None:
        logging.warning(
            "Budget plan has no end date, using default plan length",
            extra={"step": "data_quality", "reason": "missing_end_date", "client_id": settings.client_id},
        )
        end_date = add_months(start_date, policy.default_plan_months)

    return start_date, end_date


def plan_period_name(settings: BudgetSettings, start_date: date) -> str:
    return settings.plan_name or settings.plan_serial_number or f"Plan from {start_date.strftime('%b %Y')}"


def spending_rate_status(daily_spend_rate: float, daily_budget: float) -> str:
    """Compare actual pace to the even-spend pace (±20% band)"""
    if daily_spend_rate > daily_budget * 1.2:
        return "above_target"
    if daily_spend_rate < daily_budget * 0.8:
        return "below_target"
    return "on_target"


def plan_health_status(utilization_percentage: float, days_elapsed: int, total_days: int) -> str:
    """
    Compare share of budget used with share of plan time elapsed.

    - caution: utilization more than 1.2x the elapsed-time share
    - review: utilization below 0.7x the elapsed-time share
    - on_track: otherwise
    """
    time_percentage = days_elapsed / max(1, total_days) * 100

    if utilization_percentage > time_percentage * 1.2:
        return "caution"
    if utilization_percentage < time_percentage * 0.7:
        return "review"
    return "on_track"


def _project(
    today: date,
    end_date: date,
    total_budget: float,
    used_budget: float,
    remaining_budget: float,
    remaining_days: int,
    daily_budget: float,
    daily_spend_rate: float,
    policy: BudgetPolicy,
) -> Tuple[Optional[date], Optional[float]]:
    projected_end_date = None
    projected_overspend = None

    if daily_spend_rate > 0 and remaining_budget > 0:
        days_until_depletion = min(math.floor(remaining_budget / daily_spend_rate), policy.depletion_cap_days)
        depletion_date = today + timedelta(days=days_until_depletion)
        # Only meaningful if money runs out before the plan does
        if depletion_date < end_date:
            projected_end_date = depletion_date

    if daily_spend_rate > daily_budget:
        projected_total_spend = used_budget + daily_spend_rate * remaining_days
        if projected_total_spend > total_budget:
            projected_overspend = projected_total_spend - total_budget

    return projected_end_date, projected_overspend


def calculate_summary(
    items: List[ItemUsage],
    settings: Optional[BudgetSettings],
    spending_events: List[SpendingEvent],
    today: date,
    policy: Optional[BudgetPolicy] = None,
) -> Optional[BudgetSummaryScalars]:
    """
    Derive the scalar facts of a budget plan as of `today`.

    Requirements:
    - Total budget is always recomputed from items, never read from total_funds
    - Remaining budget may go negative (deficit), it is not clamped
    - Zero-length plans use a 180-day floor for the daily budget only
    - Projections are advisory: any arithmetic failure yields None for both

    Returns None when there is no active plan (settings is None).
    """
    if settings is None:
        return None

    policy = policy or BudgetPolicy()

    total_budget = sum(item.unit_price * item.quantity for item in items)
    used_budget = sum(item.unit_price * item.used_quantity for item in items)
    remaining_budget = total_budget - used_budget
    utilization_percentage = used_budget / total_budget * 100 if total_budget > 0 else 0.0

    if settings.total_funds is not None and not math.isclose(settings.total_funds, total_budget):
        logging.info(
            "Plan total funds differ from sum of budget items",
            extra={
                "step": "data_quality",
                "reason": "total_funds_drift",
                "client_id": settings.client_id,
                "total_funds": settings.total_funds,
                "items_total": total_budget,
            },
        )

    # Events carry session-recorded prices, which may differ from plan prices
    events_total = sum(event.amount for event in spending_events)
    if not math.isclose(events_total, used_budget, abs_tol=0.01):
        logging.debug(
            "Spending events total differs from item-priced usage",
            extra={"client_id": settings.client_id, "events_total": events_total, "used_budget": used_budget},
        )

    start_date, end_date = resolve_plan_window(settings, today, policy)

    total_days = (end_date - start_date).days
    bounded_days = max(total_days, 0)
    days_elapsed = min(max((today - start_date).days, 0), bounded_days)
    remaining_days = bounded_days - days_elapsed

    total_days_safe = total_days if total_days > 0 else policy.default_plan_days
    daily_budget = total_budget / total_days_safe
    daily_spend_rate = used_budget / days_elapsed if days_elapsed > 0 else 0.0

    try:
        projected_end_date, projected_overspend = _project(
            today,
            end_date,
            total_budget,
            used_budget,
            remaining_budget,
            remaining_days,
            daily_budget,
            daily_spend_rate,
            policy,
        )
    except (ArithmeticError, ValueError, TypeError) as e:
        logging.warning(
            f"Budget projection failed: {e}",
            extra={"step": "projection", "client_id": settings.client_id},
        )
        projected_end_date = None
        projected_overspend = None

    return BudgetSummaryScalars(
        total_budget=total_budget,
        used_budget=used_budget,
        remaining_budget=remaining_budget,
        utilization_percentage=utilization_percentage,
        start_date=start_date,
        end_date=end_date,
        total_days=total_days,
        days_elapsed=days_elapsed,
        remaining_days=remaining_days,
        daily_budget=daily_budget,
        daily_spend_rate=daily_spend_rate,
        projected_end_date=projected_end_date,
        projected_overspend=projected_overspend,
        plan_period_name=plan_period_name(settings, start_date),
        spending_rate_status=spending_rate_status(daily_spend_rate, daily_budget),
        health_status=plan_health_status(utilization_percentage, days_elapsed, bounded_days),
    )

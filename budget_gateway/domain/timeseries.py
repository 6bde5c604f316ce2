"""Daily actual vs target vs projected spending series for charting"""

from collections import defaultdict
from datetime import date
from typing import Dict, List
from budget_gateway.domain.models import DailyPoint, SpendingEvent
from budget_gateway.utils.date_utils import generate_date_range, month_label


def build_timeseries(
    spending_events: List[SpendingEvent],
    start_date: date,
    end_date: date,
    total_budget: float,
    today: date,
) -> List[DailyPoint]:
    """
    Build one point per calendar day from start_date to end_date (inclusive).

    - actual: sum of that day's spending events
    - target: total budget spread evenly over every day of the series,
      so the last cumulative target equals the total budget
    - projected (days after today only): average daily actual spend over
      days up to and including today, accumulated from the last actual total

    Events without a date or outside the window are ignored.
    """
    if end_date < start_date:
        return []

    days = generate_date_range(start_date, end_date)

    spend_by_date: Dict[date, float] = defaultdict(float)
    for event in spending_events:
        if event.date is not None and start_date <= event.date <= end_date:
            spend_by_date[event.date] += event.amount

    target_spending = total_budget / len(days)

    points: List[DailyPoint] = []
    cumulative_actual = 0.0
    cumulative_target = 0.0
    for day in days:
        actual = spend_by_date.get(day, 0.0)
        cumulative_actual += actual
        cumulative_target += target_spending
        points.append(
            DailyPoint(
                date=day,
                month=month_label(day),
                actual_spending=actual,
                target_spending=target_spending,
                cumulative_actual=cumulative_actual,
                cumulative_target=cumulative_target,
                projected_spending=None,
                cumulative_projected=None,
                is_projected=day > today,
            )
        )

    past_points = [p for p in points if not p.is_projected]
    average_daily_spending = sum(p.actual_spending for p in past_points) / max(1, len(past_points))

    cumulative_projected = past_points[-1].cumulative_actual if past_points else 0.0
    for point in points[len(past_points):]:
        cumulative_projected += average_daily_spending
        point.projected_spending = average_daily_spending
        point.cumulative_projected = cumulative_projected

    return points


def projected_remaining_budget(points: List[DailyPoint], total_budget: float, remaining_budget: float) -> float:
    """Budget left at plan end if the current pace continues"""
    if points and points[-1].cumulative_projected is not None:
        return max(0.0, total_budget - points[-1].cumulative_projected)
    return remaining_budget

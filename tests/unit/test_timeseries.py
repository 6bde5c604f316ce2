"""Unit tests for the daily spending series"""

import pytest
from datetime import date, timedelta
from budget_gateway.domain.models import SpendingEvent
from budget_gateway.domain.timeseries import build_timeseries, projected_remaining_budget


def _event(day: date, amount: float) -> SpendingEvent:
    return SpendingEvent(date=day, amount=amount, description="Session", item_code="A1", item_name="Item")


START = date(2025, 3, 1)
END = date(2025, 3, 10)


def test_build_timeseries_one_point_per_day_inclusive():
    points = build_timeseries([], START, END, 100.0, today=date(2025, 3, 5))

    assert len(points) == 10
    assert points[0].date == START
    assert points[-1].date == END
    assert points[0].month == "Mar 2025"


def test_build_timeseries_assigns_actual_spending_by_day():
    """Day 3 of the plan carries both events of that day"""
    events = [_event(date(2025, 3, 4), 20.0), _event(date(2025, 3, 4), 5.0), _event(date(2025, 3, 6), 10.0)]

    points = build_timeseries(events, START, END, 100.0, today=date(2025, 3, 8))

    assert [p.actual_spending for p in points[:3]] == [0, 0, 0]
    assert points[3].actual_spending == 25.0
    assert points[3].cumulative_actual == 25.0
    assert points[5].cumulative_actual == 35.0


def test_build_timeseries_cumulative_actual_is_monotonic():
    events = [_event(START + timedelta(days=i), float(i % 3)) for i in range(10)]

    points = build_timeseries(events, START, END, 100.0, today=END)

    for previous, current in zip(points, points[1:]):
        assert current.cumulative_actual >= previous.cumulative_actual


def test_build_timeseries_target_reaches_total_budget():
    points = build_timeseries([], START, date(2025, 6, 30), 1234.56, today=START)

    assert points[-1].cumulative_target == pytest.approx(1234.56)
    assert all(p.target_spending == pytest.approx(1234.56 / len(points)) for p in points)


def test_build_timeseries_projects_days_after_today():
    """
    Days 1-5 (up to and including today) average $6/day; the five days
    after today project $6/day on top of the $30 actual total
    """
    events = [_event(date(2025, 3, 2), 10.0), _event(date(2025, 3, 5), 20.0)]

    points = build_timeseries(events, START, END, 100.0, today=date(2025, 3, 5))

    past, future = points[:5], points[5:]
    assert all(p.projected_spending is None and p.cumulative_projected is None for p in past)
    assert not any(p.is_projected for p in past)
    assert all(p.is_projected for p in future)
    assert all(p.projected_spending == pytest.approx(6.0) for p in future)
    assert [p.cumulative_projected for p in future] == pytest.approx([36.0, 42.0, 48.0, 54.0, 60.0])


def test_build_timeseries_plan_not_started_projects_zero():
    points = build_timeseries([], START, END, 100.0, today=date(2025, 2, 1))

    assert all(p.is_projected for p in points)
    assert all(p.projected_spending == 0 for p in points)
    assert points[-1].cumulative_projected == 0


def test_build_timeseries_ignores_undated_and_out_of_window_events():
    events = [
        SpendingEvent(date=None, amount=99.0, description="x", item_code="A1", item_name="Item"),
        _event(date(2025, 2, 28), 50.0),
        _event(date(2025, 3, 11), 50.0),
    ]

    points = build_timeseries(events, START, END, 100.0, today=END)

    assert points[-1].cumulative_actual == 0


def test_build_timeseries_end_before_start_is_empty():
    assert build_timeseries([_event(START, 5.0)], END, START, 100.0, today=START) == []


def test_build_timeseries_single_day_plan():
    points = build_timeseries([_event(START, 5.0)], START, START, 80.0, today=START)

    assert len(points) == 1
    assert points[0].target_spending == 80.0
    assert points[0].cumulative_actual == 5.0


def test_build_timeseries_zero_budget():
    points = build_timeseries([], START, END, 0, today=date(2025, 3, 5))

    assert all(p.target_spending == 0 and p.cumulative_target == 0 for p in points)
    assert all(p.actual_spending == 0 for p in points)


def test_projected_remaining_budget_uses_last_projection():
    points = build_timeseries([_event(START, 30.0)], START, END, 100.0, today=START)

    # $30/day over 9 projected days on top of $30 actual = $300, clamped at 0
    assert projected_remaining_budget(points, 100.0, 70.0) == 0


def test_projected_remaining_budget_without_projection():
    points = build_timeseries([_event(START, 30.0)], START, END, 100.0, today=END)

    assert projected_remaining_budget(points, 100.0, 70.0) == 70.0
    assert projected_remaining_budget([], 100.0, 70.0) == 70.0

"""Unit tests for usage aggregation"""

import pytest
from datetime import date
from budget_gateway.domain.models import BudgetItem, BudgetPolicy, ProductUsage, SessionRecord
from budget_gateway.domain.usage import aggregate_usage, classify_utilization


def _item(code: str, unit_price=10, quantity=10) -> BudgetItem:
    return BudgetItem(id=1, client_id=1, item_code=code, description=f"Item {code}", unit_price=unit_price, quantity=quantity)


def _session(session_id: int, products, status="completed", day=date(2025, 3, 4), therapist=None) -> SessionRecord:
    return SessionRecord(id=session_id, status=status, session_date=day, products=products, therapist_name=therapist)


def test_aggregate_usage_counts_completed_sessions_only(sample_items, sample_sessions):
    """Draft sessions contribute no usage"""
    result = aggregate_usage(sample_items, sample_sessions)

    usage = result.items_with_usage[0]
    assert usage.used_quantity == 2
    assert usage.remaining_quantity == 3
    assert usage.utilization_rate == pytest.approx(0.4)
    assert usage.status == "normal"
    assert len(result.spending_events) == 1


def test_aggregate_usage_spending_event_fields(sample_items, sample_sessions):
    """Event carries session date, price x quantity, and readable labels"""
    event = aggregate_usage(sample_items, sample_sessions).spending_events[0]

    assert event.date == date(2025, 3, 4)
    assert event.amount == 20
    assert event.description == "Session with Dana Lee"
    assert event.item_code == "A1"
    assert event.item_name == "Speech therapy session"


def test_aggregate_usage_sums_across_sessions():
    """Quantities from every completed session accumulate per item"""
    items = [_item("A1"), _item("B2")]
    sessions = [
        _session(1, [ProductUsage("A1", 2), ProductUsage("B2", 1)]),
        _session(2, [ProductUsage("A1", 3)], day=date(2025, 3, 6)),
    ]

    result = aggregate_usage(items, sessions)
    used = {u.item.item_code: u.used_quantity for u in result.items_with_usage}

    assert used == {"A1": 5, "B2": 1}
    # One event per product entry, not aggregated by date
    assert len(result.spending_events) == 3


def test_aggregate_usage_item_code_match_is_case_sensitive():
    """'a1' does not match 'A1' and is reported as unmatched"""
    result = aggregate_usage([_item("A1")], [_session(1, [ProductUsage("a1", 4)])])

    assert result.items_with_usage[0].used_quantity == 0
    assert result.spending_events == []
    assert result.unmatched_codes == ["a1"]


def test_aggregate_usage_over_consumption_keeps_rate_above_one():
    """Used beyond allocation: remaining clamps to 0, rate is not clamped"""
    result = aggregate_usage([_item("A1", quantity=4)], [_session(1, [ProductUsage("A1", 6)])])
    usage = result.items_with_usage[0]

    assert usage.remaining_quantity == 0
    assert usage.utilization_rate == pytest.approx(1.5)
    assert usage.status == "critical"


def test_aggregate_usage_zero_quantity_item_has_zero_rate():
    result = aggregate_usage([_item("A1", quantity=0)], [_session(1, [ProductUsage("A1", 2)])])

    assert result.items_with_usage[0].utilization_rate == 0
    assert result.items_with_usage[0].remaining_quantity == 0


def test_aggregate_usage_tolerates_missing_products_and_bad_numbers():
    """None product lists and unparsable values never raise"""
    items = [_item("A1", unit_price="not-a-price", quantity="12")]
    sessions = [
        _session(1, None),
        _session(2, []),
        _session(3, [ProductUsage("A1", "abc"), ProductUsage("A1", "3")]),
    ]

    result = aggregate_usage(items, sessions)
    usage = result.items_with_usage[0]

    assert usage.quantity == 12
    assert usage.unit_price == 0
    assert usage.used_quantity == 3
    assert [e.amount for e in result.spending_events] == [0, 0]


def test_aggregate_usage_prefers_session_price():
    """Price recorded on the product entry overrides the plan's unit price"""
    sessions = [_session(1, [ProductUsage("A1", 2, unit_price="12.50")])]

    event = aggregate_usage([_item("A1", unit_price=10)], sessions).spending_events[0]

    assert event.amount == 25


def test_aggregate_usage_unparsable_session_price_falls_back_to_item_price():
    sessions = [_session(1, [ProductUsage("A1", 2, unit_price="n/a")])]

    event = aggregate_usage([_item("A1", unit_price=10)], sessions).spending_events[0]

    assert event.amount == 20


def test_aggregate_usage_negative_quantity_counts_as_zero():
    """Negative quantities never reduce usage or produce negative spending"""
    sessions = [_session(1, [ProductUsage("A1", 3)]), _session(2, [ProductUsage("A1", -2)], day=date(2025, 3, 5))]

    result = aggregate_usage([_item("A1")], sessions)

    assert result.items_with_usage[0].used_quantity == 3
    assert [e.amount for e in result.spending_events] == [30, 0]


def test_aggregate_usage_events_are_chronological():
    """Events sorted by date ascending; undated events last"""
    sessions = [
        _session(1, [ProductUsage("A1", 1)], day=date(2025, 3, 9)),
        _session(2, [ProductUsage("A1", 1)], day=None),
        _session(3, [ProductUsage("A1", 1)], day=date(2025, 3, 2)),
    ]

    events = aggregate_usage([_item("A1")], sessions).spending_events

    assert [e.date for e in events] == [date(2025, 3, 2), date(2025, 3, 9), None]
    assert events[-1].description == "Session #2"


def test_aggregate_usage_empty_inputs():
    result = aggregate_usage([], [])

    assert result.items_with_usage == []
    assert result.spending_events == []
    assert result.unmatched_codes == []


def test_aggregate_usage_conservation():
    """used cost + remaining cost == total cost while within allocation"""
    items = [_item("A1", unit_price="19.99", quantity=7)]
    sessions = [_session(1, [ProductUsage("A1", 3)])]

    usage = aggregate_usage(items, sessions).items_with_usage[0]

    assert usage.used_cost + usage.remaining_cost == pytest.approx(usage.total_cost)


@pytest.mark.parametrize(
    "rate,expected",
    [
        (0.0, "warning"),
        (0.29, "warning"),
        (0.30, "normal"),
        (0.60, "normal"),
        (0.75, "normal"),
        (0.76, "warning"),
        (0.90, "warning"),
        (0.91, "critical"),
        (1.40, "critical"),
    ],
)
def test_classify_utilization_thresholds(rate, expected):
    assert classify_utilization(rate, BudgetPolicy()) == expected


def test_classify_utilization_custom_policy():
    policy = BudgetPolicy(critical_threshold=0.5, warning_high_threshold=0.4, warning_low_threshold=0.1)

    assert classify_utilization(0.45, policy) == "warning"
    assert classify_utilization(0.55, policy) == "critical"
    assert classify_utilization(0.2, policy) == "normal"

"""Usage aggregation - maps completed session product usage onto budget items"""

import logging
from datetime import date
from typing import Dict, List, Optional
from budget_gateway.domain.models import (
    BudgetItem,
    BudgetPolicy,
    ItemUsage,
    SessionRecord,
    SpendingEvent,
    UsageResult,
)
from budget_gateway.utils.numbers import coerce_number, parse_number

COMPLETED_STATUS = "completed"


def classify_utilization(utilization_rate: float, policy: BudgetPolicy) -> str:
    """
    Tag an item by how much of its allocation has been consumed.

    - above critical threshold (0.90): critical
    - above warning_high (0.75) or below warning_low (0.30): warning
    - otherwise: normal
    """
    if utilization_rate > policy.critical_threshold:
        return "critical"
    if utilization_rate > policy.warning_high_threshold or utilization_rate < policy.warning_low_threshold:
        return "warning"
    return "normal"


def _event_sort_key(event: SpendingEvent) -> tuple:
    # Undated events sort after every dated one
    return (event.date is None, event.date or date.min)


def aggregate_usage(
    budget_items: List[BudgetItem],
    sessions: List[SessionRecord],
    policy: Optional[BudgetPolicy] = None,
) -> UsageResult:
    """
    Derive per-item consumption and spending events from session records.

    Requirements:
    - Only completed sessions count; other statuses are skipped silently
    - Product codes match item codes exactly (case-sensitive)
    - Unknown codes are logged and reported, never raised
    - One spending event per matched product entry, returned chronologically
    """
    policy = policy or BudgetPolicy()

    items_by_code: Dict[str, BudgetItem] = {}
    for item in budget_items:
        items_by_code.setdefault(item.item_code, item)

    used_by_code: Dict[str, float] = {code: 0.0 for code in items_by_code}
    events: List[SpendingEvent] = []
    unmatched: List[str] = []

    for session in sessions:
        if session.status != COMPLETED_STATUS:
            continue

        for product in session.products or []:
            budget_item = items_by_code.get(product.item_code)
            if budget_item is None:
                unmatched.append(product.item_code)
                logging.warning(
                    "Product usage references unknown budget item",
                    extra={
                        "step": "data_quality",
                        "reason": "unmatched_item_code",
                        "session_id": session.id,
                        "item_code": product.item_code,
                    },
                )
                continue

            quantity = coerce_number(product.quantity, "product.quantity")
            if quantity < 0:
                logging.warning(
                    "Negative product quantity treated as 0",
                    extra={
                        "step": "data_quality",
                        "reason": "negative_quantity",
                        "session_id": session.id,
                        "item_code": product.item_code,
                    },
                )
                quantity = 0.0
            used_by_code[budget_item.item_code] += quantity

            # Price recorded on the session wins over the plan's unit price
            unit_price = parse_number(product.unit_price, "product.unit_price")
            if unit_price is None:
                unit_price = coerce_number(budget_item.unit_price, "item.unit_price")

            if session.session_date is None:
                logging.warning(
                    "Completed session has no date; its spending is undated",
                    extra={"step": "data_quality", "reason": "missing_session_date", "session_id": session.id},
                )

            events.append(
                SpendingEvent(
                    date=session.session_date,
                    amount=unit_price * quantity,
                    description=(
                        f"Session with {session.therapist_name}"
                        if session.therapist_name
                        else f"Session #{session.id}"
                    ),
                    item_code=budget_item.item_code,
                    item_name=product.description or budget_item.description or budget_item.item_code,
                )
            )

    items_with_usage = []
    for item in budget_items:
        unit_price = coerce_number(item.unit_price, "item.unit_price")
        quantity = coerce_number(item.quantity, "item.quantity")
        used = used_by_code.get(item.item_code, 0.0)

        # Not clamped: a rate above 1.0 signals over-utilization
        utilization_rate = used / quantity if quantity > 0 else 0.0

        items_with_usage.append(
            ItemUsage(
                item=item,
                unit_price=unit_price,
                quantity=quantity,
                used_quantity=used,
                remaining_quantity=max(0.0, quantity - used),
                utilization_rate=utilization_rate,
                status=classify_utilization(utilization_rate, policy),
            )
        )

    return UsageResult(
        items_with_usage=items_with_usage,
        spending_events=sorted(events, key=_event_sort_key),
        unmatched_codes=unmatched,
    )

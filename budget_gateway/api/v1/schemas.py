"""Pydantic schemas for API request/response validation"""

from pydantic import BaseModel, Field
import datetime
from datetime import date
from typing import List, Optional

from budget_gateway.domain.models import BudgetSummary, DailyPoint, ItemUsage, SpendingEvent
from budget_gateway.infrastructure.clients.payloads import (
    BudgetItemPayload,
    BudgetSettingsPayload,
    SessionPayload,
)


class CalculateRequest(BaseModel):
    """Request body for POST /v1/budget-summary/calculate"""

    items: List[BudgetItemPayload] = Field(default_factory=list)
    settings: Optional[BudgetSettingsPayload] = Field(None, description="Active plan; null means no active plan")
    sessions: List[SessionPayload] = Field(default_factory=list)
    today: Optional[date] = Field(None, description="Evaluation date, defaults to the current date")


class BudgetItemUsageSchema(BaseModel):
    """Budget item annotated with usage"""

    id: int
    item_code: str
    description: str
    category: Optional[str] = None
    unit_price: float
    quantity: float
    used_quantity: float
    remaining_quantity: float
    utilization_rate: float
    status: str
    total_cost: float
    used_cost: float

    @classmethod
    def from_domain(cls, usage: ItemUsage) -> "BudgetItemUsageSchema":
        return cls(
            id=usage.item.id,
            item_code=usage.item.item_code,
            description=usage.item.description,
            category=usage.item.category,
            unit_price=usage.unit_price,
            quantity=usage.quantity,
            used_quantity=usage.used_quantity,
            remaining_quantity=usage.remaining_quantity,
            utilization_rate=usage.utilization_rate,
            status=usage.status,
            total_cost=usage.total_cost,
            used_cost=usage.used_cost,
        )


class SpendingEventSchema(BaseModel):
    """Single spending event"""

    date: Optional[datetime.date] = None
    amount: float
    description: str
    item_code: str
    item_name: str

    @classmethod
    def from_domain(cls, event: SpendingEvent) -> "SpendingEventSchema":
        return cls(
            date=event.date,
            amount=event.amount,
            description=event.description,
            item_code=event.item_code,
            item_name=event.item_name,
        )


class DailyPointSchema(BaseModel):
    """One day of the spending chart"""

    date: datetime.date
    month: str
    actual_spending: float
    target_spending: float
    cumulative_actual: float
    cumulative_target: float
    projected_spending: Optional[float] = None
    cumulative_projected: Optional[float] = None
    is_projected: bool

    @classmethod
    def from_domain(cls, point: DailyPoint) -> "DailyPointSchema":
        return cls(
            date=point.date,
            month=point.month,
            actual_spending=point.actual_spending,
            target_spending=point.target_spending,
            cumulative_actual=point.cumulative_actual,
            cumulative_target=point.cumulative_target,
            projected_spending=point.projected_spending,
            cumulative_projected=point.cumulative_projected,
            is_projected=point.is_projected,
        )


class BudgetSummarySchema(BaseModel):
    """Complete budget utilization summary"""

    total_budget: float
    used_budget: float
    remaining_budget: float
    utilization_percentage: float
    start_date: date
    end_date: date
    total_days: int
    days_elapsed: int
    remaining_days: int
    plan_period_name: str
    daily_budget: float
    daily_spend_rate: float
    spending_rate_status: str
    health_status: str
    projected_end_date: Optional[date] = None
    projected_overspend: Optional[float] = None
    projected_remaining_budget: float
    budget_items: List[BudgetItemUsageSchema]
    spending_events: List[SpendingEventSchema]
    daily_spending: List[DailyPointSchema]
    unmatched_item_codes: List[str]

    @classmethod
    def from_domain(cls, summary: BudgetSummary) -> "BudgetSummarySchema":
        scalars = summary.scalars
        return cls(
            total_budget=scalars.total_budget,
            used_budget=scalars.used_budget,
            remaining_budget=scalars.remaining_budget,
            utilization_percentage=scalars.utilization_percentage,
            start_date=scalars.start_date,
            end_date=scalars.end_date,
            total_days=scalars.total_days,
            days_elapsed=scalars.days_elapsed,
            remaining_days=scalars.remaining_days,
            plan_period_name=scalars.plan_period_name,
            daily_budget=scalars.daily_budget,
            daily_spend_rate=scalars.daily_spend_rate,
            spending_rate_status=scalars.spending_rate_status,
            health_status=scalars.health_status,
            projected_end_date=scalars.projected_end_date,
            projected_overspend=scalars.projected_overspend,
            projected_remaining_budget=summary.projected_remaining_budget,
            budget_items=[BudgetItemUsageSchema.from_domain(u) for u in summary.items],
            spending_events=[SpendingEventSchema.from_domain(e) for e in summary.spending_events],
            daily_spending=[DailyPointSchema.from_domain(p) for p in summary.daily_spending],
            unmatched_item_codes=summary.unmatched_codes,
        )


class BudgetSummaryEnvelope(BaseModel):
    """Response for budget summary endpoints"""

    client_id: Optional[int] = None
    has_active_plan: bool
    summary: Optional[BudgetSummarySchema] = None


class SnapshotItem(BaseModel):
    """Single stored summary in history"""

    snapshot_id: str
    evaluated_on: date
    total_budget: float
    used_budget: float
    remaining_budget: float
    utilization_percentage: float
    projected_end_date: Optional[date] = None
    projected_overspend: Optional[float] = None
    health_status: str
    created_at: str


class SnapshotHistoryResponse(BaseModel):
    """Response for GET /v1/clients/{client_id}/budget-summary/history"""

    client_id: int
    snapshots: List[SnapshotItem]

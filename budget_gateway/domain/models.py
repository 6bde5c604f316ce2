"""Domain models - pure Python dataclasses representing budget entities"""

from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional, Union

# Raw numeric values arrive as strings from the records API ("125.50")
RawNumber = Union[int, float, str, None]


@dataclass
class BudgetItem:
    """One allocated line in a client's funding plan"""

    id: int
    client_id: int
    item_code: str
    description: str
    unit_price: RawNumber
    quantity: RawNumber
    category: Optional[str] = None
    name: Optional[str] = None


@dataclass
class BudgetSettings:
    """Date-bounded funding envelope for one client"""

    id: int
    client_id: int
    start_date: Optional[date]
    end_date: Optional[date]
    total_funds: Optional[float] = None
    is_active: bool = True
    plan_name: Optional[str] = None
    plan_serial_number: Optional[str] = None
    created_at: Optional[date] = None


@dataclass
class ProductUsage:
    """Budget item consumption recorded against a session"""

    item_code: str
    quantity: RawNumber
    unit_price: RawNumber = None
    description: Optional[str] = None


@dataclass
class SessionRecord:
    """Therapy session with the products it used"""

    id: int
    status: str
    session_date: Optional[date]
    products: Optional[List[ProductUsage]] = None
    therapist_name: Optional[str] = None


@dataclass
class BudgetPolicy:
    """Thresholds and fallbacks for budget calculations"""

    critical_threshold: float = 0.90
    warning_high_threshold: float = 0.75
    warning_low_threshold: float = 0.30
    default_plan_days: int = 180
    default_plan_months: int = 6
    depletion_cap_days: int = 365


@dataclass
class ItemUsage:
    """Budget item annotated with consumption derived from sessions"""

    item: BudgetItem
    unit_price: float
    quantity: float
    used_quantity: float
    remaining_quantity: float
    utilization_rate: float
    status: str  # "normal", "warning" or "critical"

    @property
    def total_cost(self) -> float:
        return self.unit_price * self.quantity

    @property
    def used_cost(self) -> float:
        return self.unit_price * self.used_quantity

    @property
    def remaining_cost(self) -> float:
        return self.unit_price * self.remaining_quantity


@dataclass
class SpendingEvent:
    """One session's consumption of one budget item"""

    date: Optional[date]
    amount: float
    description: str
    item_code: str
    item_name: str


@dataclass
class UsageResult:
    """Output of usage aggregation"""

    items_with_usage: List[ItemUsage]
    spending_events: List[SpendingEvent]
    unmatched_codes: List[str] = field(default_factory=list)


@dataclass
class BudgetSummaryScalars:
    """Scalar facts of a budget plan at an evaluation date"""

    total_budget: float
    used_budget: float
    remaining_budget: float
    utilization_percentage: float
    start_date: date
    end_date: date
    total_days: int
    days_elapsed: int
    remaining_days: int
    daily_budget: float
    daily_spend_rate: float
    projected_end_date: Optional[date]
    projected_overspend: Optional[float]
    plan_period_name: str
    spending_rate_status: str
    health_status: str


@dataclass
class DailyPoint:
    """Actual vs target vs projected spending for one calendar day"""

    date: date
    month: str
    actual_spending: float
    target_spending: float
    cumulative_actual: float
    cumulative_target: float
    projected_spending: Optional[float]
    cumulative_projected: Optional[float]
    is_projected: bool


@dataclass
class BudgetSummary:
    """Complete budget utilization picture for one client"""

    scalars: BudgetSummaryScalars
    items: List[ItemUsage]
    spending_events: List[SpendingEvent]
    daily_spending: List[DailyPoint]
    projected_remaining_budget: float
    unmatched_codes: List[str] = field(default_factory=list)

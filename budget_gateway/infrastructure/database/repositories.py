"""Data access layer for budget snapshots"""

from datetime import date
from typing import List
from sqlalchemy.orm import Session
from budget_gateway.infrastructure.database.models import BudgetSnapshot
from budget_gateway.domain.models import BudgetSummary


class SnapshotRepository:
    """Repository for budget summary snapshots"""

    def __init__(self, db: Session):
        self.db = db

    def create_snapshot(self, client_id: int, evaluated_on: date, summary: BudgetSummary) -> BudgetSnapshot:
        """Persist the headline figures of a computed summary"""
        scalars = summary.scalars
        db_snapshot = BudgetSnapshot(
            client_id=client_id,
            evaluated_on=evaluated_on,
            plan_start_date=scalars.start_date,
            plan_end_date=scalars.end_date,
            total_budget=scalars.total_budget,
            used_budget=scalars.used_budget,
            remaining_budget=scalars.remaining_budget,
            utilization_percentage=scalars.utilization_percentage,
            days_elapsed=scalars.days_elapsed,
            projected_end_date=scalars.projected_end_date,
            projected_overspend=scalars.projected_overspend,
            health_status=scalars.health_status,
            item_statuses={usage.item.item_code: usage.status for usage in summary.items},
        )
        self.db.add(db_snapshot)
        self.db.flush()  # Get ID without committing
        return db_snapshot

    def get_snapshots_by_client(self, client_id: int, limit: int = 20) -> List[BudgetSnapshot]:
        """Fetch recent snapshots for a client, newest first"""
        return (
            self.db.query(BudgetSnapshot)
            .filter(BudgetSnapshot.client_id == client_id)
            .order_by(BudgetSnapshot.created_at.desc(), BudgetSnapshot.evaluated_on.desc())
            .limit(limit)
            .all()
        )

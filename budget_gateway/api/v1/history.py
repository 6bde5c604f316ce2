"""GET /v1/clients/{client_id}/budget-summary/history - Stored summary snapshots"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from budget_gateway.api.v1.schemas import SnapshotHistoryResponse, SnapshotItem
from budget_gateway.infrastructure.database.session import get_db
from budget_gateway.infrastructure.database.repositories import SnapshotRepository

router = APIRouter()


@router.get("/clients/{client_id}/budget-summary/history", response_model=SnapshotHistoryResponse)
def get_summary_history(
    client_id: int,
    limit: int = Query(20, ge=1, le=100, description="Maximum snapshots to return"),
    db: Session = Depends(get_db),
):
    """
    Retrieve recent budget summary snapshots for a client.

    Returns:
        Snapshots newest first, with totals, utilization and projections
    """
    snapshots = SnapshotRepository(db).get_snapshots_by_client(client_id, limit=limit)

    return SnapshotHistoryResponse(
        client_id=client_id,
        snapshots=[
            SnapshotItem(
                snapshot_id=str(s.id),
                evaluated_on=s.evaluated_on,
                total_budget=s.total_budget,
                used_budget=s.used_budget,
                remaining_budget=s.remaining_budget,
                utilization_percentage=s.utilization_percentage,
                projected_end_date=s.projected_end_date,
                projected_overspend=s.projected_overspend,
                health_status=s.health_status,
                created_at=s.created_at.isoformat(),
            )
            for s in snapshots
        ],
    )

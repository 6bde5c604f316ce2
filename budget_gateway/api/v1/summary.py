"""Budget summary endpoints - utilization, pace and projections for a client's plan"""

import time
import logging
from datetime import date
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.orm import Session

from budget_gateway.api.v1.schemas import BudgetSummaryEnvelope, BudgetSummarySchema, CalculateRequest
from budget_gateway.api.dependencies import get_budget_policy, get_records_client, get_request_id
from budget_gateway.infrastructure.database.session import get_db
from budget_gateway.infrastructure.database.repositories import SnapshotRepository
from budget_gateway.infrastructure.clients.records import ClinicRecordsClient
from budget_gateway.domain.engine import build_budget_summary
from budget_gateway.domain.exceptions import InvalidRecordDataError, MissingPlanError, RecordsAPIError
from budget_gateway.domain.models import BudgetPolicy
from budget_gateway.infrastructure.observability.metrics import record_summary, records_fetch_failures_counter
from budget_gateway.infrastructure.observability.logging import log_summary

router = APIRouter()


@router.get("/clients/{client_id}/budget-summary", response_model=BudgetSummaryEnvelope)
async def get_budget_summary(
    client_id: int,
    request: Request,
    today: Optional[date] = Query(None, description="Evaluation date, defaults to the current date"),
    db: Session = Depends(get_db),
    records_client: ClinicRecordsClient = Depends(get_records_client),
    policy: BudgetPolicy = Depends(get_budget_policy),
):
    """
    Compute the budget utilization summary of a client's active plan.

    Flow:
    1. Fetch budget items, active plan and sessions from the records API
    2. Aggregate usage, summarize the plan and build the daily series
    3. Persist a snapshot of the headline figures
    4. Return the summary (null when the client has no active plan)
    """
    start_time = time.time()
    request_id = get_request_id(request)
    today = today or date.today()

    try:
        # 1. Fetch records
        items, settings, sessions = await records_client.fetch_client_records(client_id)
        if settings is None:
            raise MissingPlanError(f"Client {client_id} has no active budget plan")

        # 2. Run the budget engine
        summary = build_budget_summary(items, settings, sessions, today, policy)

        # 3. Persist snapshot
        SnapshotRepository(db).create_snapshot(client_id, today, summary)
        db.commit()

    except MissingPlanError as e:
        logging.info(str(e), extra={"request_id": request_id, "client_id": client_id})
        record_summary(None)
        log_summary(request_id, client_id, False, None, 0, (time.time() - start_time) * 1000)
        return BudgetSummaryEnvelope(client_id=client_id, has_active_plan=False, summary=None)

    except RecordsAPIError as e:
        records_fetch_failures_counter.inc()
        db.rollback()
        logging.error(f"Records API error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=503, detail="Clinic records service unavailable")

    except InvalidRecordDataError as e:
        db.rollback()
        logging.error(f"Invalid record data: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=502, detail=str(e))

    except Exception as e:
        db.rollback()
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")

    # Record metrics and logs
    duration_ms = (time.time() - start_time) * 1000
    record_summary(summary)
    log_summary(
        request_id,
        client_id,
        True,
        summary.scalars.utilization_percentage,
        len(summary.unmatched_codes),
        duration_ms,
    )

    return BudgetSummaryEnvelope(
        client_id=client_id,
        has_active_plan=True,
        summary=BudgetSummarySchema.from_domain(summary),
    )


@router.post("/budget-summary/calculate", response_model=BudgetSummaryEnvelope)
def calculate_budget_summary(
    request_body: CalculateRequest,
    policy: BudgetPolicy = Depends(get_budget_policy),
):
    """
    Compute a budget summary from records supplied in the request body.

    No records API calls and nothing persisted; a null settings object
    yields a null summary.
    """
    settings = request_body.settings.to_domain() if request_body.settings else None
    summary = build_budget_summary(
        [item.to_domain() for item in request_body.items],
        settings,
        [session.to_domain() for session in request_body.sessions],
        request_body.today or date.today(),
        policy,
    )
    record_summary(summary)

    return BudgetSummaryEnvelope(
        client_id=settings.client_id if settings else None,
        has_active_plan=summary is not None,
        summary=BudgetSummarySchema.from_domain(summary) if summary else None,
    )

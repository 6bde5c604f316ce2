"""Clinic records API HTTP client for budget items, plan settings and sessions"""

import asyncio
import httpx
from typing import Any, List, Optional, Tuple
from pydantic import ValidationError
from budget_gateway.domain.models import BudgetItem, BudgetSettings, SessionRecord
from budget_gateway.domain.exceptions import RecordsAPIError, InvalidRecordDataError
from budget_gateway.infrastructure.clients.payloads import (
    BudgetItemPayload,
    BudgetSettingsPayload,
    SessionPayload,
)
from budget_gateway.config import settings


class ClinicRecordsClient:
    """Client for the clinic records API (the system of record for plans and sessions)"""

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url or settings.records_api_base
        self.timeout = timeout or settings.http_timeout_seconds
        self.transport = transport

    async def _get(self, path: str, allow_missing: bool = False) -> Any:
        """
        GET a records endpoint and return decoded JSON.

        Raises:
            RecordsAPIError: On timeout, network or HTTP errors
        """
        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            try:
                response = await client.get(f"{self.base_url}{path}")
                if allow_missing and response.status_code == 404:
                    return None
                response.raise_for_status()
                return response.json()

            except httpx.TimeoutException as e:
                raise RecordsAPIError(f"Records API timeout after {self.timeout}s") from e
            except httpx.HTTPStatusError as e:
                raise RecordsAPIError(f"Records API error: {e.response.status_code}") from e
            except httpx.RequestError as e:
                raise RecordsAPIError(f"Records API unreachable: {e}") from e
            except ValueError as e:
                raise InvalidRecordDataError(f"Records API returned invalid JSON: {e}") from e

    async def fetch_budget_items(self, client_id: int) -> List[BudgetItem]:
        """Fetch the budget items of a client's plan"""
        data = await self._get(f"/clients/{client_id}/budget-items")
        try:
            return [BudgetItemPayload.model_validate(item).to_domain() for item in data or []]
        except (ValidationError, TypeError) as e:
            raise InvalidRecordDataError(f"Invalid budget item data: {e}") from e

    async def fetch_budget_settings(self, client_id: int) -> Optional[BudgetSettings]:
        """
        Fetch the active budget plan of a client.

        Returns None when the client has no plan (404 or no active entry).

        Raises:
            InvalidRecordDataError: If more than one plan is marked active
        """
        data = await self._get(f"/clients/{client_id}/budget-settings", allow_missing=True)
        if not data:
            return None

        try:
            if isinstance(data, list):
                plans = [BudgetSettingsPayload.model_validate(plan).to_domain() for plan in data]
            else:
                plans = [BudgetSettingsPayload.model_validate(data).to_domain()]
        except (ValidationError, TypeError) as e:
            raise InvalidRecordDataError(f"Invalid budget settings data: {e}") from e

        active = [plan for plan in plans if plan.is_active]
        if len(active) > 1:
            raise InvalidRecordDataError(f"Client {client_id} has {len(active)} active budget plans")

        return active[0] if active else None

    async def fetch_sessions(self, client_id: int) -> List[SessionRecord]:
        """Fetch sessions with their product usage"""
        data = await self._get(f"/clients/{client_id}/sessions")
        try:
            return [SessionPayload.model_validate(session).to_domain() for session in data or []]
        except (ValidationError, TypeError) as e:
            raise InvalidRecordDataError(f"Invalid session data: {e}") from e

    async def fetch_client_records(
        self, client_id: int
    ) -> Tuple[List[BudgetItem], Optional[BudgetSettings], List[SessionRecord]]:
        """Fetch items, active plan and sessions concurrently"""
        return await asyncio.gather(
            self.fetch_budget_items(client_id),
            self.fetch_budget_settings(client_id),
            self.fetch_sessions(client_id),
        )

"""Dependency injection for FastAPI endpoints"""

from fastapi import Request
from budget_gateway.config import settings
from budget_gateway.domain.models import BudgetPolicy
from budget_gateway.infrastructure.clients.records import ClinicRecordsClient


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_records_client() -> ClinicRecordsClient:
    """Provide clinic records API client instance"""
    return ClinicRecordsClient()


def get_budget_policy() -> BudgetPolicy:
    """Provide the budget engine policy built from configuration"""
    return settings.budget_policy()

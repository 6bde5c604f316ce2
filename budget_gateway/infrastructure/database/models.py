"""SQLAlchemy ORM models for budget summary snapshots"""

import uuid
from sqlalchemy import Column, BigInteger, Float, DateTime, Date, Integer, Text, JSON, Uuid
from sqlalchemy.orm import declarative_base
from sqlalchemy.sql import func

Base = declarative_base()


class BudgetSnapshot(Base):
    """Budget summary served to a caller, kept for trend history"""

    __tablename__ = "budget_snapshot"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    client_id = Column(BigInteger, nullable=False, index=True)
    evaluated_on = Column(Date, nullable=False)
    plan_start_date = Column(Date, nullable=False)
    plan_end_date = Column(Date, nullable=False)
    total_budget = Column(Float, nullable=False)
    used_budget = Column(Float, nullable=False)
    remaining_budget = Column(Float, nullable=False)
    utilization_percentage = Column(Float, nullable=False)
    days_elapsed = Column(Integer, nullable=False)
    projected_end_date = Column(Date, nullable=True)
    projected_overspend = Column(Float, nullable=True)
    health_status = Column(Text, nullable=False)
    item_statuses = Column(JSON, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

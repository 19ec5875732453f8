"""SQLAlchemy ORM models for persisted calculations"""

import uuid

from sqlalchemy import Column, DateTime, Float, Integer, Text
from sqlalchemy.orm import declarative_base
from sqlalchemy.sql import func

Base = declarative_base()


def _new_id() -> str:
    return uuid.uuid4().hex


class CalculationRecord(Base):
    """One EMI calculation. id is the client request id when one was supplied."""

    __tablename__ = "calculations"

    id = Column(Text, primary_key=True, default=_new_id)
    principal = Column(Float, nullable=False)
    monthly_rate = Column(Float, nullable=False)
    months = Column(Integer, nullable=False)
    monthly_payment = Column(Float, nullable=False)
    formatted_monthly_payment = Column(Text, nullable=False)
    currency = Column(Text, nullable=False)
    version = Column(Text, nullable=False, default="emi-v1")
    user_id = Column(Text, nullable=True, index=True)
    client_request_id = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

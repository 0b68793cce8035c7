"""
Named counters for human-readable document numbers.
"""
from sqlalchemy import Column, String, Integer, DateTime, func

from src.db.base import Base


class Sequence(Base):
    """One row per counter (order_number, bill_number)."""
    __tablename__ = "sequences"

    name = Column(String(50), primary_key=True)
    current_value = Column(Integer, nullable=False, default=0)
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

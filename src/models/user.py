"""
Till operators.
"""
from sqlalchemy import Column, String, Integer, Boolean, DateTime, func, CheckConstraint

from src.db.base import Base


ROLES = ("admin", "manager", "cashier")


class User(Base):
    """A person who logs in to the till."""
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(100), unique=True, nullable=False, index=True)
    hashed_password = Column(String(255), nullable=False)
    full_name = Column(String(255), nullable=False)
    role = Column(String(20), nullable=False, default="cashier")
    is_active = Column(Boolean, default=True, nullable=False)
    last_login = Column(DateTime, nullable=True)
    created_at = Column(DateTime, server_default=func.now())

    __table_args__ = (
        CheckConstraint("role IN ('admin', 'manager', 'cashier')", name="ck_users_role"),
    )

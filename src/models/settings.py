"""
Restaurant settings and the operator activity log.
"""
from sqlalchemy import Column, String, Text, Integer, DateTime, ForeignKey, func, Index
from sqlalchemy.orm import relationship

from src.db.base import Base


class RestaurantSetting(Base):
    """Key/value configuration printed on bills: name, address, tax rate, ..."""
    __tablename__ = "settings"

    key = Column(String(100), primary_key=True)
    value = Column(Text, nullable=False)
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())


class UserActivity(Base):
    """
    Append-only record of who did what at the till.

    Rows outlive the operator: deleting a user nulls user_id.
    """
    __tablename__ = "user_activity_log"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    action = Column(String(50), nullable=False)  # login, logout, create_user, update_user, delete_user
    details = Column(Text)
    created_at = Column(DateTime, server_default=func.now())

    user = relationship("User")

    __table_args__ = (
        Index('idx_user_activity_user', 'user_id'),
        Index('idx_user_activity_date', 'created_at'),
    )

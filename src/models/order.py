"""
Order and OrderItem models for sales rung up at the till.
"""
import enum

from sqlalchemy import Column, String, Text, Integer, Numeric, DateTime, ForeignKey, func, Index
from sqlalchemy.orm import relationship

from src.db.base import Base


class OrderType(str, enum.Enum):
    DINE_IN = "dine-in"
    DINE_IN_BILLING = "dine-in-billing"
    TAKE_AWAY = "take-away"
    HOME_DELIVERY = "home-delivery"
    EXPRESS_BILLING = "express-billing"


# Status is a free-form label; only this value has stock side effects.
STATUS_PENDING = "pending"
STATUS_COMPLETED = "completed"


class Order(Base):
    """A customer order / bill."""
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True, autoincrement=True)
    order_number = Column(String(30), unique=True, nullable=False)  # OD-001
    bill_number = Column(String(30), nullable=True)  # INV-0001
    order_type = Column(String(30), nullable=False, default=OrderType.DINE_IN.value)
    customer_name = Column(String(255))
    contact_no = Column(String(50))
    payment_mode = Column(String(30), default="Cash")
    subtotal = Column(Numeric(10, 2), default=0)
    tax = Column(Numeric(10, 2), default=0)
    total = Column(Numeric(10, 2), default=0)
    status = Column(String(30), nullable=False, default=STATUS_PENDING)
    notes = Column(Text)  # "Table: 4" or "Address: ..." for delivery
    created_by = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    items = relationship(
        "OrderItem",
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="OrderItem.id",
    )

    __table_args__ = (
        Index('idx_orders_status', 'status'),
        Index('idx_orders_created', 'created_at'),
    )


class OrderItem(Base):
    """
    A line within an order.

    item_name and rate are copied from the menu item when the order is
    rung up, so reprinted bills never change when the catalog does.
    """
    __tablename__ = "order_items"

    id = Column(Integer, primary_key=True, autoincrement=True)
    order_id = Column(Integer, ForeignKey("orders.id", ondelete="CASCADE"), nullable=False)
    menu_item_id = Column(Integer, nullable=False)  # No FK: lines outlive catalog deletes
    item_name = Column(String(255), nullable=False)
    quantity = Column(Integer, nullable=False, default=1)
    rate = Column(Numeric(10, 2), nullable=False)
    notes = Column(Text)
    created_at = Column(DateTime, server_default=func.now())

    order = relationship("Order", back_populates="items")

    __table_args__ = (
        Index('idx_order_items_order', 'order_id'),
    )

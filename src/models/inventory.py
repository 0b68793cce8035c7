"""
Inventory tracking models.
"""
import enum

from sqlalchemy import Column, String, Text, Integer, Boolean, DateTime, ForeignKey, false, func, Index
from sqlalchemy.orm import relationship

from src.db.base import Base


class MovementType(str, enum.Enum):
    """Kinds of stock movement recorded in the ledger."""
    PURCHASE = "purchase"      # goods received, adds
    SALE = "sale"              # completed order line, subtracts
    ADJUSTMENT = "adjustment"  # relative correction, adds
    WASTE = "waste"            # spoiled or dropped, subtracts

    @classmethod
    def additive(cls) -> set["MovementType"]:
        return {cls.PURCHASE, cls.ADJUSTMENT}

    @classmethod
    def subtractive(cls) -> set["MovementType"]:
        return {cls.SALE, cls.WASTE}


class StockMovement(Base):
    """
    Append-only audit trail for stock changes.

    previous_stock/new_stock snapshot the counter around each change so the
    stock timeline can be rebuilt without looking at the current value.
    An `adjustment` with is_absolute set records a stock count that
    overwrote the counter; quantity is then the size of the correction.
    """
    __tablename__ = "stock_movements"

    id = Column(Integer, primary_key=True, autoincrement=True)
    menu_item_id = Column(Integer, ForeignKey("menu_items.id"), nullable=False)
    movement_type = Column(String(20), nullable=False)  # purchase, sale, adjustment, waste
    is_absolute = Column(Boolean, nullable=False, default=False, server_default=false())
    quantity = Column(Integer, nullable=False)  # Magnitude, never negative
    previous_stock = Column(Integer, nullable=False)
    new_stock = Column(Integer, nullable=False)
    reference_id = Column(String(50))  # Order number for sales
    notes = Column(Text)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime, server_default=func.now())

    menu_item = relationship("MenuItem", back_populates="movements")
    user = relationship("User")

    __table_args__ = (
        Index('idx_stock_movements_item', 'menu_item_id'),
        Index('idx_stock_movements_date', 'created_at'),
    )

"""
Menu-related models: categories and menu items with their stock counters.
"""
from sqlalchemy import Column, String, Text, Integer, Boolean, Numeric, DateTime, ForeignKey, func, Index
from sqlalchemy.orm import relationship

from src.db.base import Base


class Category(Base):
    """Category grouping for menu items (shawarma, burgers, drinks, etc.)."""
    __tablename__ = "categories"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), nullable=False, unique=True)
    display_order = Column(Integer, default=0)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, server_default=func.now())

    menu_items = relationship("MenuItem", back_populates="category", cascade="all, delete-orphan")


class MenuItem(Base):
    """
    A dish or product sold by the restaurant.

    Carries its own stock counter. Only the inventory ledger writes
    `stock_quantity`, and every write is paired with a StockMovement row.
    """
    __tablename__ = "menu_items"

    id = Column(Integer, primary_key=True, autoincrement=True)
    category_id = Column(Integer, ForeignKey("categories.id", ondelete="CASCADE"), nullable=False)
    name = Column(String(255), nullable=False)
    code = Column(String(20), unique=True, nullable=True)  # Short code typed at the till
    price = Column(Numeric(10, 2), nullable=False, default=0)
    description = Column(Text)
    is_available = Column(Boolean, default=True, nullable=False)
    display_order = Column(Integer, default=0)

    # Inventory
    track_stock = Column(Boolean, default=True, nullable=False)
    stock_quantity = Column(Integer, default=0, nullable=False)
    low_stock_threshold = Column(Integer, default=10, nullable=False)

    created_at = Column(DateTime, server_default=func.now())

    category = relationship("Category", back_populates="menu_items")
    # History rows block deletes at the database level; the ORM never nulls them
    movements = relationship("StockMovement", back_populates="menu_item", passive_deletes="all")

    __table_args__ = (
        Index('idx_menu_items_category', 'category_id'),
    )

    @property
    def category_name(self):
        return self.category.name if self.category else None

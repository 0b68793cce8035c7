"""
SQLAlchemy models for the restaurant POS.
"""
# Operators
from src.models.user import User

# Menu
from src.models.menu import Category, MenuItem

# Orders
from src.models.order import Order, OrderItem, OrderType

# Inventory
from src.models.inventory import StockMovement, MovementType

# Document numbering
from src.models.sequence import Sequence

# Settings and audit
from src.models.settings import RestaurantSetting, UserActivity


__all__ = [
    # Operators
    "User",
    # Menu
    "Category",
    "MenuItem",
    # Orders
    "Order",
    "OrderItem",
    "OrderType",
    # Inventory
    "StockMovement",
    "MovementType",
    # Numbering
    "Sequence",
    # Settings and audit
    "RestaurantSetting",
    "UserActivity",
]

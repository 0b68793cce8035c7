"""
Catalog Pydantic schemas for API request/response models.
"""
from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class CategoryCreate(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    display_order: int = 0
    is_active: bool = True


class CategoryUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    display_order: Optional[int] = None
    is_active: Optional[bool] = None


class CategoryResponse(BaseModel):
    id: int
    name: str
    display_order: int
    is_active: bool
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class CategoryListResponse(BaseModel):
    categories: List[CategoryResponse]
    total: int


class MenuItemCreate(BaseModel):
    """Request model for adding a menu item."""
    category_id: int
    name: str = Field(min_length=1, max_length=255)
    code: Optional[str] = None
    price: Decimal = Decimal("0.00")
    description: Optional[str] = None
    display_order: int = 0
    track_stock: bool = True
    stock_quantity: int = Field(default=0, ge=0)
    low_stock_threshold: Optional[int] = Field(default=None, ge=0)


class MenuItemUpdate(BaseModel):
    """
    Request model for updating a menu item.

    Stock counts are not editable here; they move through the inventory
    endpoints so every change is logged.
    """
    category_id: Optional[int] = None
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    code: Optional[str] = None
    price: Optional[Decimal] = None
    description: Optional[str] = None
    is_available: Optional[bool] = None
    display_order: Optional[int] = None


class MenuItemResponse(BaseModel):
    """Response model for a single menu item."""
    id: int
    category_id: int
    category_name: Optional[str] = None
    name: str
    code: Optional[str] = None
    price: Decimal
    description: Optional[str] = None
    is_available: bool = True
    display_order: int = 0
    track_stock: bool = True
    stock_quantity: int = 0
    low_stock_threshold: int = 10
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class MenuItemListResponse(BaseModel):
    """Response model for list of menu items."""
    items: List[MenuItemResponse]
    total: int

"""
Inventory Pydantic schemas for API request/response models.
"""
from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, ConfigDict


class StockItemResponse(BaseModel):
    """A menu item as seen from the stock room."""
    id: int
    category_id: int
    category_name: Optional[str] = None
    name: str
    code: Optional[str] = None
    price: Decimal
    track_stock: bool
    stock_quantity: int
    low_stock_threshold: int

    model_config = ConfigDict(from_attributes=True)


class StockItemListResponse(BaseModel):
    items: List[StockItemResponse]
    total: int


class MovementCreate(BaseModel):
    """Relative stock change. Validated by the ledger, not here."""
    movement_type: str
    quantity: int
    notes: Optional[str] = None
    reference_id: Optional[str] = None


class StockSet(BaseModel):
    """Absolute stock count."""
    quantity: int
    notes: Optional[str] = None


class MovementResponse(BaseModel):
    success: bool = True
    item_id: int
    previous_stock: int
    new_stock: int


class StockSettingsUpdate(BaseModel):
    low_stock_threshold: Optional[int] = None
    track_stock: Optional[bool] = None


class HistoryEntryResponse(BaseModel):
    id: int
    menu_item_id: int
    movement_type: str
    is_absolute: bool = False
    quantity: int
    previous_stock: int
    new_stock: int
    reference_id: Optional[str] = None
    notes: Optional[str] = None
    user_id: Optional[int] = None
    username: Optional[str] = None
    user_name: Optional[str] = None
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class HistoryResponse(BaseModel):
    movements: List[HistoryEntryResponse]
    total: int

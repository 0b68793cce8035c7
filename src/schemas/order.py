"""
Order Pydantic schemas for API request/response models.

Quantities and the line list are deliberately unconstrained here:
OrderService validates them and answers with the POS error body.
"""
from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, ConfigDict

from src.models.order import OrderType


class OrderLineCreate(BaseModel):
    """One cart line as submitted by the till."""
    menu_item_id: int
    item_name: str
    quantity: int = 1
    rate: Decimal
    notes: Optional[str] = None


class OrderCreate(BaseModel):
    """Request model for ringing up an order."""
    order_type: OrderType = OrderType.DINE_IN
    customer_name: Optional[str] = None
    contact_no: Optional[str] = None
    payment_mode: str = "Cash"
    subtotal: Decimal = Decimal("0.00")
    tax: Decimal = Decimal("0.00")
    total: Decimal = Decimal("0.00")
    status: str = "pending"
    notes: Optional[str] = None
    # Explicit numbers override the generated ones (e.g. re-keying a paper bill)
    order_number: Optional[str] = None
    bill_number: Optional[str] = None
    items: List[OrderLineCreate] = []


class OrderCreatedResponse(BaseModel):
    success: bool = True
    id: int
    order_number: str
    bill_number: Optional[str]


class OrderStatusUpdate(BaseModel):
    status: str


class OrderStatusResponse(BaseModel):
    success: bool = True
    id: int
    previous_status: str
    status: str
    # None when the transition did not settle the order
    stock_deducted: Optional[bool] = None


class OrderItemResponse(BaseModel):
    id: int
    menu_item_id: int
    item_name: str
    quantity: int
    rate: Decimal
    notes: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class OrderResponse(BaseModel):
    id: int
    order_number: str
    bill_number: Optional[str] = None
    order_type: str
    customer_name: Optional[str] = None
    contact_no: Optional[str] = None
    payment_mode: Optional[str] = None
    subtotal: Decimal
    tax: Decimal
    total: Decimal
    status: str
    notes: Optional[str] = None
    created_by: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class OrderDetailResponse(OrderResponse):
    items: List[OrderItemResponse]


class OrderListResponse(BaseModel):
    orders: List[OrderResponse]
    total: int


class SalesSummary(BaseModel):
    total_orders: int
    total_sales: Decimal
    total_tax: Decimal
    total_subtotal: Decimal


class SalesReportResponse(BaseModel):
    orders: List[OrderResponse]
    summary: SalesSummary

"""
Orders router: ringing up orders, status changes and the sales report.
"""
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from src.core.deps import get_current_user
from src.db.session import get_db
from src.models.user import User
from src.schemas.order import (
    OrderCreate,
    OrderCreatedResponse,
    OrderDetailResponse,
    OrderListResponse,
    OrderResponse,
    OrderStatusResponse,
    OrderStatusUpdate,
    SalesReportResponse,
    SalesSummary,
)
from src.services.orders import OrderService

router = APIRouter(prefix="/orders", tags=["orders"])


@router.post("", response_model=OrderCreatedResponse, status_code=status.HTTP_201_CREATED)
def create_order(
    order: OrderCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """
    Ring up an order with its lines.

    Order and bill numbers are generated unless supplied.
    """
    created = OrderService(db).create_order(order, acting_user_id=current_user.id)
    return OrderCreatedResponse(
        id=created.id,
        order_number=created.order_number,
        bill_number=created.bill_number,
    )


@router.get("", response_model=OrderListResponse)
def list_orders(
    status_filter: Optional[str] = Query(None, alias="status", description="Filter by status"),
    order_type: Optional[str] = Query(None, description="Filter by order type"),
    date_from: Optional[date] = Query(None, description="Created on or after"),
    date_to: Optional[date] = Query(None, description="Created on or before"),
    limit: int = Query(100, ge=1, le=1000),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """List orders, newest first."""
    orders = OrderService(db).list_orders(
        status=status_filter,
        order_type=order_type,
        date_from=date_from,
        date_to=date_to,
        limit=limit,
    )
    return OrderListResponse(
        orders=[OrderResponse.model_validate(o) for o in orders],
        total=len(orders),
    )


@router.get("/reports/sales", response_model=SalesReportResponse)
def sales_report(
    date_from: Optional[date] = Query(None),
    date_to: Optional[date] = Query(None),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Completed orders in a date range with totals."""
    report = OrderService(db).sales_report(date_from=date_from, date_to=date_to)
    return SalesReportResponse(
        orders=[OrderResponse.model_validate(o) for o in report.orders],
        summary=SalesSummary(
            total_orders=report.total_orders,
            total_sales=report.total_sales,
            total_tax=report.total_tax,
            total_subtotal=report.total_subtotal,
        ),
    )


@router.get("/{order_id}", response_model=OrderDetailResponse)
def get_order(
    order_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Order with its lines, e.g. for reprinting a bill."""
    order = OrderService(db).get_order(order_id)
    return OrderDetailResponse.model_validate(order)


@router.patch("/{order_id}/status", response_model=OrderStatusResponse)
def update_order_status(
    order_id: int,
    update: OrderStatusUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """
    Change an order's status.

    Moving an order into `completed` deducts stock for its lines once;
    `stock_deducted` is false if any line could not be deducted.
    """
    change = OrderService(db).update_status(order_id, update.status, acting_user_id=current_user.id)
    return OrderStatusResponse(
        id=change.order_id,
        previous_status=change.previous_status,
        status=change.status,
        stock_deducted=change.stock_deducted,
    )

"""
Order store: ringing up orders and moving them through their statuses.
"""
import logging
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from decimal import Decimal
from typing import List, Optional

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from src.core.errors import NotFoundError, StorageError, ValidationError
from src.core.locks import order_locks, sequence_lock
from src.db.session import end_idle_transaction
from src.models.order import Order, OrderItem, STATUS_COMPLETED
from src.schemas.order import OrderCreate
from src.services.sequences import SequenceService
from src.services.settlement import SettlementCoordinator

logger = logging.getLogger(__name__)


@dataclass
class CreatedOrder:
    id: int
    order_number: str
    bill_number: Optional[str]


@dataclass
class StatusChange:
    order_id: int
    previous_status: str
    status: str
    stock_deducted: Optional[bool]


@dataclass
class SalesReport:
    orders: List[Order]
    total_orders: int
    total_sales: Decimal
    total_tax: Decimal
    total_subtotal: Decimal


class OrderService:
    """
    Service owning orders and their lines.

    Completing an order hands off to SettlementCoordinator in the same
    transaction as the status write.
    """

    def __init__(self, db: Session):
        self.db = db
        self.sequences = SequenceService(db)
        self.settlement = SettlementCoordinator(db)

    def create_order(self, data: OrderCreate, acting_user_id: Optional[int] = None) -> CreatedOrder:
        """
        Persist an order header and its lines as one unit.

        Order and bill numbers are drawn from the sequence counters unless
        the caller supplies them. The sequence lock is held until commit so
        two tills never draw numbers inside overlapping transactions.

        Raises:
            ValidationError: no lines, or a line quantity below 1
            StorageError: the write failed; nothing was saved
        """
        self._validate_lines(data)

        end_idle_transaction(self.db)
        with sequence_lock:
            order_id, order_number, bill_number = self._insert_order(data, acting_user_id)

        logger.info(f"Created order {order_number} ({len(data.items)} lines, bill {bill_number})")
        return CreatedOrder(id=order_id, order_number=order_number, bill_number=bill_number)

    def _insert_order(self, data: OrderCreate, acting_user_id: Optional[int]):
        try:
            order_number = data.order_number or self.sequences.next_order_number()
            bill_number = data.bill_number or self.sequences.next_bill_number()

            order = Order(
                order_number=order_number,
                bill_number=bill_number,
                order_type=data.order_type.value,
                customer_name=data.customer_name,
                contact_no=data.contact_no,
                payment_mode=data.payment_mode or "Cash",
                subtotal=data.subtotal,
                tax=data.tax,
                total=data.total,
                status=data.status or "pending",
                notes=data.notes,
                created_by=acting_user_id,
            )
            order.items = [
                OrderItem(
                    menu_item_id=line.menu_item_id,
                    item_name=line.item_name,
                    quantity=line.quantity,
                    rate=line.rate,
                    notes=line.notes,
                )
                for line in data.items
            ]
            self.db.add(order)
            self.db.flush()
            order_id = order.id
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to create order: {e}")
            raise StorageError("Failed to save order", cause=e)

        return order_id, order_number, bill_number

    def update_status(self, order_id: int, status: str, acting_user_id: Optional[int] = None) -> StatusChange:
        """
        Write a new status; entering `completed` from any other status
        deducts stock for the order's lines.

        Re-completing a completed order only re-writes the status.

        Locks are taken order first, then the order's menu items, and all
        of them before the first write.
        """
        status = (status or "").strip()
        if not status:
            raise ValidationError("Status is required")

        end_idle_transaction(self.db)
        with order_locks.hold(order_id), self.settlement.hold_stock(order_id):
            order = self.db.execute(
                select(Order)
                .where(Order.id == order_id)
                .with_for_update()
                .execution_options(populate_existing=True)
            ).scalar_one_or_none()
            if order is None:
                raise NotFoundError("Order not found")

            previous_status = order.status
            should_settle = status == STATUS_COMPLETED and previous_status != STATUS_COMPLETED
            stock_deducted = None

            try:
                order.status = status
                order.updated_at = func.now()
                self.db.flush()

                if should_settle:
                    stock_deducted = self.settlement.deduct_for_order(order_id, acting_user_id)
                self.db.commit()
            except SQLAlchemyError as e:
                self.db.rollback()
                logger.error(f"Failed to update status of order {order_id}: {e}")
                raise StorageError("Failed to update order status", cause=e)

        logger.info(f"Order {order_id}: {previous_status} -> {status}")
        if stock_deducted is False:
            logger.warning(f"Order {order_id} completed with partial stock deduction")

        return StatusChange(
            order_id=order_id,
            previous_status=previous_status,
            status=status,
            stock_deducted=stock_deducted,
        )

    def get_order(self, order_id: int) -> Order:
        order = self.db.execute(
            select(Order).options(selectinload(Order.items)).where(Order.id == order_id)
        ).scalar_one_or_none()
        if order is None:
            raise NotFoundError("Order not found")
        return order

    def list_orders(
        self,
        status: Optional[str] = None,
        order_type: Optional[str] = None,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
        limit: int = 100,
    ) -> List[Order]:
        """Orders newest first, optionally filtered."""
        query = select(Order)

        if status:
            query = query.where(Order.status == status)
        if order_type:
            query = query.where(Order.order_type == order_type)
        query = _filter_created(query, date_from, date_to)

        query = query.order_by(Order.created_at.desc(), Order.id.desc()).limit(limit)
        return list(self.db.execute(query).scalars().all())

    def sales_report(self, date_from: Optional[date] = None, date_to: Optional[date] = None) -> SalesReport:
        """Completed orders in a date range with money totals."""
        query = select(Order).where(Order.status == STATUS_COMPLETED)
        query = _filter_created(query, date_from, date_to)
        query = query.order_by(Order.created_at.desc(), Order.id.desc())
        orders = list(self.db.execute(query).scalars().all())

        zero = Decimal("0.00")
        return SalesReport(
            orders=orders,
            total_orders=len(orders),
            total_sales=sum((o.total or zero for o in orders), zero),
            total_tax=sum((o.tax or zero for o in orders), zero),
            total_subtotal=sum((o.subtotal or zero for o in orders), zero),
        )

    def _validate_lines(self, data: OrderCreate) -> None:
        if not data.items:
            raise ValidationError("An order needs at least one line")
        for index, line in enumerate(data.items, start=1):
            if line.quantity is None or line.quantity < 1:
                raise ValidationError(f"Line {index}: quantity must be at least 1")


def _filter_created(query, date_from: Optional[date], date_to: Optional[date]):
    """Whole-day bounds on Order.created_at, both ends inclusive."""
    if date_from:
        query = query.where(Order.created_at >= datetime.combine(date_from, time.min))
    if date_to:
        query = query.where(Order.created_at < datetime.combine(date_to + timedelta(days=1), time.min))
    return query

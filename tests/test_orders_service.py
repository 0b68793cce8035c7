"""
Tests for OrderService: numbering, validation, atomic creation, status changes.
"""
from datetime import date
from decimal import Decimal

import pytest
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from src.core.errors import NotFoundError, StorageError, ValidationError
from src.models import MenuItem, Order, OrderItem, OrderType, Sequence, StockMovement, User
from src.schemas.order import OrderCreate, OrderLineCreate
from src.services.orders import OrderService


def order_for(item: MenuItem, quantity: int = 1, **kwargs) -> OrderCreate:
    return OrderCreate(
        items=[OrderLineCreate(
            menu_item_id=item.id,
            item_name=item.name,
            quantity=quantity,
            rate=item.price,
        )],
        **kwargs,
    )


def count(db: Session, model) -> int:
    return db.execute(select(func.count()).select_from(model)).scalar_one()


class TestCreateOrder:
    """Tests for OrderService.create_order."""

    def test_generates_order_and_bill_numbers(self, db: Session, menu_item: MenuItem):
        created = OrderService(db).create_order(order_for(menu_item))

        assert created.order_number == "OD-001"
        assert created.bill_number == "INV-0001"

    def test_order_numbers_increase(self, db: Session, menu_item: MenuItem):
        service = OrderService(db)

        numbers = [service.create_order(order_for(menu_item)).order_number for _ in range(3)]

        assert numbers == ["OD-001", "OD-002", "OD-003"]

    def test_numbers_wider_than_padding_are_kept(self, db: Session, menu_item: MenuItem):
        db.add(Sequence(name="order_number", current_value=999))
        db.commit()

        created = OrderService(db).create_order(order_for(menu_item))

        assert created.order_number == "OD-1000"
        assert created.bill_number == "INV-0001"

    def test_explicit_numbers_are_used(self, db: Session, menu_item: MenuItem):
        created = OrderService(db).create_order(
            order_for(menu_item, order_number="OD-900", bill_number="INV-9000")
        )

        assert created.order_number == "OD-900"
        assert created.bill_number == "INV-9000"

    def test_persists_header_and_lines(self, db: Session, menu_item: MenuItem, cashier_user: User):
        data = OrderCreate(
            order_type=OrderType.TAKE_AWAY,
            customer_name="Sam",
            contact_no="0500000000",
            payment_mode="Card",
            subtotal=Decimal("24.00"),
            tax=Decimal("1.20"),
            total=Decimal("25.20"),
            notes="Extra garlic",
            items=[
                OrderLineCreate(menu_item_id=menu_item.id, item_name="Chicken Shawarma", quantity=2, rate=Decimal("12.00")),
                OrderLineCreate(menu_item_id=menu_item.id, item_name="Chicken Shawarma", quantity=1, rate=Decimal("12.00"), notes="No pickles"),
            ],
        )

        created = OrderService(db).create_order(data, acting_user_id=cashier_user.id)
        order = OrderService(db).get_order(created.id)

        assert order.order_type == "take-away"
        assert order.status == "pending"
        assert order.total == Decimal("25.20")
        assert order.created_by == cashier_user.id
        assert [(i.quantity, i.notes) for i in order.items] == [(2, None), (1, "No pickles")]

    def test_creating_does_not_touch_stock(self, db: Session, menu_item: MenuItem):
        OrderService(db).create_order(order_for(menu_item, quantity=4))

        db.refresh(menu_item)
        assert menu_item.stock_quantity == 10
        assert count(db, StockMovement) == 0

    def test_empty_order_rejected(self, db: Session):
        with pytest.raises(ValidationError):
            OrderService(db).create_order(OrderCreate(items=[]))

        assert count(db, Order) == 0

    def test_zero_quantity_rejected(self, db: Session, menu_item: MenuItem):
        with pytest.raises(ValidationError, match="Line 1"):
            OrderService(db).create_order(order_for(menu_item, quantity=0))

        assert count(db, Order) == 0

    def test_failed_line_leaves_no_order(self, db: Session, menu_item: MenuItem):
        """A line the database rejects rolls back the header and the counters."""
        bad_line = OrderLineCreate.model_construct(
            menu_item_id=menu_item.id, item_name=None, quantity=1, rate=Decimal("12.00"), notes=None
        )
        good_line = OrderLineCreate(menu_item_id=menu_item.id, item_name="Chicken Shawarma", rate=Decimal("12.00"))
        data = OrderCreate.model_construct(**{**OrderCreate().model_dump(), "items": [good_line, bad_line]})

        with pytest.raises(StorageError):
            OrderService(db).create_order(data)

        assert count(db, Order) == 0
        assert count(db, OrderItem) == 0

        created = OrderService(db).create_order(order_for(menu_item))
        assert created.order_number == "OD-001"

    def test_duplicate_explicit_order_number(self, db: Session, menu_item: MenuItem):
        service = OrderService(db)
        service.create_order(order_for(menu_item, order_number="OD-777"))

        with pytest.raises(StorageError):
            service.create_order(order_for(menu_item, order_number="OD-777"))

        assert count(db, Order) == 1


class TestUpdateStatus:
    """Tests for OrderService.update_status."""

    def test_unknown_order(self, db: Session):
        with pytest.raises(NotFoundError):
            OrderService(db).update_status(404, "completed")

    def test_blank_status_rejected(self, db: Session, menu_item: MenuItem):
        created = OrderService(db).create_order(order_for(menu_item))

        with pytest.raises(ValidationError):
            OrderService(db).update_status(created.id, "  ")

    def test_non_completing_transition_has_no_stock_effect(self, db: Session, menu_item: MenuItem):
        service = OrderService(db)
        created = service.create_order(order_for(menu_item, quantity=3))

        change = service.update_status(created.id, "preparing")

        assert change.previous_status == "pending"
        assert change.status == "preparing"
        assert change.stock_deducted is None
        db.refresh(menu_item)
        assert menu_item.stock_quantity == 10

    def test_completion_deducts_once(self, db: Session, menu_item: MenuItem, cashier_user: User):
        service = OrderService(db)
        created = service.create_order(order_for(menu_item, quantity=3))

        first = service.update_status(created.id, "completed", acting_user_id=cashier_user.id)
        second = service.update_status(created.id, "completed", acting_user_id=cashier_user.id)

        assert first.stock_deducted is True
        assert second.stock_deducted is None
        assert second.previous_status == "completed"
        db.refresh(menu_item)
        assert menu_item.stock_quantity == 7
        movements = db.execute(select(StockMovement)).scalars().all()
        assert len(movements) == 1
        assert movements[0].user_id == cashier_user.id

    def test_reopening_and_completing_deducts_again(self, db: Session, menu_item: MenuItem):
        """Any status can follow any other; each entry into completed settles."""
        service = OrderService(db)
        created = service.create_order(order_for(menu_item, quantity=2))

        service.update_status(created.id, "completed")
        service.update_status(created.id, "pending")
        service.update_status(created.id, "completed")

        db.refresh(menu_item)
        assert menu_item.stock_quantity == 6
        assert count(db, StockMovement) == 2

    def test_order_created_as_completed_is_not_deducted(self, db: Session, menu_item: MenuItem):
        created = OrderService(db).create_order(order_for(menu_item, quantity=2, status="completed"))

        change = OrderService(db).update_status(created.id, "completed")

        assert change.stock_deducted is None
        db.refresh(menu_item)
        assert menu_item.stock_quantity == 10


class TestQueries:
    """Tests for get_order, list_orders and sales_report."""

    def test_get_order_missing(self, db: Session):
        with pytest.raises(NotFoundError):
            OrderService(db).get_order(1)

    def test_list_orders_filters(self, db: Session, menu_item: MenuItem):
        service = OrderService(db)
        first = service.create_order(order_for(menu_item))
        second = service.create_order(order_for(menu_item, order_type=OrderType.HOME_DELIVERY))
        service.update_status(first.id, "completed")

        assert [o.id for o in service.list_orders()] == [second.id, first.id]
        assert [o.id for o in service.list_orders(status="completed")] == [first.id]
        assert [o.id for o in service.list_orders(order_type="home-delivery")] == [second.id]
        assert len(service.list_orders(limit=1)) == 1

    def test_list_orders_date_range(self, db: Session, menu_item: MenuItem):
        service = OrderService(db)
        service.create_order(order_for(menu_item))

        assert service.list_orders(date_from=date(2000, 1, 1), date_to=date(2000, 1, 31)) == []
        assert len(service.list_orders(date_from=date(2000, 1, 1))) == 1

    def test_sales_report_counts_completed_only(self, db: Session, menu_item: MenuItem):
        service = OrderService(db)
        done = service.create_order(order_for(
            menu_item, subtotal=Decimal("12.00"), tax=Decimal("0.60"), total=Decimal("12.60")
        ))
        service.create_order(order_for(menu_item, total=Decimal("99.00")))
        service.update_status(done.id, "completed")

        report = service.sales_report()

        assert report.total_orders == 1
        assert report.total_sales == Decimal("12.60")
        assert report.total_tax == Decimal("0.60")
        assert report.total_subtotal == Decimal("12.00")

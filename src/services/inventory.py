"""
Inventory ledger: per-item stock counters and their movement history.

Every change to `MenuItem.stock_quantity` goes through this module and is
written together with exactly one StockMovement row that snapshots the
counter before and after the change.
"""
import logging
from dataclasses import dataclass
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from src.core.errors import NotFoundError, StorageError, ValidationError
from src.core.locks import item_locks
from src.db.session import end_idle_transaction
from src.models.inventory import MovementType, StockMovement
from src.models.menu import Category, MenuItem
from src.models.user import User

logger = logging.getLogger(__name__)


@dataclass
class MovementResult:
    previous_stock: int
    new_stock: int


@dataclass
class HistoryEntry:
    """A stock movement joined with the operator who made it."""
    id: int
    menu_item_id: int
    movement_type: str
    is_absolute: bool
    quantity: int
    previous_stock: int
    new_stock: int
    reference_id: Optional[str]
    notes: Optional[str]
    user_id: Optional[int]
    username: Optional[str]
    user_name: Optional[str]
    created_at: object


def parse_movement_type(value) -> MovementType:
    try:
        return MovementType(value)
    except ValueError:
        raise ValidationError(f"Invalid movement type: {value}")


def compute_new_stock(previous_stock: int, movement_type: MovementType, quantity: int) -> int:
    """Apply a relative movement; subtractive movements floor at zero."""
    if movement_type in MovementType.additive():
        return previous_stock + quantity
    if movement_type in MovementType.subtractive():
        return max(0, previous_stock - quantity)
    raise ValidationError(f"Invalid movement type: {movement_type.value}")


class InventoryLedger:
    """
    Service owning stock quantities and the append-only movement log.

    Public mutators commit their own unit of work while holding the item's
    lock. `record_movement` only flushes, for callers (order settlement)
    that fold several movements into a larger transaction.
    """

    def __init__(self, db: Session):
        self.db = db

    # ============ Mutations ============

    def apply_movement(
        self,
        item_id: int,
        movement_type,
        quantity: int,
        notes: Optional[str] = None,
        acting_user_id: Optional[int] = None,
        reference_id: Optional[str] = None,
    ) -> MovementResult:
        """
        Add or remove stock by a relative amount.

        Args:
            item_id: Menu item whose counter changes
            movement_type: purchase / adjustment add, sale / waste subtract
            quantity: Positive magnitude of the change
            notes: Free text stored on the movement
            acting_user_id: Operator recorded on the movement
            reference_id: External reference, e.g. an order number

        Returns:
            MovementResult with the counter before and after

        Raises:
            ValidationError: unknown type or non-positive quantity
            NotFoundError: item does not exist
            StorageError: the write failed and was rolled back
        """
        parsed = parse_movement_type(movement_type)
        _require_positive(quantity)

        end_idle_transaction(self.db)
        with item_locks.hold(item_id):
            try:
                result = self.record_movement(
                    item_id, parsed, quantity,
                    notes=notes, acting_user_id=acting_user_id, reference_id=reference_id,
                )
            except SQLAlchemyError as e:
                self.db.rollback()
                logger.error(f"Stock movement on item {item_id} failed: {e}")
                raise StorageError("Failed to save stock change", cause=e)
            self._commit()

        logger.info(
            f"Stock {parsed.value} on item {item_id}: "
            f"{result.previous_stock} -> {result.new_stock} (qty {quantity})"
        )
        return result

    def set_stock(
        self,
        item_id: int,
        new_quantity: int,
        notes: Optional[str] = None,
        acting_user_id: Optional[int] = None,
    ) -> MovementResult:
        """
        Overwrite the counter with an absolute value, e.g. after a stock count.

        The movement is logged as an absolute `adjustment` with quantity
        |new - previous|; `previous_stock`/`new_stock` carry the direction.
        """
        if isinstance(new_quantity, bool) or not isinstance(new_quantity, int) or new_quantity < 0:
            raise ValidationError("Stock quantity must be a non-negative integer")

        end_idle_transaction(self.db)
        with item_locks.hold(item_id):
            item = self._get_item_for_update(item_id)
            previous_stock = item.stock_quantity or 0

            item.stock_quantity = new_quantity
            self.db.add(StockMovement(
                menu_item_id=item.id,
                movement_type=MovementType.ADJUSTMENT.value,
                is_absolute=True,
                quantity=abs(new_quantity - previous_stock),
                previous_stock=previous_stock,
                new_stock=new_quantity,
                notes=notes or "Stock adjustment",
                user_id=acting_user_id,
            ))
            self._commit()

        logger.info(f"Stock set on item {item_id}: {previous_stock} -> {new_quantity}")
        return MovementResult(previous_stock=previous_stock, new_stock=new_quantity)

    def record_movement(
        self,
        item_id: int,
        movement_type: MovementType,
        quantity: int,
        notes: Optional[str] = None,
        acting_user_id: Optional[int] = None,
        reference_id: Optional[str] = None,
    ) -> MovementResult:
        """Write counter + movement row and flush. The caller commits."""
        item = self._get_item_for_update(item_id)
        previous_stock = item.stock_quantity or 0
        new_stock = compute_new_stock(previous_stock, movement_type, quantity)

        item.stock_quantity = new_stock
        self.db.add(StockMovement(
            menu_item_id=item.id,
            movement_type=movement_type.value,
            quantity=quantity,
            previous_stock=previous_stock,
            new_stock=new_stock,
            reference_id=reference_id,
            notes=notes,
            user_id=acting_user_id,
        ))
        self.db.flush()

        return MovementResult(previous_stock=previous_stock, new_stock=new_stock)

    def update_settings(
        self,
        item_id: int,
        low_stock_threshold: Optional[int] = None,
        track_stock: Optional[bool] = None,
    ) -> MenuItem:
        """Change the low-stock threshold and/or whether the item is tracked."""
        if low_stock_threshold is None and track_stock is None:
            raise ValidationError("No settings provided")
        if low_stock_threshold is not None and low_stock_threshold < 0:
            raise ValidationError("Low stock threshold cannot be negative")

        item = self.db.get(MenuItem, item_id)
        if item is None:
            raise NotFoundError("Item not found")

        if low_stock_threshold is not None:
            item.low_stock_threshold = low_stock_threshold
        if track_stock is not None:
            item.track_stock = bool(track_stock)

        self._commit()
        self.db.refresh(item)
        return item

    # ============ Queries ============

    def get_history(self, item_id: int, limit: int = 50) -> List[HistoryEntry]:
        """Most recent movements for an item, newest first."""
        stmt = (
            select(StockMovement, User.username, User.full_name)
            .outerjoin(User, StockMovement.user_id == User.id)
            .where(StockMovement.menu_item_id == item_id)
            .order_by(StockMovement.created_at.desc(), StockMovement.id.desc())
            .limit(limit)
        )
        rows = self.db.execute(stmt).all()

        return [
            HistoryEntry(
                id=m.id,
                menu_item_id=m.menu_item_id,
                movement_type=m.movement_type,
                is_absolute=bool(m.is_absolute),
                quantity=m.quantity,
                previous_stock=m.previous_stock,
                new_stock=m.new_stock,
                reference_id=m.reference_id,
                notes=m.notes,
                user_id=m.user_id,
                username=username,
                user_name=full_name,
                created_at=m.created_at,
            )
            for m, username, full_name in rows
        ]

    def get_low_stock(self) -> List[MenuItem]:
        """Tracked items at or below their threshold, most urgent first."""
        stmt = (
            select(MenuItem)
            .where(
                MenuItem.track_stock.is_(True),
                MenuItem.stock_quantity <= MenuItem.low_stock_threshold,
            )
            .order_by(MenuItem.stock_quantity.asc(), MenuItem.id.asc())
        )
        return list(self.db.execute(stmt).scalars().all())

    def list_tracked(self) -> List[MenuItem]:
        """All stock-tracked items in menu order."""
        stmt = (
            select(MenuItem)
            .join(Category, MenuItem.category_id == Category.id)
            .where(MenuItem.track_stock.is_(True))
            .order_by(Category.display_order.asc(), MenuItem.name.asc())
        )
        return list(self.db.execute(stmt).scalars().all())

    # ============ Helpers ============

    def _get_item_for_update(self, item_id: int) -> MenuItem:
        item = self.db.execute(
            select(MenuItem)
            .where(MenuItem.id == item_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        ).scalar_one_or_none()
        if item is None:
            raise NotFoundError("Item not found")
        return item

    def _commit(self) -> None:
        try:
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Inventory write failed: {e}")
            raise StorageError("Failed to save stock change", cause=e)


def _require_positive(quantity) -> None:
    if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 1:
        raise ValidationError("Quantity must be a positive integer")

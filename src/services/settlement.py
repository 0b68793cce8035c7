"""
Order settlement: stock deduction when an order is completed.
"""
import logging
from contextlib import ExitStack, contextmanager
from typing import Iterator, Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from src.core.errors import PosError
from src.core.locks import item_locks
from src.db.session import end_idle_transaction
from src.models.inventory import MovementType
from src.models.menu import MenuItem
from src.models.order import Order, OrderItem
from src.services.inventory import InventoryLedger

logger = logging.getLogger(__name__)


class SettlementCoordinator:
    """
    Applies one `sale` movement per order line.

    Deduction is best effort per line: each line runs in its own SAVEPOINT,
    so a failing line is rolled back alone and the remaining lines still
    go through. Lines already deducted are kept. The caller owns the outer
    transaction and commits it.
    """

    def __init__(self, db: Session, ledger: Optional[InventoryLedger] = None):
        self.db = db
        self.ledger = ledger or InventoryLedger(db)

    @contextmanager
    def hold_stock(self, order_id: int) -> Iterator[None]:
        """
        Lock every menu item on the order, in id order.

        Order lines never change after creation, so the id set read here
        stays valid. The read transaction is closed before waiting on the
        locks. Callers enter this before writing and commit inside it.
        """
        item_ids = sorted(set(self.db.execute(
            select(OrderItem.menu_item_id).where(OrderItem.order_id == order_id)
        ).scalars().all()))
        end_idle_transaction(self.db)

        with ExitStack() as stack:
            for item_id in item_ids:
                stack.enter_context(item_locks.hold(item_id))
            yield

    def deduct_for_order(self, order_id: int, acting_user_id: Optional[int] = None) -> bool:
        """
        Deduct stock for every stock-tracked line of an order.

        Returns:
            True if every line was processed, False if any line failed.
            Per-line outcomes are only logged.
        """
        order = self.db.get(Order, order_id)
        if order is None:
            logger.error(f"Cannot deduct stock: order {order_id} not found")
            return False

        reference = order.order_number or str(order_id)
        lines = self.db.execute(
            select(OrderItem).where(OrderItem.order_id == order_id).order_by(OrderItem.id)
        ).scalars().all()

        all_ok = True
        deducted = 0
        for line in lines:
            try:
                with self.db.begin_nested():
                    item = self.db.get(MenuItem, line.menu_item_id)
                    if item is None or not item.track_stock:
                        continue

                    self.ledger.record_movement(
                        line.menu_item_id,
                        MovementType.SALE,
                        line.quantity,
                        notes=f"Order: {reference}",
                        acting_user_id=acting_user_id,
                        reference_id=reference,
                    )
                    deducted += 1
            except (PosError, SQLAlchemyError) as e:
                all_ok = False
                logger.error(
                    f"Error deducting stock for order {reference}, "
                    f"line {line.id} (item {line.menu_item_id}): {e}"
                )

        logger.info(f"Settled order {reference}: {deducted} of {len(lines)} lines deducted")
        return all_ok

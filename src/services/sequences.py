"""
Document numbering backed by the `sequences` counter table.

Each call bumps the counter with a single UPDATE, so the row stays
write-locked until the caller's transaction ends and concurrent callers
queue behind it instead of reading the same value.
"""
import logging

from sqlalchemy import func, select, update
from sqlalchemy.orm import Session

from src.core.config import get_settings
from src.core.locks import sequence_lock
from src.models.order import Order
from src.models.sequence import Sequence

logger = logging.getLogger(__name__)

ORDER_NUMBER = "order_number"
BILL_NUMBER = "bill_number"


class SequenceService:
    """Hands out order and bill numbers."""

    def __init__(self, db: Session):
        self.db = db
        self.settings = get_settings()

    def next_value(self, name: str) -> int:
        """
        Increment and return the named counter.

        A counter without a row yet is seeded from the rows that already
        carry that kind of number, so an existing database keeps its
        numbering.
        """
        with sequence_lock:
            result = self.db.execute(
                update(Sequence)
                .where(Sequence.name == name)
                .values(current_value=Sequence.current_value + 1)
            )
            if result.rowcount == 0:
                seed = self._existing_count(name)
                logger.info(f"Seeding sequence {name} at {seed}")
                self.db.add(Sequence(name=name, current_value=seed + 1))
                self.db.flush()

            return self.db.execute(
                select(Sequence.current_value).where(Sequence.name == name)
            ).scalar_one()

    def current_value(self, name: str) -> int:
        value = self.db.execute(
            select(Sequence.current_value).where(Sequence.name == name)
        ).scalar_one_or_none()
        return value if value is not None else self._existing_count(name)

    def next_order_number(self) -> str:
        value = self.next_value(ORDER_NUMBER)
        return format_number(self.settings.ORDER_NUMBER_PREFIX, value, self.settings.ORDER_NUMBER_WIDTH)

    def next_bill_number(self) -> str:
        value = self.next_value(BILL_NUMBER)
        return format_number(self.settings.BILL_NUMBER_PREFIX, value, self.settings.BILL_NUMBER_WIDTH)

    def _existing_count(self, name: str) -> int:
        stmt = select(func.count(Order.id))
        if name == BILL_NUMBER:
            stmt = stmt.where(Order.bill_number.is_not(None))
        elif name != ORDER_NUMBER:
            return 0
        return self.db.execute(stmt).scalar_one()


def format_number(prefix: str, value: int, width: int) -> str:
    """format_number("OD-", 7, 3) -> "OD-007". Wider values are not truncated."""
    return f"{prefix}{str(value).zfill(width)}"

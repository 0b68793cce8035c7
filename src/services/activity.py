"""
Operator activity log.
"""
import logging
from dataclasses import dataclass
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from src.models.settings import UserActivity
from src.models.user import User

logger = logging.getLogger(__name__)


@dataclass
class ActivityEntry:
    id: int
    user_id: Optional[int]
    username: Optional[str]
    full_name: Optional[str]
    action: str
    details: Optional[str]
    created_at: object


def record_activity(db: Session, user_id: Optional[int], action: str, details: Optional[str] = None) -> UserActivity:
    """
    Add an activity row to the session.

    Not committed here: the row belongs to the caller's unit of work, so it
    is saved together with the change it describes.
    """
    entry = UserActivity(user_id=user_id, action=action, details=details)
    db.add(entry)
    logger.debug(f"Activity {action} by user {user_id}: {details}")
    return entry


def list_activity(db: Session, user_id: Optional[int] = None, limit: int = 100) -> List[ActivityEntry]:
    """Newest first, optionally for one operator."""
    stmt = (
        select(UserActivity, User.username, User.full_name)
        .outerjoin(User, UserActivity.user_id == User.id)
    )
    if user_id is not None:
        stmt = stmt.where(UserActivity.user_id == user_id)
    stmt = stmt.order_by(UserActivity.created_at.desc(), UserActivity.id.desc()).limit(limit)

    return [
        ActivityEntry(
            id=a.id,
            user_id=a.user_id,
            username=username,
            full_name=full_name,
            action=a.action,
            details=a.details,
            created_at=a.created_at,
        )
        for a, username, full_name in db.execute(stmt).all()
    ]

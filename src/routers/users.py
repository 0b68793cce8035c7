"""
Operator management (admin only).

Every change is written to the activity log in the same commit.
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from src.core.deps import require_roles
from src.core.security import hash_password
from src.db.session import get_db
from src.models.user import User
from src.schemas.auth import (
    ActivityEntryResponse,
    ActivityLogResponse,
    UserCreate,
    UserListResponse,
    UserResponse,
    UserUpdate,
)
from src.services.activity import list_activity, record_activity

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["users"])

admin_only = require_roles("admin")


def get_user_or_404(db: Session, user_id: int) -> User:
    user = db.get(User, user_id)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User not found",
        )
    return user


@router.get("", response_model=UserListResponse)
def list_users(
    db: Session = Depends(get_db),
    current_user: User = Depends(admin_only),
):
    users = db.execute(select(User).order_by(User.username.asc())).scalars().all()
    return UserListResponse(
        users=[UserResponse.model_validate(u) for u in users],
        total=len(users),
    )


@router.get("/activity-log", response_model=ActivityLogResponse)
def get_activity_log(
    user_id: Optional[int] = Query(None),
    limit: int = Query(100, ge=1, le=1000),
    db: Session = Depends(get_db),
    current_user: User = Depends(admin_only),
):
    """Logins, logouts and user changes, newest first."""
    entries = list_activity(db, user_id=user_id, limit=limit)
    return ActivityLogResponse(
        entries=[ActivityEntryResponse.model_validate(e) for e in entries],
        total=len(entries),
    )


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def create_user(
    user_data: UserCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(admin_only),
):
    existing = db.query(User).filter(User.username == user_data.username).first()
    if existing:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Username already taken",
        )

    user = User(
        username=user_data.username,
        hashed_password=hash_password(user_data.password),
        full_name=user_data.full_name,
        role=user_data.role,
    )
    db.add(user)
    record_activity(db, current_user.id, "create_user", f"Created user: {user_data.username}")
    db.commit()
    db.refresh(user)

    logger.info(f"User {user.username} ({user.role}) created by {current_user.username}")
    return user


@router.put("/{user_id}", response_model=UserResponse)
def update_user(
    user_id: int,
    user_data: UserUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(admin_only),
):
    """Change any of username, name, role, active flag or password."""
    user = get_user_or_404(db, user_id)
    updates = user_data.model_dump(exclude_unset=True, exclude_none=True)

    if not updates:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="No updates provided",
        )

    if "username" in updates:
        taken = db.query(User).filter(User.username == updates["username"], User.id != user_id).first()
        if taken:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Username already exists",
            )

    password = updates.pop("password", None)
    if password:
        user.hashed_password = hash_password(password)
    for field, value in updates.items():
        setattr(user, field, value)

    record_activity(db, current_user.id, "update_user", f"Updated user ID: {user_id}")
    db.commit()
    db.refresh(user)

    logger.info(f"User {user_id} updated by {current_user.username}")
    return user


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_user(
    user_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(admin_only),
):
    """
    Remove an operator.

    Orders, stock movements and activity rows they made are kept with the
    user reference cleared.
    """
    if user_id == current_user.id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Cannot delete your own account",
        )

    user = get_user_or_404(db, user_id)

    if user.role == "admin":
        active_admins = db.execute(
            select(func.count(User.id)).where(User.role == "admin", User.is_active.is_(True))
        ).scalar_one()
        if active_admins <= 1:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Cannot delete the last admin user",
            )

    acting_user_id = current_user.id
    db.delete(user)
    record_activity(db, acting_user_id, "delete_user", f"Deleted user ID: {user_id}")
    db.commit()

    logger.info(f"User {user_id} deleted by {current_user.username}")
    return None

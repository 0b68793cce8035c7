"""
Authentication router with login, logout and current-user endpoints.
"""
import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from src.core.deps import get_current_user
from src.core.security import create_access_token, verify_password
from src.db.session import get_db
from src.models.user import User
from src.schemas.auth import Token, UserLogin, UserResponse
from src.services.activity import record_activity

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/login", response_model=Token)
def login(user_data: UserLogin, db: Session = Depends(get_db)) -> Token:
    """
    Authenticate an operator and return an access token.

    The token's subject is the user id; it is the acting user recorded on
    orders and stock movements.
    """
    user = db.query(User).filter(User.username == user_data.username).first()

    if not user or not verify_password(user_data.password, user.hashed_password):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid username or password",
            headers={"WWW-Authenticate": "Bearer"},
        )

    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Account is disabled",
        )

    user.last_login = datetime.now(timezone.utc).replace(tzinfo=None)
    record_activity(db, user.id, "login", "User logged in")
    db.commit()
    logger.info(f"User {user.username} logged in")

    return Token(access_token=create_access_token(subject=str(user.id)))


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
def logout(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """
    Record the end of a till session.

    Tokens are stateless; the client discards its token.
    """
    record_activity(db, current_user.id, "logout", "User logged out")
    db.commit()
    logger.info(f"User {current_user.username} logged out")


@router.get("/me", response_model=UserResponse)
def get_me(current_user: User = Depends(get_current_user)):
    """Return the logged-in operator."""
    return current_user

"""
Restaurant settings router.
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from src.core.deps import get_current_user, require_roles
from src.db.session import get_db
from src.models.user import User
from src.schemas.settings import SettingResponse, SettingsResponse, SettingUpdate
from src.services.settings import SettingsService


router = APIRouter(prefix="/settings", tags=["settings"])


@router.get("", response_model=SettingsResponse)
def list_settings(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """All settings as one key/value object."""
    return SettingsResponse(data=SettingsService(db).get_all())


@router.put("/{key}", response_model=SettingResponse)
def update_setting(
    key: str,
    body: SettingUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles("admin", "manager")),
):
    """Insert or replace one setting."""
    return SettingsService(db).update(key, body.value)

"""
Restaurant settings: the key/value pairs bills and tickets are printed with.
"""
import logging
from typing import Dict

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from src.core.errors import StorageError, ValidationError
from src.models.settings import RestaurantSetting

logger = logging.getLogger(__name__)

DEFAULT_SETTINGS = {
    "tax_rate": "5",
    "currency": "SAR",
    "printer_name": "",
    "restaurant_name": "Restaurant POS",
    "restaurant_address": "",
    "restaurant_phone": "",
}


class SettingsService:
    """Reads and upserts restaurant settings."""

    def __init__(self, db: Session):
        self.db = db

    def get_all(self) -> Dict[str, str]:
        rows = self.db.execute(select(RestaurantSetting).order_by(RestaurantSetting.key)).scalars().all()
        return {row.key: row.value for row in rows}

    def update(self, key: str, value: str) -> RestaurantSetting:
        """Insert or replace one setting."""
        key = (key or "").strip()
        if not key:
            raise ValidationError("Setting key is required")
        if value is None:
            raise ValidationError("Setting value is required")

        setting = self.db.get(RestaurantSetting, key)
        if setting is None:
            setting = RestaurantSetting(key=key, value=value)
            self.db.add(setting)
        else:
            setting.value = value

        try:
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to save setting {key}: {e}")
            raise StorageError("Failed to save setting", cause=e)

        self.db.refresh(setting)
        logger.info(f"Setting {key} updated")
        return setting

    def seed_defaults(self) -> int:
        """Add any default setting that is missing. Returns how many were added."""
        existing = set(self.get_all())
        missing = {k: v for k, v in DEFAULT_SETTINGS.items() if k not in existing}
        for key, value in missing.items():
            self.db.add(RestaurantSetting(key=key, value=value))
        self.db.commit()
        return len(missing)

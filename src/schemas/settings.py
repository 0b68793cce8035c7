"""
Restaurant settings schemas.
"""
from datetime import datetime
from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict


class SettingsResponse(BaseModel):
    success: bool = True
    data: Dict[str, str]


class SettingUpdate(BaseModel):
    value: str


class SettingResponse(BaseModel):
    key: str
    value: str
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

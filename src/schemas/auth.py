"""
Auth-related Pydantic schemas for request/response validation.
"""
from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


Role = Literal["admin", "manager", "cashier"]


class UserLogin(BaseModel):
    """Schema for user login request."""
    username: str
    password: str


class Token(BaseModel):
    """Schema for token response."""
    access_token: str
    token_type: str = "bearer"


class UserCreate(BaseModel):
    """Schema for an admin adding an operator."""
    username: str = Field(min_length=3, max_length=100)
    password: str = Field(min_length=6)
    full_name: str = Field(min_length=1, max_length=255)
    role: Role = "cashier"


class UserResponse(BaseModel):
    """Schema for user response (without password)."""
    id: int
    username: str
    full_name: str
    role: str
    is_active: bool
    last_login: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class UserListResponse(BaseModel):
    users: List[UserResponse]
    total: int


class UserUpdate(BaseModel):
    """Schema for an admin editing an operator. Omitted fields are kept."""
    username: Optional[str] = Field(default=None, min_length=3, max_length=100)
    password: Optional[str] = Field(default=None, min_length=6)
    full_name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    role: Optional[Role] = None
    is_active: Optional[bool] = None


class ActivityEntryResponse(BaseModel):
    id: int
    user_id: Optional[int] = None
    username: Optional[str] = None
    full_name: Optional[str] = None
    action: str
    details: Optional[str] = None
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class ActivityLogResponse(BaseModel):
    entries: List[ActivityEntryResponse]
    total: int

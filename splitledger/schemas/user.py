from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, EmailStr, Field


class FriendInfo(BaseModel):
    id: str
    username: str
    full_name: Optional[str] = None
    email: EmailStr


class UserProfileResponse(BaseModel):
    id: str
    username: str
    email: EmailStr
    full_name: Optional[str] = None
    phone_number: Optional[str] = None
    current_balance: Decimal
    currency: str
    friend_count: int
    group_count: int
    member_since: datetime


class UpdateProfileRequest(BaseModel):
    """Only the fields that are sent are changed."""
    full_name: Optional[str] = Field(None, max_length=100)
    phone_number: Optional[str] = Field(None, max_length=20)


class UserSearchResponse(BaseModel):
    id: str
    username: str
    full_name: Optional[str] = None
    email: EmailStr
    is_friend: bool

"""
Identity records and explicit association records.

Friendship and group membership are stored as their own documents and
fetched on demand; a User or Group never holds a live collection of
other users.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from splitledger.models.base import MongoModel, _utcnow


class User(MongoModel):
    username: str
    email: EmailStr
    full_name: Optional[str] = None
    phone_number: Optional[str] = None
    password_hash: Optional[str] = Field(None, repr=False)
    is_active: bool = True


class Group(MongoModel):
    name: str
    description: Optional[str] = None
    created_by: str
    is_active: bool = True


class GroupMembership(BaseModel):
    group_id: str
    user_id: str
    joined_at: datetime = Field(default_factory=_utcnow)

    model_config = ConfigDict(frozen=True)


class Friendship(BaseModel):
    """One record per unordered pair; ``user_id`` sorts before ``friend_id``."""
    user_id: str
    friend_id: str
    created_at: datetime = Field(default_factory=_utcnow)

    model_config = ConfigDict(frozen=True)

    @classmethod
    def between(cls, a: str, b: str) -> "Friendship":
        low, high = sorted((a, b))
        return cls(user_id=low, friend_id=high)

    def other(self, user_id: str) -> str:
        return self.friend_id if self.user_id == user_id else self.user_id

from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field


class GroupCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=500)
    member_ids: List[str] = []


class MemberInfo(BaseModel):
    id: str
    username: str
    full_name: Optional[str] = None


class GroupResponse(BaseModel):
    id: str
    name: str
    description: Optional[str] = None
    created_by_username: str
    members: List[MemberInfo]
    created_at: datetime


class BalanceResponse(BaseModel):
    """Net position of one member: positive = owed to them, negative = they owe."""
    user_id: str
    username: str
    balance: Decimal

from decimal import Decimal
from enum import Enum
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from splitledger.models.base import _utcnow, new_id


class SettlementStatus(str, Enum):
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


class Settlement(BaseModel):
    """A recorded payment from debtor to creditor inside a group."""
    id: str = Field(default_factory=new_id, alias="_id")
    debtor_id: str
    creditor_id: str
    group_id: str
    amount: Decimal
    note: Optional[str] = None
    status: SettlementStatus = SettlementStatus.COMPLETED
    settled_at: datetime = Field(default_factory=_utcnow)

    model_config = ConfigDict(populate_by_name=True, from_attributes=True, frozen=True)


class SettlementPlanEntry(BaseModel):
    """One suggested payment in a debt-netting plan. Never persisted."""
    debtor_id: str
    debtor_username: str
    creditor_id: str
    creditor_username: str
    amount: Decimal

    model_config = ConfigDict(frozen=True)

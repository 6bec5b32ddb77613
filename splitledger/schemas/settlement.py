from pydantic import BaseModel, Field
from datetime import datetime
from decimal import Decimal
from typing import Optional

from splitledger.models.settlement import Settlement


class SettlementRequest(BaseModel):
    creditor_id: str
    group_id: str
    amount: Decimal = Field(..., gt=0, decimal_places=2)
    note: Optional[str] = Field(None, max_length=500)


class SettlementResult(BaseModel):
    settlement: Settlement
    reference_id: str


class SettlementResponse(BaseModel):
    settlement_id: str
    debtor_username: str
    creditor_username: str
    group_id: str
    amount: Decimal
    note: Optional[str] = None
    status: str
    settled_at: datetime

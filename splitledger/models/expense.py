"""
Expense model - append-only record of money paid on behalf of a group.

Design principles:
- Created once, never mutated
- Keeps the split details so the expense can be replayed for group balances
- All amounts are exact Decimals with two fractional digits
"""

from decimal import Decimal
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict

from splitledger.core.errors import InvalidSplit
from splitledger.models.base import MongoModel


class SplitPolicy(str, Enum):
    EQUAL = "EQUAL"
    EXACT = "EXACT"
    PERCENTAGE = "PERCENTAGE"

    @classmethod
    def parse(cls, value: "str | SplitPolicy") -> "SplitPolicy":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().upper())
        except ValueError:
            raise InvalidSplit(f"Invalid split type: {value}", split_type=str(value))


class ExpenseShare(BaseModel):
    """Per-participant split detail: ``amount`` for EXACT, ``percentage`` for PERCENTAGE."""
    user_id: str
    amount: Optional[Decimal] = None
    percentage: Optional[Decimal] = None

    model_config = ConfigDict(frozen=True)


class Obligation(BaseModel):
    """What one participant owes the payer for one expense."""
    user_id: str
    amount: Decimal

    model_config = ConfigDict(frozen=True)


class Expense(MongoModel):
    description: str
    amount: Decimal
    paid_by: str
    group_id: str
    split_policy: SplitPolicy
    participant_ids: List[str]
    shares: List[ExpenseShare] = []

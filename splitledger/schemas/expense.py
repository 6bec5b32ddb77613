from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field

from splitledger.models.expense import Expense, ExpenseShare, Obligation


class ExpenseParticipantIn(BaseModel):
    """For EXACT or PERCENTAGE split: what this user owes."""
    user_id: str
    amount: Optional[Decimal] = Field(None, decimal_places=2)
    percentage: Optional[Decimal] = None

    def to_share(self) -> ExpenseShare:
        return ExpenseShare(user_id=self.user_id, amount=self.amount, percentage=self.percentage)


class CreateExpenseRequest(BaseModel):
    description: str = Field(..., min_length=1, max_length=255)
    amount: Decimal = Field(..., gt=0, decimal_places=2)
    group_id: str
    # EQUAL | EXACT | PERCENTAGE; validated by the split calculator
    split_type: str
    # For EQUAL split: just the user ids
    participant_ids: List[str] = []
    # For EXACT or PERCENTAGE split
    participants: List[ExpenseParticipantIn] = []


class ExpenseResult(BaseModel):
    """A created expense together with the obligations it posted."""
    expense: Expense
    obligations: List[Obligation]
    reference_ids: List[str]


class ExpenseResponse(BaseModel):
    id: str
    description: str
    amount: Decimal
    paid_by: str
    paid_by_username: str
    group_id: str
    group_name: str
    split_type: str
    created_at: datetime
    obligations: List[Obligation] = []

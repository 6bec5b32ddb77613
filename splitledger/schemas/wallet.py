from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel

from splitledger.models.ledger import EntryDirection


class WalletBalanceResponse(BaseModel):
    user_id: str
    username: str
    balance: Decimal
    currency: str


class TransactionResponse(BaseModel):
    """One wallet entry as shown to its owner."""
    id: str
    transaction_type: EntryDirection
    amount: Decimal
    counterparty_username: str
    description: str
    reference_id: str
    expense_id: Optional[str] = None
    created_at: datetime

"""
Ledger model - double-entry wallet postings.

Design principles:
- Every financial event writes exactly two entries sharing one reference_id
- DEBIT on the side that owes, CREDIT on the side that is owed, same amount
- Immutable once written; corrections are new entries, never edits
"""

from decimal import Decimal
from enum import Enum
from typing import Optional

from splitledger.models.base import MongoModel


class EntryDirection(str, Enum):
    DEBIT = "DEBIT"
    CREDIT = "CREDIT"


class LedgerEntry(MongoModel):
    """
    One half of a posting owned by ``user_id``.

    Invariants:
    - amount > 0
    - the paired entry has the same reference_id and amount and the
      opposite direction, with owner and counterparty swapped
    """
    user_id: str
    direction: EntryDirection
    amount: Decimal
    counterparty_id: str
    reference_id: str
    expense_id: Optional[str] = None
    description: str = ""

    def signed_amount(self) -> Decimal:
        """Credit counts toward what the owner is owed, debit against it."""
        if self.direction is EntryDirection.CREDIT:
            return self.amount
        return -self.amount

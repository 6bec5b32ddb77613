"""
LedgerRepository - append-only double-entry postings.

Core rules:
1. Entries are only ever inserted, in DEBIT/CREDIT pairs
2. A pair is one insert_many call inside the caller's session, so the two
   halves commit or abort together
3. Balances are aggregated server side over Decimal128 amounts
"""

from datetime import datetime
from decimal import Decimal
from typing import Any, List, Optional

from motor.motor_asyncio import AsyncIOMotorDatabase

from splitledger.core.money import ZERO
from splitledger.models.ledger import EntryDirection, LedgerEntry
from splitledger.repositories.base import as_decimal, storage_errors, to_document


class LedgerRepository:
    """Repository for ledger entries (LedgerStore)."""

    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db
        self.collection = db["ledger_entries"]

    async def save_entry_pair(
        self, debit: LedgerEntry, credit: LedgerEntry, session: Any = None,
    ) -> None:
        """
        Insert both halves of one posting.

        Raises ValueError if the two entries do not mirror each other.
        """
        if (
            debit.direction is not EntryDirection.DEBIT
            or credit.direction is not EntryDirection.CREDIT
            or debit.reference_id != credit.reference_id
            or debit.amount != credit.amount
        ):
            raise ValueError(
                f"Unbalanced entry pair: {debit.reference_id} {debit.amount} / "
                f"{credit.reference_id} {credit.amount}"
            )

        with storage_errors("insert ledger entries"):
            await self.collection.insert_many(
                [to_document(debit), to_document(credit)],
                ordered=True,
                session=session,
            )

    async def find_by_user(self, user_id: str) -> List[LedgerEntry]:
        """All entries owned by a user, newest first."""
        with storage_errors("find ledger entries"):
            docs = await self.collection.find({"user_id": user_id}).sort("created_at", -1).to_list(None)
        return [LedgerEntry(**doc) for doc in docs]

    async def find_by_user_and_range(
        self,
        user_id: str,
        start: Optional[datetime],
        end: Optional[datetime],
    ) -> List[LedgerEntry]:
        """Entries with ``start <= created_at < end``; a missing bound is open."""
        query: dict = {"user_id": user_id}
        created_at = {}
        if start is not None:
            created_at["$gte"] = start
        if end is not None:
            created_at["$lt"] = end
        if created_at:
            query["created_at"] = created_at

        with storage_errors("find ledger entries"):
            docs = await self.collection.find(query).sort("created_at", -1).to_list(None)
        return [LedgerEntry(**doc) for doc in docs]

    async def sum_balance(self, user_id: str) -> Decimal:
        """Credits minus debits for one user."""
        pipeline = [
            {"$match": {"user_id": user_id}},
            {
                "$group": {
                    "_id": None,
                    "total": {
                        "$sum": {
                            "$cond": [
                                {"$eq": ["$direction", EntryDirection.CREDIT.value]},
                                "$amount",
                                {"$multiply": ["$amount", -1]}
                            ]
                        }
                    }
                }
            }
        ]
        with storage_errors("aggregate balance"):
            result = await self.collection.aggregate(pipeline).to_list(1)
        if not result:
            return ZERO
        return as_decimal(result[0]["total"])

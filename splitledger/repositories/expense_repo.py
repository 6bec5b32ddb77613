from typing import Any, List

from motor.motor_asyncio import AsyncIOMotorDatabase

from splitledger.models.expense import Expense
from splitledger.repositories.base import storage_errors, to_document


class ExpenseRepository:
    """Append-only expense records."""

    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db
        self.collection = db["expenses"]

    async def save(self, expense: Expense, session: Any = None) -> Expense:
        with storage_errors("insert expense"):
            await self.collection.insert_one(to_document(expense), session=session)
        return expense

    async def find_by_group(self, group_id: str) -> List[Expense]:
        """Group expenses, oldest first."""
        with storage_errors("find expenses"):
            docs = await self.collection.find({"group_id": group_id}).sort("created_at", 1).to_list(None)
        return [Expense(**doc) for doc in docs]

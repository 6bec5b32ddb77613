from typing import Any, List

from motor.motor_asyncio import AsyncIOMotorDatabase

from splitledger.models.settlement import Settlement
from splitledger.repositories.base import storage_errors, to_document


class SettlementRepository:
    """Settlement records; created once, never edited."""

    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db
        self.collection = db["settlements"]

    async def save(self, settlement: Settlement, session: Any = None) -> Settlement:
        with storage_errors("insert settlement"):
            await self.collection.insert_one(to_document(settlement), session=session)
        return settlement

    async def find_by_user(self, user_id: str) -> List[Settlement]:
        """Settlements where the user paid or was paid, newest first."""
        return await self._find(
            {"$or": [{"debtor_id": user_id}, {"creditor_id": user_id}]}, direction=-1,
        )

    async def find_between(self, user_a: str, user_b: str) -> List[Settlement]:
        return await self._find(
            {"$or": [
                {"debtor_id": user_a, "creditor_id": user_b},
                {"debtor_id": user_b, "creditor_id": user_a},
            ]},
            direction=-1,
        )

    async def find_by_group(self, group_id: str) -> List[Settlement]:
        return await self._find({"group_id": group_id}, direction=1)

    async def _find(self, query: dict, direction: int) -> List[Settlement]:
        with storage_errors("find settlements"):
            docs = await self.collection.find(query).sort("settled_at", direction).to_list(None)
        return [Settlement(**doc) for doc in docs]

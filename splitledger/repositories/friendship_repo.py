from typing import Any, List

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo.errors import DuplicateKeyError

from splitledger.core.errors import DuplicateRelationship
from splitledger.models.user import Friendship
from splitledger.repositories.base import storage_errors, to_document


class FriendshipRepository:
    """One document per unordered pair of friends."""

    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db
        self.collection = db["friendships"]

    async def add(self, friendship: Friendship, session: Any = None) -> None:
        try:
            with storage_errors("insert friendship"):
                await self.collection.insert_one(to_document(friendship), session=session)
        except DuplicateKeyError:
            raise DuplicateRelationship("Already friends")

    async def remove(self, user_id: str, friend_id: str, session: Any = None) -> bool:
        pair = Friendship.between(user_id, friend_id)
        with storage_errors("delete friendship"):
            result = await self.collection.delete_one(
                {"user_id": pair.user_id, "friend_id": pair.friend_id}, session=session,
            )
        return result.deleted_count > 0

    async def exists(self, user_id: str, friend_id: str) -> bool:
        pair = Friendship.between(user_id, friend_id)
        with storage_errors("find friendship"):
            doc = await self.collection.find_one({"user_id": pair.user_id, "friend_id": pair.friend_id})
        return doc is not None

    async def friend_ids(self, user_id: str) -> List[str]:
        with storage_errors("find friendships"):
            docs = await self.collection.find(
                {"$or": [{"user_id": user_id}, {"friend_id": user_id}]}
            ).sort("created_at", 1).to_list(None)
        return [Friendship(**doc).other(user_id) for doc in docs]

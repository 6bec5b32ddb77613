from typing import Any, List, Optional, Sequence

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo.errors import DuplicateKeyError

from splitledger.core.errors import DuplicateRelationship
from splitledger.models.user import Group, GroupMembership
from splitledger.repositories.base import storage_errors, to_document


class GroupRepository:
    """Groups plus their membership association records."""

    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db
        self.collection = db["groups"]
        self.members = db["group_members"]

    async def create_group(
        self, group: Group, member_ids: Sequence[str], session: Any = None,
    ) -> Group:
        with storage_errors("insert group"):
            await self.collection.insert_one(to_document(group), session=session)
            if member_ids:
                await self.members.insert_many(
                    [
                        to_document(GroupMembership(group_id=group.id, user_id=user_id))
                        for user_id in member_ids
                    ],
                    session=session,
                )
        return group

    async def get_group(self, group_id: str) -> Optional[Group]:
        with storage_errors("find group"):
            doc = await self.collection.find_one({"_id": group_id, "is_active": True})
        if doc:
            return Group(**doc)
        return None

    async def add_member(self, group_id: str, user_id: str, session: Any = None) -> None:
        membership = GroupMembership(group_id=group_id, user_id=user_id)
        try:
            with storage_errors("insert group member"):
                await self.members.insert_one(to_document(membership), session=session)
        except DuplicateKeyError:
            raise DuplicateRelationship(f"User {user_id} is already a member of group {group_id}")

    async def is_member(self, group_id: str, user_id: str) -> bool:
        with storage_errors("find group member"):
            doc = await self.members.find_one({"group_id": group_id, "user_id": user_id})
        return doc is not None

    async def member_ids(self, group_id: str) -> List[str]:
        """Member ids in join order."""
        with storage_errors("find group members"):
            docs = await self.members.find({"group_id": group_id}).sort(
                [("joined_at", 1), ("_id", 1)]
            ).to_list(None)
        return [doc["user_id"] for doc in docs]

    async def find_by_member(self, user_id: str) -> List[Group]:
        with storage_errors("find user groups"):
            memberships = await self.members.find({"user_id": user_id}).to_list(None)
            group_ids = [doc["group_id"] for doc in memberships]
            if not group_ids:
                return []
            docs = await self.collection.find({
                "_id": {"$in": group_ids},
                "is_active": True
            }).sort("created_at", -1).to_list(None)
        return [Group(**doc) for doc in docs]

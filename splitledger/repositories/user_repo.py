import re
from typing import Any, List, Optional, Sequence

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError

from splitledger.core.errors import AlreadyExists
from splitledger.models.user import User
from splitledger.repositories.base import storage_errors, to_document


class UserRepository:
    """User database operations (AccountStore)."""

    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db
        self.collection = db["users"]

    async def create_user(self, user: User, session: Any = None) -> User:
        """Insert a user record. Username and email are unique."""
        try:
            with storage_errors("insert user"):
                await self.collection.insert_one(to_document(user), session=session)
        except DuplicateKeyError:
            raise AlreadyExists(f"Username or email already exists: {user.username}")
        return user

    async def get_user(self, user_id: str) -> Optional[User]:
        with storage_errors("find user"):
            doc = await self.collection.find_one({"_id": user_id, "is_active": True})
        if doc:
            return User(**doc)
        return None

    async def find_by_login(self, username_or_email: str) -> Optional[User]:
        """Active user whose username or email is ``username_or_email``."""
        with storage_errors("find user"):
            doc = await self.collection.find_one({
                "$or": [{"username": username_or_email}, {"email": username_or_email}],
                "is_active": True
            })
        if doc:
            return User(**doc)
        return None

    async def username_exists(self, username: str) -> bool:
        with storage_errors("find user"):
            return await self.collection.count_documents({"username": username}, limit=1) > 0

    async def email_exists(self, email: str) -> bool:
        with storage_errors("find user"):
            return await self.collection.count_documents({"email": email}, limit=1) > 0

    async def find_users_by_ids(self, user_ids: Sequence[str]) -> List[User]:
        """Users for ``user_ids`` in the requested order; unknown ids are skipped."""
        if not user_ids:
            return []
        with storage_errors("find users"):
            docs = await self.collection.find({"_id": {"$in": list(user_ids)}}).to_list(None)
        by_id = {doc["_id"]: User(**doc) for doc in docs}
        return [by_id[user_id] for user_id in user_ids if user_id in by_id]

    async def search_users(self, query: str, limit: int = 20) -> List[User]:
        """Case-insensitive substring match on username, email or full name."""
        pattern = {"$regex": re.escape(query), "$options": "i"}
        with storage_errors("search users"):
            docs = await self.collection.find({
                "$or": [{"username": pattern}, {"email": pattern}, {"full_name": pattern}],
                "is_active": True
            }).sort("username", 1).to_list(limit)
        return [User(**doc) for doc in docs]

    async def update_profile(self, user_id: str, changes: dict, session: Any = None) -> Optional[User]:
        with storage_errors("update user"):
            doc = await self.collection.find_one_and_update(
                {"_id": user_id, "is_active": True},
                {"$set": changes},
                return_document=ReturnDocument.AFTER,
                session=session,
            )
        if doc:
            return User(**doc)
        return None

import logging
from typing import List

from splitledger.core.errors import DuplicateRelationship, NotFound, SelfReference
from splitledger.models.user import Friendship, User
from splitledger.repositories.protocols import AccountStore, FriendshipStore, UnitOfWork

logger = logging.getLogger(__name__)


class FriendService:
    def __init__(self, uow: UnitOfWork, accounts: AccountStore, friendships: FriendshipStore):
        self.uow = uow
        self.accounts = accounts
        self.friendships = friendships

    async def add_friend(self, user_id: str, friend_id: str) -> None:
        if user_id == friend_id:
            raise SelfReference("Cannot add yourself as friend", user_id)
        await self._require_user("User", user_id)
        await self._require_user("Friend", friend_id)

        if await self.friendships.exists(user_id, friend_id):
            raise DuplicateRelationship("Already friends")

        async with self.uow.transaction() as session:
            await self.friendships.add(Friendship.between(user_id, friend_id), session=session)
        logger.info("Added friend %s", friend_id, extra={"user_id": user_id})

    async def remove_friend(self, user_id: str, friend_id: str) -> None:
        await self._require_user("User", user_id)
        await self._require_user("Friend", friend_id)

        async with self.uow.transaction() as session:
            removed = await self.friendships.remove(user_id, friend_id, session=session)
        if not removed:
            raise NotFound("Friendship", f"{user_id}:{friend_id}")
        logger.info("Removed friend %s", friend_id, extra={"user_id": user_id})

    async def get_friends(self, user_id: str) -> List[User]:
        await self._require_user("User", user_id)
        return await self.accounts.find_users_by_ids(await self.friendships.friend_ids(user_id))

    async def _require_user(self, label: str, user_id: str) -> User:
        user = await self.accounts.get_user(user_id)
        if user is None:
            raise NotFound(label, user_id)
        return user

import logging
from typing import List, Optional

from splitledger.core.config import settings
from splitledger.core.errors import NotFound
from splitledger.repositories.protocols import AccountStore, FriendshipStore, GroupStore
from splitledger.schemas.user import UserProfileResponse, UserSearchResponse
from splitledger.services.balance_aggregator import BalanceAggregator

logger = logging.getLogger(__name__)

SEARCH_LIMIT = 20


class UserService:
    def __init__(
        self,
        accounts: AccountStore,
        groups: GroupStore,
        friendships: FriendshipStore,
        balances: BalanceAggregator,
    ):
        self.accounts = accounts
        self.groups = groups
        self.friendships = friendships
        self.balances = balances

    async def get_user_profile(self, user_id: str) -> UserProfileResponse:
        """User details plus current balance and relationship counts."""
        user = await self.accounts.get_user(user_id)
        if user is None:
            raise NotFound("User", user_id)

        return UserProfileResponse(
            id=user.id,
            username=user.username,
            email=user.email,
            full_name=user.full_name,
            phone_number=user.phone_number,
            current_balance=await self.balances.net_balance(user_id),
            currency=settings.CURRENCY,
            friend_count=len(await self.friendships.friend_ids(user_id)),
            group_count=len(await self.groups.find_by_member(user_id)),
            member_since=user.created_at,
        )

    async def update_profile(
        self,
        user_id: str,
        full_name: Optional[str] = None,
        phone_number: Optional[str] = None,
    ) -> UserProfileResponse:
        changes = {}
        if full_name is not None:
            changes["full_name"] = full_name
        if phone_number is not None:
            changes["phone_number"] = phone_number

        if changes:
            if await self.accounts.update_profile(user_id, changes) is None:
                raise NotFound("User", user_id)
            logger.info("Updated profile fields %s", sorted(changes), extra={"user_id": user_id})
        return await self.get_user_profile(user_id)

    async def search_users(self, query: str, current_user_id: str) -> List[UserSearchResponse]:
        """Matches other than the caller, flagged when already a friend."""
        friend_ids = set(await self.friendships.friend_ids(current_user_id))
        users = await self.accounts.search_users(query, limit=SEARCH_LIMIT + 1)
        return [
            UserSearchResponse(
                id=user.id,
                username=user.username,
                full_name=user.full_name,
                email=user.email,
                is_friend=user.id in friend_ids,
            )
            for user in users
            if user.id != current_user_id
        ][:SEARCH_LIMIT]

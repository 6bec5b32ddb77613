import logging
from typing import List, Optional, Sequence

from splitledger.core.errors import DuplicateRelationship, NotFound
from splitledger.models.user import Group, User
from splitledger.repositories.protocols import AccountStore, GroupStore, UnitOfWork
from splitledger.schemas.group import BalanceResponse, GroupResponse, MemberInfo
from splitledger.services.balance_aggregator import BalanceAggregator

logger = logging.getLogger(__name__)


class GroupService:
    def __init__(
        self,
        uow: UnitOfWork,
        accounts: AccountStore,
        groups: GroupStore,
        balances: BalanceAggregator,
    ):
        self.uow = uow
        self.accounts = accounts
        self.groups = groups
        self.balances = balances

    async def create_group(
        self,
        creator_id: str,
        name: str,
        description: Optional[str] = None,
        member_ids: Sequence[str] = (),
    ) -> GroupResponse:
        """Create a group; the creator is always its first member."""
        creator = await self.accounts.get_user(creator_id)
        if creator is None:
            raise NotFound("User", creator_id)

        all_member_ids = list(dict.fromkeys([creator_id, *member_ids]))
        found = {user.id for user in await self.accounts.find_users_by_ids(all_member_ids)}
        for member_id in all_member_ids:
            if member_id not in found:
                raise NotFound("Member", member_id)

        group = Group(name=name, description=description, created_by=creator_id)
        async with self.uow.transaction() as session:
            await self.groups.create_group(group, all_member_ids, session=session)

        logger.info(
            "Created group %s with %d members", name, len(all_member_ids),
            extra={"group_id": group.id, "user_id": creator_id},
        )
        return await self._to_response(group)

    async def get_group(self, group_id: str) -> GroupResponse:
        return await self._to_response(await self._require_group(group_id))

    async def get_user_groups(self, user_id: str) -> List[GroupResponse]:
        return [await self._to_response(group) for group in await self.groups.find_by_member(user_id)]

    async def add_member(self, group_id: str, user_id: str) -> None:
        await self._require_group(group_id)
        if await self.accounts.get_user(user_id) is None:
            raise NotFound("User", user_id)
        if await self.groups.is_member(group_id, user_id):
            raise DuplicateRelationship(f"User {user_id} is already a member of group {group_id}")

        async with self.uow.transaction() as session:
            await self.groups.add_member(group_id, user_id, session=session)
        logger.info("Added member to group", extra={"group_id": group_id, "user_id": user_id})

    async def get_group_balances(self, group_id: str) -> List[BalanceResponse]:
        """Net position of every member, in member order."""
        balances = await self.balances.group_balances(group_id)
        users = await self.accounts.find_users_by_ids(list(balances))
        usernames = {user.id: user.username for user in users}
        return [
            BalanceResponse(
                user_id=user_id,
                username=usernames.get(user_id, "Unknown"),
                balance=balance,
            )
            for user_id, balance in balances.items()
        ]

    async def _require_group(self, group_id: str) -> Group:
        group = await self.groups.get_group(group_id)
        if group is None:
            raise NotFound("Group", group_id)
        return group

    async def _to_response(self, group: Group) -> GroupResponse:
        members = await self.accounts.find_users_by_ids(await self.groups.member_ids(group.id))
        creator = next((m for m in members if m.id == group.created_by), None)
        if creator is None:
            creator = await self.accounts.get_user(group.created_by)
        return GroupResponse(
            id=group.id,
            name=group.name,
            description=group.description,
            created_by_username=creator.username if creator else "Unknown",
            members=[_member_info(member) for member in members],
            created_at=group.created_at,
        )


def _member_info(user: User) -> MemberInfo:
    return MemberInfo(id=user.id, username=user.username, full_name=user.full_name)

"""Dependency wiring: Mongo repositories -> engine -> services."""

from dataclasses import dataclass

from fastapi import Depends

from splitledger.core.auth import get_current_user_id
from splitledger.core.errors import Unauthorized
from splitledger.db.mongo import get_db
from splitledger.db.session import MongoUnitOfWork
from splitledger.models.user import User
from splitledger.repositories.expense_repo import ExpenseRepository
from splitledger.repositories.friendship_repo import FriendshipRepository
from splitledger.repositories.group_repo import GroupRepository
from splitledger.repositories.ledger_repo import LedgerRepository
from splitledger.repositories.protocols import (
    AccountStore,
    ExpenseStore,
    FriendshipStore,
    GroupStore,
    LedgerStore,
    SettlementStore,
    UnitOfWork,
)
from splitledger.repositories.settlement_repo import SettlementRepository
from splitledger.repositories.user_repo import UserRepository
from splitledger.services.analytics_service import AnalyticsService
from splitledger.services.auth_service import AuthService
from splitledger.services.balance_aggregator import BalanceAggregator
from splitledger.services.expense_service import ExpenseService
from splitledger.services.friend_service import FriendService
from splitledger.services.group_service import GroupService
from splitledger.services.ledger_service import LedgerEngine, LedgerService
from splitledger.services.settlement_service import SettlementService
from splitledger.services.user_service import UserService


@dataclass(frozen=True)
class Stores:
    uow: UnitOfWork
    accounts: AccountStore
    groups: GroupStore
    expenses: ExpenseStore
    ledger: LedgerStore
    settlements: SettlementStore
    friendships: FriendshipStore


def get_stores(db = Depends(get_db)) -> Stores:
    return Stores(
        uow=MongoUnitOfWork(db.client),
        accounts=UserRepository(db),
        groups=GroupRepository(db),
        expenses=ExpenseRepository(db),
        ledger=LedgerRepository(db),
        settlements=SettlementRepository(db),
        friendships=FriendshipRepository(db),
    )


async def get_current_user(
    user_id: str = Depends(get_current_user_id),
    stores: Stores = Depends(get_stores),
) -> User:
    user = await stores.accounts.get_user(user_id)
    if user is None:
        raise Unauthorized("User not found")
    return user


def _balances(stores: Stores) -> BalanceAggregator:
    return BalanceAggregator(stores.ledger, stores.expenses, stores.settlements, stores.groups)


def get_expense_service(stores: Stores = Depends(get_stores)) -> ExpenseService:
    return ExpenseService(
        stores.uow, stores.accounts, stores.groups, stores.expenses, LedgerEngine(stores.ledger),
    )


def get_settlement_service(stores: Stores = Depends(get_stores)) -> SettlementService:
    return SettlementService(
        stores.uow, stores.accounts, stores.groups, stores.settlements, LedgerEngine(stores.ledger),
    )


def get_group_service(stores: Stores = Depends(get_stores)) -> GroupService:
    return GroupService(stores.uow, stores.accounts, stores.groups, _balances(stores))


def get_ledger_service(stores: Stores = Depends(get_stores)) -> LedgerService:
    return LedgerService(stores.ledger, stores.accounts, _balances(stores))


def get_analytics_service(stores: Stores = Depends(get_stores)) -> AnalyticsService:
    return AnalyticsService(stores.ledger, stores.accounts, _balances(stores))


def get_friend_service(stores: Stores = Depends(get_stores)) -> FriendService:
    return FriendService(stores.uow, stores.accounts, stores.friendships)


def get_user_service(stores: Stores = Depends(get_stores)) -> UserService:
    return UserService(stores.accounts, stores.groups, stores.friendships, _balances(stores))


def get_auth_service(stores: Stores = Depends(get_stores)) -> AuthService:
    return AuthService(stores.uow, stores.accounts)

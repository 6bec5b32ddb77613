"""Store protocols - the contracts the engine consumes.

Invariants:
    - Services depend on these Protocols only, never on motor directly
    - Every write accepts the ``session`` yielded by ``UnitOfWork.transaction()``
      so all writes of one operation commit together or not at all
    - Amounts come back as exact Decimals
    - I/O failures surface as StorageFailure
"""

from datetime import datetime
from decimal import Decimal
from typing import Any, AsyncContextManager, List, Optional, Protocol, Sequence

from splitledger.models.expense import Expense
from splitledger.models.ledger import LedgerEntry
from splitledger.models.settlement import Settlement
from splitledger.models.user import Friendship, Group, User


class UnitOfWork(Protocol):
    """Opens one atomic transaction; the yielded session is opaque to callers."""
    def transaction(self) -> AsyncContextManager[Any]: ...


class AccountStore(Protocol):
    async def get_user(self, user_id: str) -> Optional[User]: ...
    async def find_users_by_ids(self, user_ids: Sequence[str]) -> List[User]: ...
    async def create_user(self, user: User, session: Any = None) -> User: ...
    async def find_by_login(self, username_or_email: str) -> Optional[User]: ...
    async def username_exists(self, username: str) -> bool: ...
    async def email_exists(self, email: str) -> bool: ...
    async def search_users(self, query: str, limit: int = 20) -> List[User]: ...
    async def update_profile(
        self, user_id: str, changes: dict, session: Any = None,
    ) -> Optional[User]: ...


class GroupStore(Protocol):
    async def get_group(self, group_id: str) -> Optional[Group]: ...
    async def create_group(
        self, group: Group, member_ids: Sequence[str], session: Any = None,
    ) -> Group: ...
    async def add_member(self, group_id: str, user_id: str, session: Any = None) -> None: ...
    async def is_member(self, group_id: str, user_id: str) -> bool: ...
    async def member_ids(self, group_id: str) -> List[str]: ...
    async def find_by_member(self, user_id: str) -> List[Group]: ...


class ExpenseStore(Protocol):
    async def save(self, expense: Expense, session: Any = None) -> Expense: ...
    async def find_by_group(self, group_id: str) -> List[Expense]: ...


class LedgerStore(Protocol):
    async def save_entry_pair(
        self, debit: LedgerEntry, credit: LedgerEntry, session: Any = None,
    ) -> None: ...
    async def find_by_user(self, user_id: str) -> List[LedgerEntry]: ...
    async def find_by_user_and_range(
        self, user_id: str, start: Optional[datetime], end: Optional[datetime],
    ) -> List[LedgerEntry]: ...
    async def sum_balance(self, user_id: str) -> Decimal: ...


class SettlementStore(Protocol):
    async def save(self, settlement: Settlement, session: Any = None) -> Settlement: ...
    async def find_by_user(self, user_id: str) -> List[Settlement]: ...
    async def find_between(self, user_a: str, user_b: str) -> List[Settlement]: ...
    async def find_by_group(self, group_id: str) -> List[Settlement]: ...


class FriendshipStore(Protocol):
    async def add(self, friendship: Friendship, session: Any = None) -> None: ...
    async def remove(self, user_id: str, friend_id: str, session: Any = None) -> bool: ...
    async def exists(self, user_id: str, friend_id: str) -> bool: ...
    async def friend_ids(self, user_id: str) -> List[str]: ...

import logging
import uuid
from decimal import Decimal
from typing import Any, List, Optional, Tuple

from splitledger.core.config import settings
from splitledger.core.errors import InvalidSplit, NotFound
from splitledger.core.money import ZERO, round_money
from splitledger.models.ledger import EntryDirection, LedgerEntry
from splitledger.repositories.protocols import AccountStore, LedgerStore
from splitledger.schemas.wallet import TransactionResponse, WalletBalanceResponse
from splitledger.services.balance_aggregator import BalanceAggregator

logger = logging.getLogger(__name__)


class LedgerEngine:
    """Writes balanced DEBIT/CREDIT pairs."""

    def __init__(self, ledger: LedgerStore):
        self.ledger = ledger

    async def record_double_entry(
        self,
        from_user_id: str,
        to_user_id: str,
        amount: Decimal,
        description: str,
        expense_id: Optional[str] = None,
        session: Any = None,
    ) -> Tuple[LedgerEntry, LedgerEntry]:
        """
        Record that ``from_user_id`` owes ``to_user_id`` ``amount``.

        Both halves share one reference id and are written in a single
        ``save_entry_pair`` call. Storage errors propagate as StorageFailure.
        """
        if amount <= ZERO:
            raise InvalidSplit(
                f"Ledger amount must be positive, got: {amount}", amount=str(amount),
            )
        amount = round_money(amount)
        reference_id = str(uuid.uuid4())

        debit = LedgerEntry(
            user_id=from_user_id,
            direction=EntryDirection.DEBIT,
            amount=amount,
            counterparty_id=to_user_id,
            reference_id=reference_id,
            expense_id=expense_id,
            description=description,
        )
        credit = LedgerEntry(
            user_id=to_user_id,
            direction=EntryDirection.CREDIT,
            amount=amount,
            counterparty_id=from_user_id,
            reference_id=reference_id,
            expense_id=expense_id,
            description=description,
            created_at=debit.created_at,
        )

        await self.ledger.save_entry_pair(debit, credit, session=session)
        logger.debug(
            "Posted %s from %s to %s", amount, from_user_id, to_user_id,
            extra={"reference_id": reference_id},
        )
        return debit, credit


class LedgerService:
    """Wallet reads: balance and transaction history."""

    def __init__(self, ledger: LedgerStore, accounts: AccountStore, balances: BalanceAggregator):
        self.ledger = ledger
        self.accounts = accounts
        self.balances = balances

    async def get_user_balance(self, user_id: str) -> WalletBalanceResponse:
        user = await self.accounts.get_user(user_id)
        if user is None:
            raise NotFound("User", user_id)

        balance = await self.balances.net_balance(user_id)
        return WalletBalanceResponse(
            user_id=user_id,
            username=user.username,
            balance=balance,
            currency=settings.CURRENCY,
        )

    async def get_user_transactions(self, user_id: str) -> List[LedgerEntry]:
        """All of the user's entries, newest first."""
        if await self.accounts.get_user(user_id) is None:
            raise NotFound("User", user_id)
        entries = await self.ledger.find_by_user(user_id)
        return sorted(entries, key=lambda entry: entry.created_at, reverse=True)

    async def describe_transactions(self, entries: List[LedgerEntry]) -> List[TransactionResponse]:
        """Attach counterparty usernames for display."""
        counterparty_ids = list(dict.fromkeys(entry.counterparty_id for entry in entries))
        users = await self.accounts.find_users_by_ids(counterparty_ids)
        usernames = {user.id: user.username for user in users}
        return [
            TransactionResponse(
                id=entry.id,
                transaction_type=entry.direction,
                amount=entry.amount,
                counterparty_username=usernames.get(entry.counterparty_id, "System"),
                description=entry.description,
                reference_id=entry.reference_id,
                expense_id=entry.expense_id,
                created_at=entry.created_at,
            )
            for entry in entries
        ]

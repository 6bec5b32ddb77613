import logging
from decimal import Decimal
from typing import List, Optional

from splitledger.core.errors import InvalidSplit, NotFound, SelfSettlement
from splitledger.core.money import ZERO, is_whole_cents, round_money
from splitledger.models.settlement import Settlement, SettlementStatus
from splitledger.repositories.protocols import (
    AccountStore,
    GroupStore,
    SettlementStore,
    UnitOfWork,
)
from splitledger.schemas.settlement import SettlementResponse, SettlementResult
from splitledger.services.ledger_service import LedgerEngine

logger = logging.getLogger(__name__)


class SettlementService:
    def __init__(
        self,
        uow: UnitOfWork,
        accounts: AccountStore,
        groups: GroupStore,
        settlements: SettlementStore,
        engine: LedgerEngine,
    ):
        self.uow = uow
        self.accounts = accounts
        self.groups = groups
        self.settlements = settlements
        self.engine = engine

    async def settle_up(
        self,
        debtor_id: str,
        creditor_id: str,
        group_id: str,
        amount: Decimal,
        note: Optional[str] = None,
    ) -> SettlementResult:
        """
        Record a payment from debtor to creditor.

        The settlement posts the reverse pair (creditor DEBIT, debtor CREDIT),
        which moves both wallet balances toward zero.
        """
        if debtor_id == creditor_id:
            raise SelfSettlement(debtor_id)
        if amount <= ZERO:
            raise InvalidSplit(
                f"Settlement amount must be positive, got: {amount}", amount=str(amount),
            )
        if not is_whole_cents(amount):
            raise InvalidSplit(
                f"Settlement amount has sub-cent digits: {amount}", amount=str(amount),
            )
        amount = round_money(amount)

        debtor = await self.accounts.get_user(debtor_id)
        if debtor is None:
            raise NotFound("Debtor", debtor_id)
        creditor = await self.accounts.get_user(creditor_id)
        if creditor is None:
            raise NotFound("Creditor", creditor_id)
        if await self.groups.get_group(group_id) is None:
            raise NotFound("Group", group_id)

        settlement = Settlement(
            debtor_id=debtor_id,
            creditor_id=creditor_id,
            group_id=group_id,
            amount=amount,
            note=note,
            status=SettlementStatus.COMPLETED,
        )

        async with self.uow.transaction() as session:
            await self.settlements.save(settlement, session=session)
            debit, _ = await self.engine.record_double_entry(
                creditor_id,
                debtor_id,
                amount,
                "Settlement: " + (note if note else "Payment received"),
                session=session,
            )

        logger.info(
            "Settlement completed: %s paid %s to %s",
            debtor.username, amount, creditor.username,
            extra={"settlement_id": settlement.id, "group_id": group_id},
        )
        return SettlementResult(settlement=settlement, reference_id=debit.reference_id)

    async def get_user_settlements(self, user_id: str) -> List[SettlementResponse]:
        return await self.to_responses(await self.settlements.find_by_user(user_id))

    async def get_settlements_between(self, user_a: str, user_b: str) -> List[SettlementResponse]:
        return await self.to_responses(await self.settlements.find_between(user_a, user_b))

    async def get_group_settlements(self, group_id: str) -> List[SettlementResponse]:
        if await self.groups.get_group(group_id) is None:
            raise NotFound("Group", group_id)
        return await self.to_responses(await self.settlements.find_by_group(group_id))

    async def to_responses(self, settlements: List[Settlement]) -> List[SettlementResponse]:
        user_ids = {s.debtor_id for s in settlements} | {s.creditor_id for s in settlements}
        users = await self.accounts.find_users_by_ids(sorted(user_ids))
        usernames = {user.id: user.username for user in users}
        return [
            SettlementResponse(
                settlement_id=s.id,
                debtor_username=usernames.get(s.debtor_id, "Unknown"),
                creditor_username=usernames.get(s.creditor_id, "Unknown"),
                group_id=s.group_id,
                amount=s.amount,
                note=s.note,
                status=s.status.value,
                settled_at=s.settled_at,
            )
            for s in settlements
        ]

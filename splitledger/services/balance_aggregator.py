"""
BalanceAggregator - fold ledger history into net positions.

Two paths, same sign convention (positive = owed to the user):

- wallet path: credits minus debits over a user's ledger entries. This is
  the authoritative balance.
- group path: replay the group's expenses through the split calculator and
  apply the group's settlements. The payer is credited with exactly what the
  other participants owe, so the replay posts the same amounts the ledger
  did and always sums to zero.

The fold functions are pure and build a fresh dict on every call.
"""

import logging
from datetime import datetime
from decimal import Decimal
from typing import Dict, Iterable, Optional

from splitledger.core.errors import NotFound
from splitledger.core.money import ZERO, round_money, sum_money
from splitledger.models.expense import Expense
from splitledger.models.ledger import LedgerEntry
from splitledger.models.settlement import Settlement, SettlementStatus
from splitledger.repositories.protocols import (
    ExpenseStore,
    GroupStore,
    LedgerStore,
    SettlementStore,
)
from splitledger.services.split_calculator import split_recorded_expense

logger = logging.getLogger(__name__)


def fold_entries(entries: Iterable[LedgerEntry]) -> Decimal:
    """Sum of CREDIT amounts minus sum of DEBIT amounts."""
    return sum_money(entry.signed_amount() for entry in entries)


def fold_group_activity(
    member_ids: Iterable[str],
    expenses: Iterable[Expense],
    settlements: Iterable[Settlement],
) -> Dict[str, Decimal]:
    """Replay expenses then settlements on top of every member at zero."""
    balances: Dict[str, Decimal] = {user_id: ZERO for user_id in member_ids}

    for expense in expenses:
        if not expense.participant_ids and not expense.shares:
            logger.warning(
                "Expense %s has no participants, skipping", expense.id,
                extra={"expense_id": expense.id},
            )
            continue
        obligations = split_recorded_expense(expense)
        balances.setdefault(expense.paid_by, ZERO)
        for obligation in obligations:
            balances[expense.paid_by] += obligation.amount
            balances[obligation.user_id] = balances.get(obligation.user_id, ZERO) - obligation.amount

    for settlement in settlements:
        if settlement.status is not SettlementStatus.COMPLETED:
            continue
        # Paying down a debt moves the debtor up and the creditor down
        balances[settlement.debtor_id] = balances.get(settlement.debtor_id, ZERO) + settlement.amount
        balances[settlement.creditor_id] = balances.get(settlement.creditor_id, ZERO) - settlement.amount

    return {user_id: round_money(amount) for user_id, amount in balances.items()}


class BalanceAggregator:
    """Reads history through the stores and folds it into balances."""

    def __init__(
        self,
        ledger: LedgerStore,
        expenses: ExpenseStore,
        settlements: SettlementStore,
        groups: GroupStore,
    ):
        self.ledger = ledger
        self.expenses = expenses
        self.settlements = settlements
        self.groups = groups

    async def net_balance(
        self,
        user_id: str,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> Decimal:
        """Wallet balance, optionally limited to ``start <= created_at < end``."""
        if start is None and end is None:
            return round_money(await self.ledger.sum_balance(user_id))
        entries = await self.ledger.find_by_user_and_range(user_id, start, end)
        return fold_entries(entries)

    async def group_balances(self, group_id: str) -> Dict[str, Decimal]:
        group = await self.groups.get_group(group_id)
        if group is None:
            raise NotFound("Group", group_id)

        member_ids = await self.groups.member_ids(group_id)
        expenses = await self.expenses.find_by_group(group_id)
        settlements = await self.settlements.find_by_group(group_id)
        return fold_group_activity(member_ids, expenses, settlements)

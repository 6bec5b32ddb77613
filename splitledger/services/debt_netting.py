"""
DebtNettingEngine - reduce net balances to a short list of payments.

Greedy two-cursor matching over debtors and creditors in input order:
settle min(debt, credit), move past whichever side is cleared, repeat until
one side runs out. Each step clears at least one party, so a plan never has
more than ``debtors + creditors - 1`` entries.
"""

import logging
from decimal import Decimal
from typing import List, Mapping, Optional

from splitledger.core.money import ZERO, is_settled, round_money
from splitledger.models.settlement import SettlementPlanEntry

logger = logging.getLogger(__name__)

UNKNOWN_USERNAME = "Unknown"


def net_debts(
    balances: Mapping[str, Decimal],
    usernames: Optional[Mapping[str, str]] = None,
) -> List[SettlementPlanEntry]:
    """
    Compute the payments that zero out ``balances``.

    Positive balance = the user is owed money, negative = the user owes.
    ``usernames`` maps user ids to display names; missing ids show as "Unknown".
    """
    usernames = usernames or {}

    debtors = []
    creditors = []
    for user_id, balance in balances.items():
        if is_settled(balance):
            continue
        if balance < ZERO:
            debtors.append([user_id, -balance])
        else:
            creditors.append([user_id, balance])

    plan: List[SettlementPlanEntry] = []
    i = 0
    j = 0

    while i < len(debtors) and j < len(creditors):
        debtor = debtors[i]
        creditor = creditors[j]

        amount = min(debtor[1], creditor[1])
        plan.append(SettlementPlanEntry(
            debtor_id=debtor[0],
            debtor_username=usernames.get(debtor[0], UNKNOWN_USERNAME),
            creditor_id=creditor[0],
            creditor_username=usernames.get(creditor[0], UNKNOWN_USERNAME),
            amount=round_money(amount),
        ))

        debtor[1] -= amount
        creditor[1] -= amount

        if is_settled(debtor[1]):
            i += 1
        if is_settled(creditor[1]):
            j += 1

    logger.debug(
        "Netted %d debtors and %d creditors into %d payments",
        len(debtors), len(creditors), len(plan),
    )
    return plan

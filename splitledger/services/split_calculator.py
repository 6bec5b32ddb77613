"""
SplitCalculator - turns one expense into what each participant owes the payer.

Pure and deterministic: no I/O and no writes. Every validation error is raised
here, before the caller touches storage.

Rules:
- EQUAL:      share = round_half_up(total / count) for each participant
- EXACT:      supplied whole-cent amounts, each > 0, sum within one cent of the total
- PERCENTAGE: supplied percentages in (0, 100], summing to exactly 100;
              owed = round_half_up(total * pct / 100)
- The payer never owes themself, so their own line is skipped.
"""

import logging
from decimal import Decimal
from typing import Callable, Dict, List, Sequence

from splitledger.core.errors import InvalidSplit
from splitledger.core.money import CENT, HUNDRED, ZERO, is_whole_cents, round_money
from splitledger.models.expense import Expense, ExpenseShare, Obligation, SplitPolicy

logger = logging.getLogger(__name__)


def split_expense(
    total: Decimal,
    paid_by: str,
    policy: "SplitPolicy | str",
    participant_ids: Sequence[str] = (),
    shares: Sequence[ExpenseShare] = (),
) -> List[Obligation]:
    """
    Compute the obligations for one expense.

    EQUAL reads ``participant_ids``; EXACT and PERCENTAGE read ``shares``.
    Raises InvalidSplit on any bad input.
    """
    policy = SplitPolicy.parse(policy)
    if total <= ZERO:
        raise InvalidSplit(f"Expense amount must be positive, got: {total}", amount=str(total))
    if not is_whole_cents(total):
        raise InvalidSplit(f"Expense amount has sub-cent digits: {total}", amount=str(total))

    owed = _SPLITTERS[policy](total, participant_ids, shares)

    obligations = []
    for user_id, amount in owed:
        if user_id == paid_by:
            continue
        if amount <= ZERO:
            # Sub-cent share after rounding; nothing to post.
            logger.debug("Dropping zero obligation for user %s", user_id)
            continue
        obligations.append(Obligation(user_id=user_id, amount=amount))
    return obligations


def split_recorded_expense(expense: Expense) -> List[Obligation]:
    """Re-run the split stored on an existing expense."""
    return split_expense(
        expense.amount,
        expense.paid_by,
        expense.split_policy,
        expense.participant_ids,
        expense.shares,
    )


def _split_equal(total, participant_ids, shares):
    # dict.fromkeys keeps first-seen order while dropping repeats
    unique_ids = list(dict.fromkeys(participant_ids))
    if not unique_ids:
        raise InvalidSplit("Participant IDs required for EQUAL split")
    share = round_money(total / len(unique_ids))
    return [(user_id, share) for user_id in unique_ids]


def _split_exact(total, participant_ids, shares):
    _require_shares(shares, SplitPolicy.EXACT)
    split_sum = ZERO
    for share in shares:
        if share.amount is None or share.amount <= ZERO:
            raise InvalidSplit(
                f"Invalid amount for participant {share.user_id}: {share.amount}",
                user_id=share.user_id, amount=str(share.amount),
            )
        if not is_whole_cents(share.amount):
            raise InvalidSplit(
                f"Amount for participant {share.user_id} has sub-cent digits: {share.amount}",
                user_id=share.user_id, amount=str(share.amount),
            )
        split_sum += share.amount

    # One cent of rounding slack, no more
    if abs(split_sum - total) > CENT:
        raise InvalidSplit(
            f"Split amounts ({split_sum}) don't match total ({total})",
            split_sum=str(split_sum), total=str(total),
        )
    return [(share.user_id, round_money(share.amount)) for share in shares]


def _split_percentage(total, participant_ids, shares):
    _require_shares(shares, SplitPolicy.PERCENTAGE)
    pct_sum = ZERO
    for share in shares:
        pct = share.percentage
        if pct is None or pct <= ZERO or pct > HUNDRED:
            raise InvalidSplit(
                f"Invalid percentage for participant {share.user_id}: {pct}",
                user_id=share.user_id, percentage=str(pct),
            )
        pct_sum += pct

    if pct_sum != HUNDRED:
        raise InvalidSplit(
            f"Percentages must sum to 100, got: {pct_sum}", percentage_sum=str(pct_sum),
        )
    return [
        (share.user_id, round_money(total * share.percentage / HUNDRED))
        for share in shares
    ]


def _require_shares(shares: Sequence[ExpenseShare], policy: SplitPolicy) -> None:
    if not shares:
        raise InvalidSplit(f"Participants required for {policy.value} split")
    seen = set()
    for share in shares:
        if share.user_id in seen:
            raise InvalidSplit(
                f"Participant listed twice in {policy.value} split: {share.user_id}",
                user_id=share.user_id,
            )
        seen.add(share.user_id)


_Splitter = Callable[[Decimal, Sequence[str], Sequence[ExpenseShare]], List[tuple]]

_SPLITTERS: Dict[SplitPolicy, _Splitter] = {
    SplitPolicy.EQUAL: _split_equal,
    SplitPolicy.EXACT: _split_exact,
    SplitPolicy.PERCENTAGE: _split_percentage,
}


def participant_ids_for(
    policy: SplitPolicy, participant_ids: Sequence[str], shares: Sequence[ExpenseShare]
) -> List[str]:
    """The users an expense involves, in request order, without repeats."""
    if policy is SplitPolicy.EQUAL:
        return list(dict.fromkeys(participant_ids))
    return list(dict.fromkeys(share.user_id for share in shares))

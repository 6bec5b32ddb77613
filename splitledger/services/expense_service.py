import logging
from decimal import Decimal
from typing import List, Sequence

from splitledger.core.errors import NotFound
from splitledger.core.money import round_money
from splitledger.models.expense import Expense, ExpenseShare, Obligation, SplitPolicy
from splitledger.repositories.protocols import (
    AccountStore,
    ExpenseStore,
    GroupStore,
    UnitOfWork,
)
from splitledger.schemas.expense import ExpenseResponse, ExpenseResult
from splitledger.services.ledger_service import LedgerEngine
from splitledger.services.split_calculator import (
    participant_ids_for,
    split_expense,
    split_recorded_expense,
)

logger = logging.getLogger(__name__)


class ExpenseService:
    def __init__(
        self,
        uow: UnitOfWork,
        accounts: AccountStore,
        groups: GroupStore,
        expenses: ExpenseStore,
        engine: LedgerEngine,
    ):
        self.uow = uow
        self.accounts = accounts
        self.groups = groups
        self.expenses = expenses
        self.engine = engine

    async def create_expense(
        self,
        paid_by: str,
        description: str,
        amount: Decimal,
        group_id: str,
        split_policy: "SplitPolicy | str",
        participant_ids: Sequence[str] = (),
        shares: Sequence[ExpenseShare] = (),
    ) -> ExpenseResult:
        """
        Record an expense and post one ledger pair per obligation.

        Steps:
        1. Split (all monetary validation happens here)
        2. Resolve payer, group and participants
        3. Save the expense and every pair in one transaction
        """
        policy = SplitPolicy.parse(split_policy)
        obligations = split_expense(amount, paid_by, policy, participant_ids, shares)
        amount = round_money(amount)

        if await self.accounts.get_user(paid_by) is None:
            raise NotFound("User", paid_by)
        if await self.groups.get_group(group_id) is None:
            raise NotFound("Group", group_id)

        involved = participant_ids_for(policy, participant_ids, shares)
        found = {user.id for user in await self.accounts.find_users_by_ids(involved)}
        for user_id in involved:
            if user_id not in found:
                raise NotFound("Participant", user_id)

        expense = Expense(
            description=description,
            amount=amount,
            paid_by=paid_by,
            group_id=group_id,
            split_policy=policy,
            participant_ids=involved,
            shares=list(shares) if policy is not SplitPolicy.EQUAL else [],
        )
        percentages = {share.user_id: share.percentage for share in shares}

        reference_ids = []
        async with self.uow.transaction() as session:
            await self.expenses.save(expense, session=session)
            for obligation in obligations:
                debit, _ = await self.engine.record_double_entry(
                    obligation.user_id,
                    paid_by,
                    obligation.amount,
                    _posting_description(policy, description, percentages.get(obligation.user_id)),
                    expense_id=expense.id,
                    session=session,
                )
                reference_ids.append(debit.reference_id)

        logger.info(
            "Created %s expense: %s for amount: %s", policy.value, description, amount,
            extra={"expense_id": expense.id, "group_id": group_id},
        )
        return ExpenseResult(expense=expense, obligations=obligations, reference_ids=reference_ids)

    async def get_group_expenses(self, group_id: str) -> List[ExpenseResponse]:
        group = await self.groups.get_group(group_id)
        if group is None:
            raise NotFound("Group", group_id)

        expenses = await self.expenses.find_by_group(group_id)
        payers = await self.accounts.find_users_by_ids(
            list(dict.fromkeys(expense.paid_by for expense in expenses))
        )
        usernames = {user.id: user.username for user in payers}
        return [
            self.to_response(expense, group.name, usernames.get(expense.paid_by, "Unknown"))
            for expense in expenses
        ]

    @staticmethod
    def to_response(
        expense: Expense, group_name: str, payer_username: str,
        obligations: List[Obligation] | None = None,
    ) -> ExpenseResponse:
        if obligations is None:
            obligations = split_recorded_expense(expense)
        return ExpenseResponse(
            id=expense.id,
            description=expense.description,
            amount=expense.amount,
            paid_by=expense.paid_by,
            paid_by_username=payer_username,
            group_id=expense.group_id,
            group_name=group_name,
            split_type=expense.split_policy.value,
            created_at=expense.created_at,
            obligations=obligations,
        )


def _posting_description(policy: SplitPolicy, description: str, percentage) -> str:
    if policy is SplitPolicy.PERCENTAGE:
        return f"Split ({percentage}%): {description}"
    return f"Split ({policy.value.title()}): {description}"

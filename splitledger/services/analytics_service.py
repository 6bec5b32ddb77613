import logging
from datetime import datetime, timezone
from typing import List

from splitledger.core.errors import InvalidRequest, NotFound
from splitledger.core.money import ZERO, round_money
from splitledger.models.ledger import EntryDirection
from splitledger.models.settlement import SettlementPlanEntry
from splitledger.repositories.protocols import AccountStore, LedgerStore
from splitledger.schemas.analytics import MonthlyExpenseSummary
from splitledger.services.balance_aggregator import BalanceAggregator
from splitledger.services.debt_netting import net_debts

logger = logging.getLogger(__name__)


def month_bounds(year_month: str) -> tuple[datetime, datetime]:
    """``"2024-03"`` -> [2024-03-01, 2024-04-01) in UTC."""
    try:
        start = datetime.strptime(year_month, "%Y-%m").replace(tzinfo=timezone.utc)
    except ValueError:
        raise InvalidRequest(
            f"Invalid month, expected YYYY-MM: {year_month}", year_month=year_month,
        )
    if start.month == 12:
        end = start.replace(year=start.year + 1, month=1)
    else:
        end = start.replace(month=start.month + 1)
    return start, end


class AnalyticsService:
    def __init__(self, ledger: LedgerStore, accounts: AccountStore, balances: BalanceAggregator):
        self.ledger = ledger
        self.accounts = accounts
        self.balances = balances

    async def get_monthly_summary(self, user_id: str, year_month: str) -> MonthlyExpenseSummary:
        start, end = month_bounds(year_month)
        if await self.accounts.get_user(user_id) is None:
            raise NotFound("User", user_id)

        entries = await self.ledger.find_by_user_and_range(user_id, start, end)
        total_spent = ZERO
        total_received = ZERO
        for entry in entries:
            if entry.direction is EntryDirection.DEBIT:
                total_spent += entry.amount
            else:
                total_received += entry.amount

        return MonthlyExpenseSummary(
            month=start.strftime("%Y-%m"),
            total_spent=round_money(total_spent),
            total_received=round_money(total_received),
            net_balance=round_money(total_received - total_spent),
            transaction_count=len(entries),
        )

    async def get_group_debts(self, group_id: str) -> List[SettlementPlanEntry]:
        """Minimal payment plan that settles the group's current balances."""
        logger.info("Calculating group debts", extra={"group_id": group_id})
        balances = await self.balances.group_balances(group_id)

        users = await self.accounts.find_users_by_ids(list(balances))
        plan = net_debts(balances, {user.id: user.username for user in users})

        logger.info(
            "Calculated %d settlements for group", len(plan), extra={"group_id": group_id},
        )
        return plan

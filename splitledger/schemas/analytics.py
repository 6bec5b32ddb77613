from decimal import Decimal

from pydantic import BaseModel


class MonthlyExpenseSummary(BaseModel):
    month: str
    total_spent: Decimal
    total_received: Decimal
    net_balance: Decimal
    transaction_count: int

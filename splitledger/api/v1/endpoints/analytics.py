from typing import List

from fastapi import APIRouter, Depends, Query

from splitledger.api.deps import get_analytics_service, get_current_user
from splitledger.models.settlement import SettlementPlanEntry
from splitledger.models.user import User
from splitledger.schemas.analytics import MonthlyExpenseSummary
from splitledger.services.analytics_service import AnalyticsService

router = APIRouter()

@router.get("/monthly", response_model=MonthlyExpenseSummary)
async def get_monthly_summary(
    year_month: str = Query(..., description="Month as YYYY-MM"),
    current_user: User = Depends(get_current_user),
    service: AnalyticsService = Depends(get_analytics_service),
):
    return await service.get_monthly_summary(current_user.id, year_month)

@router.get("/group/{group_id}/settlements", response_model=List[SettlementPlanEntry])
async def get_group_settlement_plan(
    group_id: str,
    current_user: User = Depends(get_current_user),
    service: AnalyticsService = Depends(get_analytics_service),
):
    """Fewest payments that would settle the group."""
    return await service.get_group_debts(group_id)

from typing import List

from fastapi import APIRouter, Depends, status

from splitledger.api.deps import get_current_user, get_expense_service
from splitledger.models.user import User
from splitledger.schemas.expense import CreateExpenseRequest, ExpenseResponse
from splitledger.services.expense_service import ExpenseService

router = APIRouter()

@router.post("", response_model=ExpenseResponse, status_code=status.HTTP_201_CREATED)
async def create_expense(
    payload: CreateExpenseRequest,
    current_user: User = Depends(get_current_user),
    service: ExpenseService = Depends(get_expense_service),
):
    """Record an expense paid by the current user."""
    result = await service.create_expense(
        paid_by=current_user.id,
        description=payload.description,
        amount=payload.amount,
        group_id=payload.group_id,
        split_policy=payload.split_type,
        participant_ids=payload.participant_ids,
        shares=[participant.to_share() for participant in payload.participants],
    )
    group = await service.groups.get_group(payload.group_id)
    return ExpenseService.to_response(
        result.expense, group.name, current_user.username, result.obligations,
    )

@router.get("/group/{group_id}", response_model=List[ExpenseResponse])
async def get_group_expenses(
    group_id: str,
    current_user: User = Depends(get_current_user),
    service: ExpenseService = Depends(get_expense_service),
):
    return await service.get_group_expenses(group_id)

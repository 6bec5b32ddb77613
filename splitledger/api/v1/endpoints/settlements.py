from typing import List

from fastapi import APIRouter, Depends, status

from splitledger.api.deps import get_current_user, get_settlement_service
from splitledger.models.user import User
from splitledger.schemas.settlement import SettlementRequest, SettlementResponse
from splitledger.services.settlement_service import SettlementService

router = APIRouter()

@router.post("", response_model=SettlementResponse, status_code=status.HTTP_201_CREATED)
async def settle_up(
    payload: SettlementRequest,
    current_user: User = Depends(get_current_user),
    service: SettlementService = Depends(get_settlement_service),
):
    """The current user pays ``creditor_id``."""
    result = await service.settle_up(
        debtor_id=current_user.id,
        creditor_id=payload.creditor_id,
        group_id=payload.group_id,
        amount=payload.amount,
        note=payload.note,
    )
    responses = await service.to_responses([result.settlement])
    return responses[0]

@router.get("", response_model=List[SettlementResponse])
async def get_my_settlements(
    current_user: User = Depends(get_current_user),
    service: SettlementService = Depends(get_settlement_service),
):
    return await service.get_user_settlements(current_user.id)

@router.get("/with/{user_id}", response_model=List[SettlementResponse])
async def get_settlements_with(
    user_id: str,
    current_user: User = Depends(get_current_user),
    service: SettlementService = Depends(get_settlement_service),
):
    return await service.get_settlements_between(current_user.id, user_id)

@router.get("/group/{group_id}", response_model=List[SettlementResponse])
async def get_group_settlements(
    group_id: str,
    current_user: User = Depends(get_current_user),
    service: SettlementService = Depends(get_settlement_service),
):
    return await service.get_group_settlements(group_id)

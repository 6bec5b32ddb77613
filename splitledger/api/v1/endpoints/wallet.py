from typing import List

from fastapi import APIRouter, Depends

from splitledger.api.deps import get_current_user, get_ledger_service
from splitledger.models.user import User
from splitledger.schemas.wallet import TransactionResponse, WalletBalanceResponse
from splitledger.services.ledger_service import LedgerService

router = APIRouter()

@router.get("/balance", response_model=WalletBalanceResponse)
async def get_balance(
    current_user: User = Depends(get_current_user),
    service: LedgerService = Depends(get_ledger_service),
):
    """Get current user's balance"""
    return await service.get_user_balance(current_user.id)

@router.get("/transactions", response_model=List[TransactionResponse])
async def get_transactions(
    current_user: User = Depends(get_current_user),
    service: LedgerService = Depends(get_ledger_service),
):
    entries = await service.get_user_transactions(current_user.id)
    return await service.describe_transactions(entries)
